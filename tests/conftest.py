"""Shared test fixtures for manifestcheck."""

from __future__ import annotations

import pytest

from manifestcheck.models.schema import SchemaDescriptor, SchemaModel
from manifestcheck.parser.loader import TrackedLoader
from manifestcheck.schema.transformer import load_schema
from manifestcheck.settings import DEFAULT_SCHEMA_PATH


@pytest.fixture
def loader() -> TrackedLoader:
    return TrackedLoader()


@pytest.fixture
def replicas_schema() -> SchemaModel:
    """Root ``spec`` holding an integer ``replicas``."""
    return SchemaModel(
        root_nodes=frozenset({"spec"}),
        children_nodes={
            "spec": (SchemaDescriptor(type="string", children=("replicas",)),),
            "replicas": (SchemaDescriptor(type="integer"),),
        },
    )


@pytest.fixture
def k8s_schema() -> SchemaModel:
    """The bundled Kubernetes workload schema."""
    return load_schema(DEFAULT_SCHEMA_PATH)


VALID_DEPLOYMENT_YAML = """\
apiVersion: apps/v1
kind: Deployment
metadata:
  name: web
  namespace: default
spec:
  replicas: 2
  paused: false
  template:
    metadata:
      name: web-pod
    spec:
      restartPolicy: Always
      containers:
        - name: web
          image: nginx:1.25
          args: ["--port", "8080"]
          ports:
            - containerPort: 8080
              protocol: TCP
"""

BROKEN_DEPLOYMENT_YAML = """\
apiVersion: apps/v1
kind: Deployment
spec:
  replicas: two
  template:
    spec:
      containers:
        - name: web
          imagee: nginx
"""
