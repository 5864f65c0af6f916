"""Flatten a JSON-Schema-shaped definition into root and adjacency tables.

Only ``properties``, ``items`` and ``type`` are interpreted. References,
composition keywords and conditionals are left alone; a property whose
shape is hidden behind them simply has no known children.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from manifestcheck.models.schema import SchemaDescriptor, SchemaModel

logger = logging.getLogger("manifestcheck.schema")


class SchemaLoadError(Exception):
    """Raised when a schema file cannot be read or has the wrong shape."""


class SchemaTransformer:
    """Builds a ``SchemaModel`` from a JSON-Schema-shaped ``dict``."""

    def transform(self, raw: dict[str, Any]) -> SchemaModel:
        if not isinstance(raw, dict):
            raise SchemaLoadError("Schema definition must be a mapping")
        if "rootNodes" in raw or "childrenNodes" in raw:
            return self.from_tables(raw)

        top_level = self._child_properties(raw)
        children_nodes: dict[str, list[SchemaDescriptor]] = {}

        stack: list[tuple[str, Any]] = list(reversed(list(top_level.items())))
        while stack:
            name, subschema = stack.pop()
            if not isinstance(subschema, dict):
                continue
            nested = self._child_properties(subschema)
            children = tuple(nested)
            for type_name in self._declared_types(subschema):
                children_nodes.setdefault(name, []).append(
                    SchemaDescriptor(type=type_name, children=children)
                )
            stack.extend(reversed(list(nested.items())))

        model = SchemaModel(
            root_nodes=frozenset(top_level),
            children_nodes={key: tuple(value) for key, value in children_nodes.items()},
        )
        logger.debug(
            "Schema flattened: %d root keys, %d known keys",
            len(model.root_nodes),
            len(model.children_nodes),
        )
        return model

    @staticmethod
    def from_tables(raw: dict[str, Any]) -> SchemaModel:
        """Accept already-flattened ``rootNodes`` / ``childrenNodes`` tables."""
        roots = raw.get("rootNodes", [])
        if isinstance(roots, dict):
            roots = [key for key, enabled in roots.items() if enabled]
        elif not isinstance(roots, list):
            raise SchemaLoadError("'rootNodes' must be a list of keys or a mapping of key to bool")
        children_raw = raw.get("childrenNodes", {})
        if not isinstance(children_raw, dict):
            raise SchemaLoadError("'childrenNodes' must be a mapping of key to descriptors")

        children_nodes: dict[str, tuple[SchemaDescriptor, ...]] = {}
        try:
            for key, descriptors in children_raw.items():
                if not isinstance(descriptors, list) or not all(
                    isinstance(d, dict) for d in descriptors
                ):
                    raise SchemaLoadError(
                        f"'childrenNodes.{key}' must be a list of descriptor mappings"
                    )
                children_nodes[key] = tuple(
                    SchemaDescriptor(
                        type=d.get("type", "string"),
                        children=tuple(d.get("children", [])),
                    )
                    for d in descriptors
                )
            return SchemaModel(root_nodes=frozenset(roots), children_nodes=children_nodes)
        except (TypeError, ValidationError) as exc:
            raise SchemaLoadError(f"Invalid schema tables: {exc}") from exc

    def _child_properties(self, subschema: dict[str, Any]) -> dict[str, Any]:
        """Properties of an object schema, or of its array items."""
        found: dict[str, Any] = {}
        properties = subschema.get("properties")
        if isinstance(properties, dict):
            found.update(properties)
        items = subschema.get("items")
        if isinstance(items, dict):
            found.update(self._child_properties(items))
        elif isinstance(items, list):
            for item in items:
                if isinstance(item, dict):
                    found.update(self._child_properties(item))
        return found

    @staticmethod
    def _declared_types(subschema: dict[str, Any]) -> list[str]:
        declared = subschema.get("type")
        if isinstance(declared, str):
            return [declared]
        if isinstance(declared, list) and declared:
            return [str(t) for t in declared]
        if "properties" in subschema:
            return ["object"]
        if "items" in subschema:
            return ["array"]
        return ["string"]


def load_schema(path: Path) -> SchemaModel:
    """Read a JSON or YAML schema file and flatten it."""
    try:
        with path.open("r", encoding="utf-8") as handle:
            if path.suffix == ".json":
                raw = json.load(handle)
            else:
                raw = YAML(typ="safe", pure=True).load(handle)
    except (OSError, UnicodeDecodeError) as exc:
        raise SchemaLoadError(f"Cannot read schema '{path}': {exc}") from exc
    except (json.JSONDecodeError, YAMLError) as exc:
        raise SchemaLoadError(f"Schema '{path}' is not valid JSON/YAML: {exc}") from exc
    logger.info("Loading schema from %s", path)
    return SchemaTransformer().transform(raw)
