"""Flattened schema lookup tables consumed by the tree validator."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SchemaDescriptor(BaseModel):
    """Expected scalar type and permitted child keys for one key in one context."""

    model_config = ConfigDict(frozen=True)

    type: str
    children: tuple[str, ...] = ()


class SchemaModel(BaseModel):
    """Adjacency model built once from a schema definition.

    ``root_nodes`` are the keys allowed at document root. ``children_nodes``
    maps every known key to the descriptors registered for it; a key that is
    legal under several parents carries one descriptor per context.
    """

    model_config = ConfigDict(frozen=True)

    root_nodes: frozenset[str] = frozenset()
    children_nodes: dict[str, tuple[SchemaDescriptor, ...]] = Field(default_factory=dict)

    def is_root(self, key: str) -> bool:
        return key in self.root_nodes

    def is_known(self, key: str) -> bool:
        return key in self.children_nodes

    def descriptors(self, key: str) -> tuple[SchemaDescriptor, ...]:
        return self.children_nodes.get(key, ())

    def allowed_children(self, key: str) -> set[str]:
        """Union of the child keys of every descriptor registered for ``key``."""
        allowed: set[str] = set()
        for descriptor in self.descriptors(key):
            allowed.update(descriptor.children)
        return allowed

    def declared_types(self, key: str) -> set[str]:
        return {descriptor.type for descriptor in self.descriptors(key)}
