"""Schema adjacency and scalar type validation over a parsed document tree."""

from __future__ import annotations

import logging

from manifestcheck.models.errors import DiagnosticCode
from manifestcheck.models.schema import SchemaModel
from manifestcheck.models.tree import (
    Alias,
    Mapping,
    MappingCollection,
    Scalar,
    ScalarKind,
    Sequence,
    TreeNode,
)
from manifestcheck.validation.diagnostics import Diagnostic, DiagnosticSink
from manifestcheck.validation.paths import Path, PathArena
from manifestcheck.validation.scalars import parse_date_like

logger = logging.getLogger("manifestcheck.validation")


class TreeValidator:
    """Walks a document tree depth-first and reports advisory diagnostics.

    The schema is read-only and may be shared between validators. Each
    ``traverse`` call owns its own worklist; diagnostics accumulate in
    ``sink`` until the caller reads them with ``get_diagnostics()``.
    """

    def __init__(self, schema: SchemaModel, sink: DiagnosticSink | None = None) -> None:
        self.schema = schema
        self.sink = sink if sink is not None else DiagnosticSink()

    def traverse(self, root: TreeNode | None) -> None:
        """Validate every mapping reachable from ``root`` through valid adjacencies."""
        arena = PathArena()
        worklist: list[int] = []

        for entry in _root_mappings(root):
            if self.schema.is_root(entry.key):
                worklist.append(arena.root(entry))
            elif self.schema.is_known(entry.key):
                self.sink.add(entry, DiagnosticCode.ROOT_MISUSE)
            else:
                self.sink.add(entry, DiagnosticCode.UNKNOWN_KEY)

        while worklist:
            index = worklist.pop()
            path = arena.view(index)
            current = path.current

            if not self.schema.is_known(current.key):
                self.sink.add(current.key_node, DiagnosticCode.UNKNOWN_KEY)

            # Children are pushed only after an adjacency check, so this guards
            # against paths extended outside the loop.
            if not self.is_valid(path):
                self.sink.add(current.key_node, DiagnosticCode.INVALID_STATEMENT)
                continue

            if current.value is not None and self.is_invalid_type(current):
                self.sink.add(current.value, DiagnosticCode.TYPE_MISMATCH)

            for child in self.generate_children(current.value):
                if isinstance(child, Alias):
                    self.sink.add(child, DiagnosticCode.UNSUPPORTED_ALIAS)
                    continue
                if self._is_adjacent(current.key, child.key):
                    worklist.append(arena.extend(index, child))
                    continue
                if not self.schema.is_known(child.key):
                    self.sink.add(child, DiagnosticCode.UNKNOWN_KEY)
                self.sink.add(child, DiagnosticCode.INVALID_CHILD)

        logger.debug(
            "Traversal visited %d paths, %d diagnostics so far", len(arena), len(self.sink)
        )

    def is_valid(self, path: Path) -> bool:
        """A path is valid when its last key may sit directly under the one before it."""
        parent = path.parent
        if parent is None:
            return True
        return self._is_adjacent(parent.key, path.current.key)

    def is_invalid_type(self, node: Mapping | None) -> bool:
        """True when a scalar value does not match any type declared for its key.

        Structural values (collections, sequences, aliases) and nulls are
        never type mismatches. Keys unknown to the schema are already
        reported as unknown, so they have no declared types to check.
        """
        if node is None or not isinstance(node.value, Scalar):
            return False
        # No declared types to compare against; UNKNOWN_KEY covers it.
        if not self.schema.is_known(node.key):
            return False

        value = node.value
        expected = self.schema.declared_types(node.key)
        if value.kind is ScalarKind.NULL:
            return False
        # No distinct float type exists on this side; every number needs "integer".
        if value.kind is ScalarKind.NUMBER:
            return "integer" not in expected
        if value.kind is ScalarKind.DATE:
            return parse_date_like(value.text) is None
        return value.kind.value not in expected

    def generate_children(self, node: TreeNode | None) -> list[Mapping | Alias]:
        """Mappings one level below ``node``, with sequence items flattened in order."""
        if node is None or isinstance(node, Scalar):
            return []
        if isinstance(node, (Mapping, Alias)):
            return [node]
        if isinstance(node, MappingCollection):
            return list(node.mappings)
        if isinstance(node, Sequence):
            children: list[Mapping | Alias] = []
            for item in node.items:
                children.extend(self.generate_children(item))
            return children
        return []

    def get_diagnostics(self) -> list[Diagnostic]:
        return self.sink.results()

    def _is_adjacent(self, parent_key: str, child_key: str) -> bool:
        if not self.schema.is_known(parent_key):
            return False
        return child_key in self.schema.allowed_children(parent_key)


def _root_mappings(root: TreeNode | None) -> list[Mapping]:
    if isinstance(root, MappingCollection):
        return root.mappings or []
    return []


def validate_tree(schema: SchemaModel, root: TreeNode | None) -> list[Diagnostic]:
    """Run one traversal with a fresh sink and return its diagnostics."""
    validator = TreeValidator(schema)
    validator.traverse(root)
    return validator.get_diagnostics()
