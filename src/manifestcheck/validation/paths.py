"""Root-to-node paths stored as parent links in a shared arena.

Extending a path appends one entry instead of copying the whole lineage,
so the worklist only holds integer indices.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from manifestcheck.models.tree import Mapping

_NO_PARENT = -1


@dataclass(frozen=True)
class _Entry:
    node: Mapping
    parent: int
    depth: int


class PathArena:
    """Append-only store of path entries; index ``i`` names one full path."""

    def __init__(self) -> None:
        self._entries: list[_Entry] = []

    def root(self, node: Mapping) -> int:
        return self._append(node, _NO_PARENT, 1)

    def extend(self, index: int, node: Mapping) -> int:
        return self._append(node, index, self._entries[index].depth + 1)

    def view(self, index: int) -> Path:
        return Path(self, index)

    def _append(self, node: Mapping, parent: int, depth: int) -> int:
        self._entries.append(_Entry(node=node, parent=parent, depth=depth))
        return len(self._entries) - 1

    def __len__(self) -> int:
        return len(self._entries)


@dataclass(frozen=True)
class Path:
    """Read-only view over one arena path."""

    arena: PathArena
    index: int

    @property
    def current(self) -> Mapping:
        return self.arena._entries[self.index].node

    @property
    def parent(self) -> Mapping | None:
        parent_index = self.arena._entries[self.index].parent
        if parent_index == _NO_PARENT:
            return None
        return self.arena._entries[parent_index].node

    def __len__(self) -> int:
        return self.arena._entries[self.index].depth

    def __iter__(self) -> Iterator[Mapping]:
        lineage: list[Mapping] = []
        index = self.index
        while index != _NO_PARENT:
            entry = self.arena._entries[index]
            lineage.append(entry.node)
            index = entry.parent
        return reversed(lineage)

    @property
    def keys(self) -> list[str]:
        return [node.key for node in self]
