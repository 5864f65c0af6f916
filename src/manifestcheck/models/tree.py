"""Immutable document tree nodes produced by the YAML loader.

The validator only ever sees these types; ruamel.yaml nodes never leak
past the loader.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum

from manifestcheck.models.errors import SourceSpan


class ScalarKind(StrEnum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    NULL = "null"


ScalarValue = str | int | float | bool | date | datetime | None


@dataclass(frozen=True, eq=False)
class Scalar:
    """A leaf value. ``text`` keeps the source spelling, ``value`` the decoded form."""

    kind: ScalarKind
    value: ScalarValue
    text: str = ""
    span: SourceSpan | None = None

    @classmethod
    def string(cls, v: str, span: SourceSpan | None = None) -> Scalar:
        return cls(kind=ScalarKind.STRING, value=v, text=v, span=span)

    @classmethod
    def number(cls, v: int | float, span: SourceSpan | None = None) -> Scalar:
        return cls(kind=ScalarKind.NUMBER, value=v, text=str(v), span=span)

    @classmethod
    def boolean(cls, v: bool, span: SourceSpan | None = None) -> Scalar:
        return cls(kind=ScalarKind.BOOLEAN, value=v, text=str(v).lower(), span=span)

    @classmethod
    def date_like(cls, text: str, span: SourceSpan | None = None) -> Scalar:
        return cls(kind=ScalarKind.DATE, value=text, text=text, span=span)

    @classmethod
    def null(cls, span: SourceSpan | None = None) -> Scalar:
        return cls(kind=ScalarKind.NULL, value=None, text="null", span=span)


@dataclass(frozen=True, eq=False)
class Alias:
    """A reference to an anchored node (``*name``). Never expanded."""

    anchor: str
    span: SourceSpan | None = None


@dataclass(frozen=True, eq=False)
class Mapping:
    """A single ``key: value`` entry."""

    key_node: Scalar
    value: TreeNode | None = None
    span: SourceSpan | None = None

    @property
    def key(self) -> str:
        return self.key_node.text


@dataclass(frozen=True, eq=False)
class MappingCollection:
    """An ordered block or flow mapping."""

    mappings: list[Mapping] = field(default_factory=list)
    span: SourceSpan | None = None


@dataclass(frozen=True, eq=False)
class Sequence:
    """An ordered block or flow sequence."""

    items: list[TreeNode] = field(default_factory=list)
    span: SourceSpan | None = None


TreeNode = Scalar | Alias | Mapping | MappingCollection | Sequence


def mapping(key: str, value: TreeNode | None = None) -> Mapping:
    """Shorthand for building a ``Mapping`` without source positions."""
    return Mapping(key_node=Scalar.string(key), value=value)


def collection(*entries: Mapping) -> MappingCollection:
    return MappingCollection(mappings=list(entries))
