"""YAML loader producing position-tracked document trees for validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.nodes import MappingNode, ScalarNode, SequenceNode

from manifestcheck.models.errors import SourceSpan
from manifestcheck.models.tree import (
    Alias,
    Mapping,
    MappingCollection,
    Scalar,
    ScalarKind,
    Sequence,
    TreeNode,
)

# ---------------------------------------------------------------------------
# Safety limits
# ---------------------------------------------------------------------------

_MAX_DOCUMENT_SIZE = 5_000_000  # 5M characters
_MAX_NODE_COUNT = 50_000
_MAX_DEPTH = 64

_TAG_PREFIX = "tag:yaml.org,2002:"


class YAMLSafetyError(Exception):
    """Raised when YAML input violates safety constraints.

    Distinct from parse errors: these indicate oversized or pathologically
    nested input rather than a syntax problem.
    """


class _ConversionState:
    """Per-document bookkeeping while converting ruamel nodes."""

    def __init__(self, filename: str, node_limit: int) -> None:
        self.filename = filename
        self.node_limit = node_limit
        self.count = 0
        self.seen: set[int] = set()

    def visit(self) -> None:
        self.count += 1
        if self.count > self.node_limit:
            raise YAMLSafetyError(
                f"YAML document exceeds maximum node count ({self.node_limit:,})"
            )


class TrackedLoader:
    """YAML loader that keeps source positions on every tree node.

    Uses ruamel.yaml's composer, which preserves line/column marks and the
    resolver tag of each scalar, so no value is ever constructed into
    Python objects before the tree is built.
    """

    def __init__(
        self,
        max_document_size: int = _MAX_DOCUMENT_SIZE,
        max_node_count: int = _MAX_NODE_COUNT,
        max_depth: int = _MAX_DEPTH,
    ) -> None:
        self._yaml = YAML(typ="rt")
        self._max_document_size = max_document_size
        self._max_node_count = max_node_count
        self._max_depth = max_depth

    # -- safety checks -------------------------------------------------------

    def _check_yaml_safety(self, content: str) -> None:
        if len(content) > self._max_document_size:
            raise YAMLSafetyError(
                f"YAML document exceeds maximum size "
                f"({len(content):,} chars > {self._max_document_size:,} limit)"
            )

    # -- public loading API --------------------------------------------------

    def load(self, path: Path) -> list[TreeNode | None]:
        """Load a YAML file and return one tree per document in the stream."""
        with path.open("r", encoding="utf-8") as handle:
            content = handle.read()
        return self.load_string(content, filename=str(path))

    def load_string(self, content: str, filename: str = "<string>") -> list[TreeNode | None]:
        """Load YAML from a string. An empty stream yields no documents."""
        self._check_yaml_safety(content)
        documents: list[TreeNode | None] = []
        for node in self._yaml.compose_all(content):
            if node is None:
                documents.append(None)
                continue
            state = _ConversionState(filename, self._max_node_count)
            documents.append(self._convert(node, state, depth=0))
        return documents

    # -- conversion ----------------------------------------------------------

    def _convert(self, node: Any, state: _ConversionState, depth: int) -> TreeNode:
        if depth > self._max_depth:
            raise YAMLSafetyError(
                f"YAML document exceeds maximum nesting depth ({self._max_depth})"
            )
        state.visit()
        span = self._span(node, state.filename)

        # The composer hands back the anchored node itself for every alias.
        if id(node) in state.seen:
            return Alias(anchor=node.anchor or "", span=span)
        state.seen.add(id(node))

        if isinstance(node, ScalarNode):
            return self._convert_scalar(node, span)
        if isinstance(node, SequenceNode):
            return Sequence(
                items=[self._convert(item, state, depth + 1) for item in node.value],
                span=span,
            )
        if isinstance(node, MappingNode):
            mappings: list[Mapping] = []
            for key_node, value_node in node.value:
                mappings.append(self._convert_entry(key_node, value_node, state, depth + 1))
            return MappingCollection(mappings=mappings, span=span)
        raise TypeError(f"Unexpected YAML node type: {type(node).__name__}")

    def _convert_entry(
        self, key_node: Any, value_node: Any, state: _ConversionState, depth: int
    ) -> Mapping:
        state.visit()
        key_span = self._span(key_node, state.filename)
        key = Scalar.string(self._key_text(key_node), span=key_span)

        value: TreeNode | None
        if _is_empty_value(value_node):
            value = None
            end = key_span
        else:
            value = self._convert(value_node, state, depth)
            end = value.span or key_span
        span = SourceSpan(
            file=state.filename,
            line=key_span.line,
            column=key_span.column,
            end_line=end.end_line,
            end_column=end.end_column,
        )
        return Mapping(key_node=key, value=value, span=span)

    @staticmethod
    def _convert_scalar(node: ScalarNode, span: SourceSpan) -> Scalar:
        tag = node.tag or ""
        text = node.value
        if tag == _TAG_PREFIX + "null":
            return Scalar.null(span=span)
        if tag == _TAG_PREFIX + "bool":
            return Scalar.boolean(text.lower() == "true", span=span)
        if tag in (_TAG_PREFIX + "int", _TAG_PREFIX + "float"):
            return Scalar(kind=ScalarKind.NUMBER, value=_decode_number(text), text=text, span=span)
        if tag == _TAG_PREFIX + "timestamp":
            return Scalar.date_like(text, span=span)
        return Scalar.string(text, span=span)

    @staticmethod
    def _key_text(key_node: Any) -> str:
        if isinstance(key_node, ScalarNode):
            return str(key_node.value)
        return ""

    @staticmethod
    def _span(node: Any, filename: str) -> SourceSpan:
        start = node.start_mark
        end = node.end_mark
        return SourceSpan(
            file=filename,
            line=start.line + 1,
            column=start.column + 1,
            end_line=end.line + 1 if end is not None else None,
            end_column=end.column + 1 if end is not None else None,
        )


def _is_empty_value(node: Any) -> bool:
    """``key:`` with nothing after it, as opposed to an explicit ``null``."""
    return (
        isinstance(node, ScalarNode)
        and node.tag == _TAG_PREFIX + "null"
        and node.value == ""
        and node.anchor is None
    )


def _decode_number(text: str) -> int | float | str:
    cleaned = text.replace("_", "")
    lowered = cleaned.lower()
    if lowered.lstrip("+-") in (".inf", ".nan"):
        return float(lowered.replace(".", ""))
    try:
        return int(cleaned, 0)
    except ValueError:
        pass
    try:
        return int(cleaned, 10)
    except ValueError:
        pass
    try:
        return float(cleaned)
    except ValueError:
        return text
