"""Domain models for manifestcheck: document tree, schema model, diagnostics."""

from manifestcheck.models.errors import (
    DiagnosticCode,
    DiagnosticDetail,
    DiagnosticSeverity,
    SourceSpan,
    ValidationResult,
)
from manifestcheck.models.schema import SchemaDescriptor, SchemaModel
from manifestcheck.models.tree import (
    Alias,
    Mapping,
    MappingCollection,
    Scalar,
    ScalarKind,
    Sequence,
    TreeNode,
)

__all__ = [
    "Alias",
    "DiagnosticCode",
    "DiagnosticDetail",
    "DiagnosticSeverity",
    "Mapping",
    "MappingCollection",
    "Scalar",
    "ScalarKind",
    "SchemaDescriptor",
    "SchemaModel",
    "Sequence",
    "SourceSpan",
    "TreeNode",
    "ValidationResult",
]
