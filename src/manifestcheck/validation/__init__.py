"""Advisory validation of document trees against a flattened schema."""

from manifestcheck.validation.diagnostics import Diagnostic, DiagnosticSink
from manifestcheck.validation.paths import Path, PathArena
from manifestcheck.validation.validator import TreeValidator, validate_tree

__all__ = [
    "Diagnostic",
    "DiagnosticSink",
    "Path",
    "PathArena",
    "TreeValidator",
    "validate_tree",
]
