"""Structured diagnostic models with YAML source position tracking."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel


class SourceSpan(BaseModel):
    """Points to exact location in YAML source for diagnostic reporting."""

    file: str
    line: int
    column: int
    end_line: int | None = None
    end_column: int | None = None


class DiagnosticSeverity(StrEnum):
    ERROR = "error"
    WARNING = "warning"


class DiagnosticCode(StrEnum):
    UNKNOWN_KEY = "UNKNOWN_KEY"
    ROOT_MISUSE = "ROOT_MISUSE"
    INVALID_STATEMENT = "INVALID_STATEMENT"
    INVALID_CHILD = "INVALID_CHILD"
    TYPE_MISMATCH = "TYPE_MISMATCH"
    UNSUPPORTED_ALIAS = "UNSUPPORTED_ALIAS"


# Message vocabulary shown to editor users, one per code.
DIAGNOSTIC_MESSAGES: dict[DiagnosticCode, str] = {
    DiagnosticCode.UNKNOWN_KEY: "Command not found in k8s",
    DiagnosticCode.ROOT_MISUSE: "Command is not a root node",
    DiagnosticCode.INVALID_STATEMENT: "This is not a valid statement",
    DiagnosticCode.INVALID_CHILD: "This is not a valid child node of the parent",
    DiagnosticCode.TYPE_MISMATCH: "Not a valid type",
    DiagnosticCode.UNSUPPORTED_ALIAS: "Aliases are not supported",
}


class DiagnosticDetail(BaseModel):
    """A single diagnostic in serializable form."""

    code: str
    message: str
    severity: DiagnosticSeverity = DiagnosticSeverity.WARNING
    target: str | None = None
    span: SourceSpan | None = None


class ValidationResult(BaseModel):
    """Result of validating one YAML document stream."""

    valid: bool
    errors: list[DiagnosticDetail] = []
    warnings: list[DiagnosticDetail] = []
