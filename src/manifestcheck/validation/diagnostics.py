"""Append-only diagnostic collection."""

from __future__ import annotations

from dataclasses import dataclass

from manifestcheck.models.errors import (
    DIAGNOSTIC_MESSAGES,
    DiagnosticCode,
    DiagnosticDetail,
    DiagnosticSeverity,
    SourceSpan,
)
from manifestcheck.models.tree import Alias, Mapping, Scalar, TreeNode


@dataclass(frozen=True)
class Diagnostic:
    """One advisory annotation attached to a tree node."""

    target: TreeNode
    code: DiagnosticCode
    message: str
    severity: DiagnosticSeverity = DiagnosticSeverity.WARNING

    @property
    def span(self) -> SourceSpan | None:
        return self.target.span

    @property
    def target_text(self) -> str | None:
        """Short source text of the flagged node: its key, scalar text or alias name."""
        if isinstance(self.target, Mapping):
            return self.target.key
        if isinstance(self.target, Scalar):
            return self.target.text
        if isinstance(self.target, Alias):
            return f"*{self.target.anchor}"
        return None

    def to_detail(self) -> DiagnosticDetail:
        return DiagnosticDetail(
            code=self.code.value,
            message=self.message,
            severity=self.severity,
            target=self.target_text,
            span=self.span,
        )


class DiagnosticSink:
    """Collects diagnostics in the order they are reported.

    Single writer; read ``results()`` once the writer is done.
    """

    def __init__(self) -> None:
        self._diagnostics: list[Diagnostic] = []

    def add(
        self,
        target: TreeNode,
        code: DiagnosticCode,
        severity: DiagnosticSeverity = DiagnosticSeverity.WARNING,
    ) -> Diagnostic:
        diagnostic = Diagnostic(
            target=target,
            code=code,
            message=DIAGNOSTIC_MESSAGES[code],
            severity=severity,
        )
        self._diagnostics.append(diagnostic)
        return diagnostic

    def results(self) -> list[Diagnostic]:
        return list(self._diagnostics)

    def __len__(self) -> int:
        return len(self._diagnostics)
