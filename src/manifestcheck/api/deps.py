"""Dependency injection for FastAPI: DocumentValidator singleton."""

from __future__ import annotations

from manifestcheck.service.document_validator import DocumentValidator

_document_validator: DocumentValidator | None = None


def init_document_validator(validator: DocumentValidator) -> None:
    """Set the global DocumentValidator (called at app startup)."""
    global _document_validator  # noqa: PLW0603
    _document_validator = validator


def get_document_validator() -> DocumentValidator:
    """FastAPI ``Depends`` provider for DocumentValidator."""
    if _document_validator is None:
        raise RuntimeError(
            "DocumentValidator not initialised; call init_document_validator() first"
        )
    return _document_validator


def reset_document_validator() -> None:
    """Clear the global DocumentValidator (for tests)."""
    global _document_validator  # noqa: PLW0603
    _document_validator = None
