"""Service layer reusable by the CLI and the REST API."""

from manifestcheck.service.document_validator import DocumentValidator

__all__ = ["DocumentValidator"]
