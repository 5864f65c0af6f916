"""API request/response Pydantic schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field

from manifestcheck.models.errors import DiagnosticDetail


class ValidateRequest(BaseModel):
    """Request body for POST /validate."""

    document_yaml: str = Field(description="YAML document stream to validate")
    filename: str = Field(default="<request>", description="Name reported in diagnostic spans")


class ValidateResponse(BaseModel):
    """Response body for POST /validate."""

    valid: bool
    errors: list[DiagnosticDetail] = []
    warnings: list[DiagnosticDetail] = []


class SchemaSummaryResponse(BaseModel):
    """Response for GET /schema."""

    root_nodes: list[str] = []
    known_keys: int = 0


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = ""
