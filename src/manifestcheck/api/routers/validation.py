"""Validation endpoints: POST /validate, GET /schema."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from manifestcheck.api.deps import get_document_validator
from manifestcheck.api.schemas import SchemaSummaryResponse, ValidateRequest, ValidateResponse
from manifestcheck.service.document_validator import DocumentValidator

router = APIRouter()


@router.post("/validate", response_model=ValidateResponse)
async def validate_document(
    body: ValidateRequest,
    validator: DocumentValidator = Depends(get_document_validator),  # noqa: B008
) -> ValidateResponse:
    """Validate a YAML document stream against the loaded schema."""
    result = validator.validate(body.document_yaml, filename=body.filename)
    return ValidateResponse(valid=result.valid, errors=result.errors, warnings=result.warnings)


@router.get("/schema", response_model=SchemaSummaryResponse)
async def schema_summary(
    validator: DocumentValidator = Depends(get_document_validator),  # noqa: B008
) -> SchemaSummaryResponse:
    """Summarise the schema the server validates against."""
    schema = validator.schema
    return SchemaSummaryResponse(
        root_nodes=sorted(schema.root_nodes),
        known_keys=len(schema.children_nodes),
    )
