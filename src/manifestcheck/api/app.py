"""FastAPI application factory for manifestcheck."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from manifestcheck import __version__
from manifestcheck.api.deps import init_document_validator, reset_document_validator
from manifestcheck.api.middleware import RequestBodyLimitMiddleware, RequestTimingMiddleware
from manifestcheck.api.routers import validation
from manifestcheck.api.schemas import HealthResponse
from manifestcheck.parser.loader import TrackedLoader
from manifestcheck.schema.transformer import load_schema
from manifestcheck.service.document_validator import DocumentValidator
from manifestcheck.settings import Settings

logger = logging.getLogger("manifestcheck.api")


def build_document_validator(settings: Settings) -> DocumentValidator:
    """Load the configured schema once and wrap it in a DocumentValidator."""
    schema = load_schema(settings.schema_path)
    loader = TrackedLoader(max_document_size=settings.max_document_size)
    return DocumentValidator(schema, loader=loader)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Load the schema at startup and drop it at shutdown."""
    settings: Settings = app.state.settings
    init_document_validator(build_document_validator(settings))
    try:
        yield
    finally:
        reset_document_validator()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title="manifestcheck",
        description="Advisory schema validation for YAML resource manifests.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Middleware
    app.add_middleware(RequestBodyLimitMiddleware)
    app.add_middleware(RequestTimingMiddleware)

    app.include_router(validation.router, tags=["validation"])

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", version=__version__)

    return app


def main() -> None:
    """Run the REST API server using settings from environment / .env file."""
    settings = Settings()

    logging.basicConfig(level=settings.log_level.upper())
    logger.info(
        "manifestcheck API server v%s starting (host=%s, port=%d, schema=%s)",
        __version__, settings.api_server_host, settings.effective_port, settings.schema_path,
    )

    uvicorn.run(
        "manifestcheck.api.app:create_app",
        factory=True,
        host=settings.api_server_host,
        port=settings.effective_port,
        log_level=settings.log_level.lower(),
    )
