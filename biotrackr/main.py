"""
FastAPI application entrypoints for the Food and Sleep read APIs.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from biotrackr.api.routes import (
    build_document_router,
    health_router,
    request_validation_handler,
)
from biotrackr.core.config import get_settings
from biotrackr.core.logging import configure_logging
from biotrackr.models import FOOD_DOCUMENT_TYPE, SLEEP_DOCUMENT_TYPE


def create_app(document_type: str) -> FastAPI:
    """Factory for a single-domain read API."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=f"Biotrackr {document_type} API",
        version="0.1.0",
        description=f"Paginated read access to persisted {document_type} documents.",
    )
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.include_router(health_router)
    app.include_router(build_document_router(document_type))
    return app


food_app = create_app(FOOD_DOCUMENT_TYPE)
sleep_app = create_app(SLEEP_DOCUMENT_TYPE)

__all__ = ["create_app", "food_app", "sleep_app"]
