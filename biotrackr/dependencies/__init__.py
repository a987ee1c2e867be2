"""Expose dependency helpers for FastAPI routers and workers."""

from .clients import (
    get_document_store,
    get_fitbit_client,
    get_health_check,
    get_ingestion_service,
    get_secrets_client,
    get_token_refresh_service,
)

__all__ = [
    "get_document_store",
    "get_fitbit_client",
    "get_health_check",
    "get_ingestion_service",
    "get_secrets_client",
    "get_token_refresh_service",
]
