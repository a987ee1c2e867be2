"""
Factory functions to provide shared clients and services to the APIs and workers.
"""

from functools import lru_cache

from biotrackr.clients import (
    DocumentStore,
    DynamoDBDocumentStore,
    FitbitClient,
    SecretsManagerClient,
    SQLiteDocumentStore,
)
from biotrackr.core.config import get_settings
from biotrackr.services import (
    DOMAINS,
    DocumentIngestionService,
    DocumentStoreHealthCheck,
    TokenRefreshService,
)


@lru_cache()
def _settings():
    """Internal helper to cache settings for client factories."""
    return get_settings()


@lru_cache()
def get_document_store() -> DocumentStore:
    """Provide the configured document store backend."""
    settings = _settings()
    if settings.aws.document_store_backend == "sqlite":
        return SQLiteDocumentStore(settings.aws.sqlite_db_path)
    return DynamoDBDocumentStore(settings.aws)


@lru_cache()
def get_secrets_client() -> SecretsManagerClient:
    """Provide the Secrets Manager vault client."""
    return SecretsManagerClient(_settings().aws)


@lru_cache()
def get_fitbit_client() -> FitbitClient:
    """Provide a Fitbit client sharing one HTTP connection pool."""
    return FitbitClient(_settings().fitbit)


@lru_cache()
def get_token_refresh_service() -> TokenRefreshService:
    """Provide the token refresh orchestrator."""
    return TokenRefreshService(
        secret_store=get_secrets_client(),
        fitbit_client=get_fitbit_client(),
    )


def get_ingestion_service(domain: str) -> DocumentIngestionService:
    """Build an ingestion service for ``food`` or ``sleep``."""
    return DocumentIngestionService(
        domain=DOMAINS[domain.lower()],
        fitbit_client=get_fitbit_client(),
        secret_store=get_secrets_client(),
        document_store=get_document_store(),
    )


@lru_cache()
def get_health_check() -> DocumentStoreHealthCheck:
    """Provide the liveness check."""
    settings = _settings()
    return DocumentStoreHealthCheck(
        get_document_store(),
        degraded_threshold_ms=settings.scheduler.health_degraded_threshold_ms,
        timeout_seconds=settings.aws.read_timeout_seconds,
    )


__all__ = [
    "get_document_store",
    "get_fitbit_client",
    "get_health_check",
    "get_ingestion_service",
    "get_secrets_client",
    "get_token_refresh_service",
]
