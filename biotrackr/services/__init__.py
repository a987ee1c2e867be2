"""Service layer exports."""

from .documents import DocumentQueryService, build_pagination
from .health import DocumentStoreHealthCheck
from .ingestion import (
    DOMAINS,
    FOOD_DOMAIN,
    SLEEP_DOMAIN,
    DocumentIngestionService,
    IngestionDomain,
)
from .scheduler import PeriodicTask, TaskLifecycle
from .token_refresh import (
    RefreshOutcome,
    RefreshState,
    TokenRefreshService,
    decode_client_credentials,
)

__all__ = [
    "DOMAINS",
    "DocumentIngestionService",
    "DocumentQueryService",
    "DocumentStoreHealthCheck",
    "IngestionDomain",
    "FOOD_DOMAIN",
    "PeriodicTask",
    "RefreshOutcome",
    "RefreshState",
    "SLEEP_DOMAIN",
    "TaskLifecycle",
    "TokenRefreshService",
    "build_pagination",
    "decode_client_credentials",
]
