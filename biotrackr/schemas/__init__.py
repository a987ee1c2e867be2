"""Public schema exports."""

from .health import HealthReport, HealthStatus
from .pagination import (
    DEFAULT_PAGE_NUMBER,
    DEFAULT_PAGE_SIZE,
    PaginationRequest,
    PaginationResponse,
)

__all__ = [
    "DEFAULT_PAGE_NUMBER",
    "DEFAULT_PAGE_SIZE",
    "HealthReport",
    "HealthStatus",
    "PaginationRequest",
    "PaginationResponse",
]
