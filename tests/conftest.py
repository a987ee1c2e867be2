"""Pytest configuration shared across the suite."""

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from biotrackr.core.config import get_settings
from biotrackr.dependencies import clients


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO-powered tests to run against asyncio backend only."""
    return "asyncio"


@pytest.fixture(autouse=True)
def _reset_cached_factories():
    """Settings and shared clients are process-wide caches; isolate each test."""
    yield
    get_settings.cache_clear()
    for factory in (
        clients._settings,
        clients.get_document_store,
        clients.get_secrets_client,
        clients.get_fitbit_client,
        clients.get_token_refresh_service,
        clients.get_health_check,
    ):
        factory.cache_clear()
