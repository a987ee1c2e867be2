"""Liveness check backed by a document store round trip."""

from __future__ import annotations

import asyncio
import logging
import time

from biotrackr.clients import DocumentStore
from biotrackr.core.errors import PersistenceError
from biotrackr.schemas import HealthReport, HealthStatus

logger = logging.getLogger(__name__)


class DocumentStoreHealthCheck:
    """Healthy when the store answers, degraded when it answers slowly."""

    def __init__(
        self,
        document_store: DocumentStore,
        *,
        degraded_threshold_ms: float = 1000.0,
        timeout_seconds: float = 5.0,
    ) -> None:
        self._store = document_store
        self._degraded_threshold_ms = degraded_threshold_ms
        self._timeout = timeout_seconds

    async def check(self) -> HealthReport:
        started = time.perf_counter()
        try:
            await asyncio.wait_for(self._store.ping(), timeout=self._timeout)
        except (PersistenceError, asyncio.TimeoutError) as exc:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.warning(
                "Document store health check failed",
                extra={"error_type": type(exc).__name__},
            )
            return HealthReport(
                status=HealthStatus.UNHEALTHY,
                duration_ms=elapsed_ms,
                description="Document store unreachable.",
            )

        elapsed_ms = (time.perf_counter() - started) * 1000
        if elapsed_ms > self._degraded_threshold_ms:
            return HealthReport(
                status=HealthStatus.DEGRADED,
                duration_ms=elapsed_ms,
                description="Document store responded slowly.",
            )
        return HealthReport(status=HealthStatus.HEALTHY, duration_ms=elapsed_ms)


__all__ = ["DocumentStoreHealthCheck"]
