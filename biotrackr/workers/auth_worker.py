"""Background worker that refreshes the Fitbit tokens on a fixed interval."""

from __future__ import annotations

import asyncio
import logging
import signal

from biotrackr.core.config import get_settings
from biotrackr.core.logging import configure_logging
from biotrackr.dependencies import get_fitbit_client, get_token_refresh_service
from biotrackr.services import PeriodicTask, TokenRefreshService

logger = logging.getLogger(__name__)


class AuthWorker:
    """Drive ``TokenRefreshService.run_cycle`` from a periodic task."""

    def __init__(
        self,
        refresh_service: TokenRefreshService,
        *,
        interval_seconds: float,
        timeout_seconds: float | None = None,
    ) -> None:
        self._refresh_service = refresh_service
        self.task = PeriodicTask(
            "token-refresh",
            refresh_service.run_cycle,
            interval_seconds=interval_seconds,
            timeout_seconds=timeout_seconds,
        )

    async def start(self) -> None:
        await self.task.start()

    async def stop(self) -> None:
        await self.task.stop()


def install_signal_handlers(stop: asyncio.Event) -> None:
    """Translate SIGINT/SIGTERM into a stop request where the loop supports it."""
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except (NotImplementedError, RuntimeError):  # pragma: no cover - non-Unix loops
            logger.debug("Signal handlers unsupported on this event loop")


async def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)

    worker = AuthWorker(
        get_token_refresh_service(),
        interval_seconds=settings.scheduler.token_refresh_interval_minutes * 60,
        timeout_seconds=settings.scheduler.cycle_timeout_seconds,
    )
    stop_requested = asyncio.Event()
    install_signal_handlers(stop_requested)

    await worker.start()
    try:
        await stop_requested.wait()
    finally:
        logger.info("Stopping token refresh worker")
        await worker.stop()
        await get_fitbit_client().aclose()


def run() -> None:
    """Console script entrypoint."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Token refresh worker stopped")


if __name__ == "__main__":  # pragma: no cover - manual execution path
    run()
