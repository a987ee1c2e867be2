"""
Fixed-interval background loop used by the token refresh and ingestion workers.
"""

from __future__ import annotations

import asyncio
import logging
import math
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class TaskLifecycle(str, Enum):
    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"


class PeriodicTask:
    """
    Run an async cycle every ``interval_seconds`` until stopped.

    Cycles never overlap: a tick that comes due while a cycle is still in
    flight is skipped rather than queued. Each cycle is bounded by
    ``timeout_seconds``, and ``stop()`` cancels whatever cycle is running.
    Exceptions escaping a cycle are logged and the loop keeps its schedule.
    """

    def __init__(
        self,
        name: str,
        cycle: Callable[[], Awaitable[Any]],
        *,
        interval_seconds: float,
        timeout_seconds: Optional[float] = None,
        initial_delay_seconds: float = 0.0,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive.")
        self.name = name
        self._cycle = cycle
        self._interval = interval_seconds
        self._timeout = timeout_seconds
        self._initial_delay = initial_delay_seconds
        self._task: Optional[asyncio.Task] = None
        self._stop_event = asyncio.Event()
        self._in_flight = False
        self.state = TaskLifecycle.STOPPED
        self.completed_cycles = 0
        self.skipped_ticks = 0

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    async def start(self) -> None:
        if self._task is not None:
            raise RuntimeError(f"{self.name} is already started.")
        self.state = TaskLifecycle.STARTING
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._run_loop(), name=self.name)
        self.state = TaskLifecycle.RUNNING
        logger.info(
            "Periodic task started",
            extra={"task": self.name, "interval_seconds": self._interval},
        )

    async def stop(self) -> None:
        if self._task is None:
            return
        self.state = TaskLifecycle.STOPPING
        self._stop_event.set()
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        self.state = TaskLifecycle.STOPPED
        logger.info("Periodic task stopped", extra={"task": self.name})

    async def run_once(self) -> Any:
        """Run a single cycle now unless one is already in flight."""
        if self._in_flight:
            self.skipped_ticks += 1
            logger.warning("Cycle still in flight, skipping tick", extra={"task": self.name})
            return None

        self._in_flight = True
        try:
            if self._timeout is not None:
                result = await asyncio.wait_for(self._cycle(), timeout=self._timeout)
            else:
                result = await self._cycle()
            self.completed_cycles += 1
            return result
        except asyncio.TimeoutError:
            logger.error(
                "Cycle timed out",
                extra={"task": self.name, "timeout_seconds": self._timeout},
            )
        except Exception:
            logger.exception("Cycle raised unexpectedly", extra={"task": self.name})
        finally:
            self._in_flight = False
        return None

    async def _sleep_until_stopped(self, delay: float) -> bool:
        """Sleep up to ``delay`` seconds; True when a stop was requested."""
        if delay <= 0:
            return self._stop_event.is_set()
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return False
        return True

    async def _run_loop(self) -> None:
        loop = asyncio.get_running_loop()
        if await self._sleep_until_stopped(self._initial_delay):
            return

        next_run = loop.time()
        while True:
            await self.run_once()

            next_run += self._interval
            now = loop.time()
            if now > next_run:
                missed = math.ceil((now - next_run) / self._interval)
                self.skipped_ticks += missed
                next_run += missed * self._interval
                logger.warning(
                    "Cycle overran its interval",
                    extra={"task": self.name, "skipped_ticks": missed},
                )

            if await self._sleep_until_stopped(next_run - loop.time()):
                return


__all__ = ["PeriodicTask", "TaskLifecycle"]
