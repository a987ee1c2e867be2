"""HTTP utilities providing retry/backoff semantics for transient failures."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, FrozenSet

import httpx

logger = logging.getLogger(__name__)

TRANSIENT_STATUS_CODES: FrozenSet[int] = frozenset({408, 429, 500, 502, 503, 504})


class RetryConfig:
    def __init__(
        self,
        *,
        attempts: int = 3,
        backoff_seconds: float = 1.0,
        retry_statuses: FrozenSet[int] = TRANSIENT_STATUS_CODES,
    ) -> None:
        self.attempts = max(1, attempts)
        self.backoff_seconds = backoff_seconds
        self.retry_statuses = retry_statuses


async def request_with_retry(
    func: Callable[..., Awaitable[httpx.Response]],
    *args,
    retry_config: RetryConfig | None = None,
    **kwargs,
) -> httpx.Response:
    """
    Issue a request, retrying transport errors and transient status codes.

    The last response is returned as-is once attempts are exhausted or when the
    status is not retryable, so callers decide how to treat non-2xx answers.
    Transport errors are re-raised after the final attempt.
    """
    config = retry_config or RetryConfig()
    attempt = 0

    while True:
        attempt += 1
        try:
            response = await func(*args, **kwargs)
        except httpx.TransportError as exc:
            if attempt >= config.attempts:
                raise
            logger.warning(
                "Transport error, retrying",
                extra={"attempt": attempt, "error": type(exc).__name__},
            )
        else:
            if response.status_code not in config.retry_statuses or attempt >= config.attempts:
                return response
            logger.warning(
                "Transient HTTP status, retrying",
                extra={"attempt": attempt, "status_code": response.status_code},
            )
        await asyncio.sleep(config.backoff_seconds * attempt)


__all__ = ["RetryConfig", "TRANSIENT_STATUS_CODES", "request_with_retry"]
