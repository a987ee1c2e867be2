"""
AWS Lambda entrypoints for scheduled (EventBridge) refresh and ingestion runs.

Each invocation runs exactly one cycle; the schedule is the retry mechanism.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict

from biotrackr.clients import FitbitClient
from biotrackr.core.config import get_settings
from biotrackr.core.errors import BiotrackrError
from biotrackr.core.logging import configure_logging
from biotrackr.dependencies import get_document_store, get_secrets_client
from biotrackr.services import DOMAINS, DocumentIngestionService, TokenRefreshService
from biotrackr.utils.dates import previous_utc_day

logger = logging.getLogger(__name__)

configure_logging(get_settings().log_level)


# The HTTP client is bound to the event loop of one asyncio.run() call, so it
# is created per invocation; the boto3-backed clients are reused while warm.
async def _refresh() -> Dict[str, Any]:
    fitbit = FitbitClient(get_settings().fitbit)
    try:
        service = TokenRefreshService(
            secret_store=get_secrets_client(), fitbit_client=fitbit
        )
        outcome = await service.run_cycle()
    finally:
        await fitbit.aclose()
    return {
        "succeeded": outcome.succeeded,
        "expires_in": outcome.expires_in,
        "error": outcome.error,
    }


async def _ingest(domain: str, date: str) -> Dict[str, Any]:
    fitbit = FitbitClient(get_settings().fitbit)
    service = DocumentIngestionService(
        domain=DOMAINS[domain],
        fitbit_client=fitbit,
        secret_store=get_secrets_client(),
        document_store=get_document_store(),
    )
    try:
        document = await service.ingest_for_date(date)
    except BiotrackrError as exc:
        logger.error(
            "Scheduled ingestion failed",
            extra={"domain": domain, "date": date, "error_type": type(exc).__name__},
        )
        return {"succeeded": False, "date": date, "error": type(exc).__name__}
    finally:
        await fitbit.aclose()
    return {"succeeded": True, "date": date, "id": document.id}


def refresh_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Run one token refresh cycle."""
    return asyncio.run(_refresh())


def ingest_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Ingest ``event['domain']`` for ``event['date']`` (default: yesterday, UTC)."""
    domain = str(event.get("domain", "")).lower()
    if domain not in DOMAINS:
        raise ValueError(f"Unsupported domain {domain!r}; expected one of {sorted(DOMAINS)}.")
    date = event.get("date") or previous_utc_day()
    return asyncio.run(_ingest(domain, date))


__all__ = ["ingest_handler", "refresh_handler"]
