"""
Ingestion worker for the Food and Sleep domains.

Without date arguments it runs as a loop, ingesting the previous UTC day once
per interval. With ``--date`` or ``--start-date/--end-date`` it ingests those
days once and exits, which is how gaps are backfilled.

Example usages::

    biotrackr-ingest --domain sleep
    biotrackr-ingest --domain food --date 2024-01-15
    biotrackr-ingest --domain food --start-date 2024-01-01 --end-date 2024-01-31
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Callable, List, Optional, Sequence

from biotrackr.core.config import get_settings
from biotrackr.core.errors import BiotrackrError, InvalidArgumentError
from biotrackr.core.logging import configure_logging
from biotrackr.dependencies import get_fitbit_client, get_ingestion_service
from biotrackr.services import DOMAINS, DocumentIngestionService, PeriodicTask
from biotrackr.utils.dates import iter_dates, previous_utc_day, validate_date
from biotrackr.workers.auth_worker import install_signal_handlers

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_PARTIAL_FAILURE = 1
EXIT_USAGE_ERROR = 2


class IngestionWorker:
    """Ingest the previous day for one domain on every tick."""

    def __init__(
        self,
        ingestion_service: DocumentIngestionService,
        *,
        interval_seconds: float,
        timeout_seconds: float | None = None,
        date_provider: Callable[[], str] = previous_utc_day,
    ) -> None:
        self._service = ingestion_service
        self._date_provider = date_provider
        self.task = PeriodicTask(
            f"ingest-{ingestion_service.document_type.lower()}",
            self.run_cycle,
            interval_seconds=interval_seconds,
            timeout_seconds=timeout_seconds,
        )

    async def run_cycle(self) -> bool:
        """One ingestion cycle; failures are logged and reported as False."""
        date = self._date_provider()
        try:
            await self._service.ingest_for_date(date)
        except BiotrackrError as exc:
            logger.error(
                "Ingestion cycle failed",
                extra={
                    "document_type": self._service.document_type,
                    "date": date,
                    "error_type": type(exc).__name__,
                },
            )
            return False
        return True

    async def start(self) -> None:
        await self.task.start()

    async def stop(self) -> None:
        await self.task.stop()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Ingest Fitbit data into the document store.")
    parser.add_argument("--domain", choices=sorted(DOMAINS), required=True)
    parser.add_argument("--date", help="Ingest a single day (YYYY-MM-DD) and exit.")
    parser.add_argument("--start-date", help="First day of a backfill range.")
    parser.add_argument("--end-date", help="Last day of a backfill range (inclusive).")
    return parser


def _resolve_dates(args: argparse.Namespace) -> Optional[List[str]]:
    """Return the one-shot dates requested, or None to run the loop."""
    if args.date and (args.start_date or args.end_date):
        raise InvalidArgumentError("Use either --date or --start-date/--end-date.")
    if args.date:
        return [validate_date(args.date)]
    if args.start_date or args.end_date:
        if not (args.start_date and args.end_date):
            raise InvalidArgumentError("--start-date and --end-date go together.")
        return list(iter_dates(args.start_date, args.end_date))
    return None


async def _run_loop(service: DocumentIngestionService) -> None:
    settings = get_settings()
    worker = IngestionWorker(
        service,
        interval_seconds=settings.scheduler.ingestion_interval_minutes * 60,
        timeout_seconds=settings.scheduler.cycle_timeout_seconds,
    )
    stop_requested = asyncio.Event()
    install_signal_handlers(stop_requested)

    await worker.start()
    try:
        await stop_requested.wait()
    finally:
        logger.info("Stopping ingestion worker", extra={"task": worker.task.name})
        await worker.stop()


async def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level)

    try:
        dates = _resolve_dates(args)
    except InvalidArgumentError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_USAGE_ERROR

    service = get_ingestion_service(args.domain)
    try:
        if dates is None:
            await _run_loop(service)
            return EXIT_OK
        failed = await service.ingest_dates(dates)
    finally:
        await get_fitbit_client().aclose()

    if failed:
        logger.error("Some dates failed to ingest", extra={"failed_dates": failed})
        return EXIT_PARTIAL_FAILURE
    return EXIT_OK


def run() -> None:
    """Console script entrypoint."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.info("Ingestion worker stopped")


if __name__ == "__main__":  # pragma: no cover - manual execution path
    run()
