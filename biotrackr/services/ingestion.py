"""
Pull one day of Fitbit data for a domain and persist it as a document.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Iterable, List

from pydantic import BaseModel

from biotrackr.clients import ACCESS_TOKEN_SECRET, DocumentStore, FitbitClient, SecretsManagerClient
from biotrackr.core.errors import BiotrackrError
from biotrackr.models import (
    FOOD_DOCUMENT_TYPE,
    SLEEP_DOCUMENT_TYPE,
    Document,
    FoodDocument,
    FoodResponse,
    SleepDocument,
    SleepResponse,
    build_document_id,
)
from biotrackr.utils.dates import validate_date

logger = logging.getLogger(__name__)

Fetcher = Callable[[FitbitClient, str, str], Awaitable[BaseModel]]


def map_food_document(date: str, response: FoodResponse) -> FoodDocument:
    return FoodDocument(
        id=build_document_id(FOOD_DOCUMENT_TYPE, date),
        date=date,
        food=response,
    )


def map_sleep_document(date: str, response: SleepResponse) -> SleepDocument:
    return SleepDocument(
        id=build_document_id(SLEEP_DOCUMENT_TYPE, date),
        date=date,
        sleep=response,
    )


@dataclass(frozen=True)
class IngestionDomain:
    """How one domain fetches its Fitbit payload and maps it to a document."""

    document_type: str
    fetch: Fetcher
    to_document: Callable[[str, BaseModel], Document]


FOOD_DOMAIN = IngestionDomain(
    document_type=FOOD_DOCUMENT_TYPE,
    fetch=lambda client, date, token: client.get_food_log(date=date, access_token=token),
    to_document=map_food_document,  # type: ignore[arg-type]
)

SLEEP_DOMAIN = IngestionDomain(
    document_type=SLEEP_DOCUMENT_TYPE,
    fetch=lambda client, date, token: client.get_sleep_log(date=date, access_token=token),
    to_document=map_sleep_document,  # type: ignore[arg-type]
)

DOMAINS: Dict[str, IngestionDomain] = {
    "food": FOOD_DOMAIN,
    "sleep": SLEEP_DOMAIN,
}


class DocumentIngestionService:
    """Coordinate the fetch, map and upsert steps for a single domain."""

    def __init__(
        self,
        *,
        domain: IngestionDomain,
        fitbit_client: FitbitClient,
        secret_store: SecretsManagerClient,
        document_store: DocumentStore,
    ) -> None:
        self._domain = domain
        self._fitbit = fitbit_client
        self._secrets = secret_store
        self._store = document_store

    @property
    def document_type(self) -> str:
        return self._domain.document_type

    async def ingest_for_date(self, date: str) -> Document:
        """Fetch ``date`` from Fitbit and upsert the resulting document."""
        validate_date(date)
        access_token = await self._secrets.get_secret(ACCESS_TOKEN_SECRET)

        response = await self._domain.fetch(self._fitbit, date, access_token)
        document = self._domain.to_document(date, response)
        await self._store.upsert(document.to_item())

        logger.info(
            "Persisted document",
            extra={
                "document_type": document.document_type,
                "document_id": document.id,
                "date": date,
            },
        )
        return document

    async def ingest_dates(self, dates: Iterable[str]) -> List[str]:
        """Ingest several days sequentially; returns the dates that failed."""
        failed: List[str] = []
        for date in dates:
            try:
                await self.ingest_for_date(date)
            except BiotrackrError as exc:
                logger.error(
                    "Ingestion failed",
                    extra={
                        "document_type": self.document_type,
                        "date": date,
                        "error_type": type(exc).__name__,
                    },
                )
                failed.append(date)
        return failed


__all__ = [
    "DOMAINS",
    "DocumentIngestionService",
    "IngestionDomain",
    "FOOD_DOMAIN",
    "SLEEP_DOMAIN",
    "map_food_document",
    "map_sleep_document",
]
