"""
Read-side queries over the persisted documents of one domain.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Type

from pydantic import ValidationError

from biotrackr.clients import DocumentStore
from biotrackr.core.errors import (
    DocumentNotFoundError,
    InvalidArgumentError,
    PersistenceError,
)
from biotrackr.models import DOCUMENT_MODELS, Document
from biotrackr.schemas import (
    DEFAULT_PAGE_NUMBER,
    DEFAULT_PAGE_SIZE,
    PaginationRequest,
    PaginationResponse,
)
from biotrackr.utils.dates import validate_date

logger = logging.getLogger(__name__)


def build_pagination(
    page_number: Optional[int], page_size: Optional[int]
) -> PaginationRequest:
    """Apply defaults and reject page values outside the allowed bounds."""
    try:
        return PaginationRequest(
            page_number=DEFAULT_PAGE_NUMBER if page_number is None else page_number,
            page_size=DEFAULT_PAGE_SIZE if page_size is None else page_size,
        )
    except ValidationError as exc:
        raise InvalidArgumentError("pageNumber or pageSize is out of range.") from exc


class DocumentQueryService:
    """Paginated and date-filtered reads for a single document type."""

    def __init__(self, document_store: DocumentStore, document_type: str) -> None:
        if document_type not in DOCUMENT_MODELS:
            raise ValueError(f"Unknown document type {document_type!r}.")
        self._store = document_store
        self._document_type = document_type
        self._model: Type[Document] = DOCUMENT_MODELS[document_type]

    @property
    def document_type(self) -> str:
        return self._document_type

    async def get_by_date(self, date: str) -> Document:
        """Return the document stored for ``date``."""
        validate_date(date)
        logger.info(
            "Fetching document by date",
            extra={"document_type": self._document_type, "date": date},
        )
        items = await self._store.query(self._document_type, date=date, limit=1)
        if not items:
            raise DocumentNotFoundError(
                f"No {self._document_type} document for {date}."
            )
        return self._to_model(items[0])

    async def get_all(
        self, page_number: Optional[int] = None, page_size: Optional[int] = None
    ) -> PaginationResponse[Document]:
        """Return one page of documents, newest date first."""
        pagination = build_pagination(page_number, page_size)
        logger.info(
            "Fetching documents",
            extra={
                "document_type": self._document_type,
                "page_number": pagination.page_number,
                "page_size": pagination.page_size,
            },
        )
        items = await self._store.query(
            self._document_type,
            descending=True,
            offset=pagination.offset,
            limit=pagination.page_size,
        )
        total_count = await self._store.count(self._document_type)
        return self._page(items, total_count, pagination)

    async def get_by_date_range(
        self,
        start_date: str,
        end_date: str,
        page_number: Optional[int] = None,
        page_size: Optional[int] = None,
    ) -> PaginationResponse[Document]:
        """Return one page of documents dated within the inclusive range."""
        validate_date(start_date)
        validate_date(end_date)
        # Fixed-width ISO dates order lexicographically.
        if start_date > end_date:
            raise InvalidArgumentError("startDate must be on or before endDate.")
        pagination = build_pagination(page_number, page_size)

        logger.info(
            "Fetching documents in date range",
            extra={
                "document_type": self._document_type,
                "start_date": start_date,
                "end_date": end_date,
                "page_number": pagination.page_number,
                "page_size": pagination.page_size,
            },
        )
        items = await self._store.query(
            self._document_type,
            start_date=start_date,
            end_date=end_date,
            offset=pagination.offset,
            limit=pagination.page_size,
        )
        total_count = await self._store.count(
            self._document_type, start_date=start_date, end_date=end_date
        )
        return self._page(items, total_count, pagination)

    def _page(
        self,
        items: List[Dict[str, Any]],
        total_count: int,
        pagination: PaginationRequest,
    ) -> PaginationResponse[Document]:
        return PaginationResponse[self._model](  # type: ignore[name-defined]
            items=[self._to_model(item) for item in items[: pagination.page_size]],
            total_count=total_count,
            page_number=pagination.page_number,
            page_size=pagination.page_size,
        )

    def _to_model(self, item: Dict[str, Any]) -> Document:
        try:
            return self._model.model_validate(item)
        except ValidationError as exc:
            raise PersistenceError(
                f"Stored {self._document_type} document {item.get('id')!r} is malformed."
            ) from exc


__all__ = ["DocumentQueryService", "build_pagination"]
