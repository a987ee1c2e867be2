"""
Request and response envelopes for the paginated read endpoints.
"""

from __future__ import annotations

import math
from typing import Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

T = TypeVar("T")

DEFAULT_PAGE_NUMBER = 1
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_NUMBER = 1_000_000
MAX_PAGE_SIZE = 1_000


class PaginationRequest(BaseModel):
    """Page selection supplied by a caller; omitted values use the defaults."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    page_number: int = Field(DEFAULT_PAGE_NUMBER, ge=1, le=MAX_PAGE_NUMBER)
    page_size: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)

    @property
    def offset(self) -> int:
        """Number of matching documents skipped before this page."""
        return (self.page_number - 1) * self.page_size


class PaginationResponse(BaseModel, Generic[T]):
    """A single page of results plus the size of the full filtered set."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    items: List[T] = Field(default_factory=list)
    total_count: int = Field(0, ge=0)
    page_number: int = Field(DEFAULT_PAGE_NUMBER, ge=1)
    page_size: int = Field(DEFAULT_PAGE_SIZE, ge=1)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size) if self.total_count else 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_previous_page(self) -> bool:
        return self.page_number > 1

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_next_page(self) -> bool:
        return self.page_number < self.total_pages


__all__ = [
    "DEFAULT_PAGE_NUMBER",
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_NUMBER",
    "MAX_PAGE_SIZE",
    "PaginationRequest",
    "PaginationResponse",
]
