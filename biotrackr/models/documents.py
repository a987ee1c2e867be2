"""
Documents persisted in the document store, one per domain and day.
"""

from __future__ import annotations

import uuid
from typing import Dict, Type

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from biotrackr.models.fitbit import FoodResponse, SleepResponse

FOOD_DOCUMENT_TYPE = "Food"
SLEEP_DOCUMENT_TYPE = "Sleep"

_DOCUMENT_ID_NAMESPACE = uuid.UUID("6f1d7c52-2f4e-4b1f-9a59-3c1f0d9a8e21")


class Document(BaseModel):
    """Fields shared by every persisted document."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., min_length=1)
    document_type: str = Field(..., description="Partition key, e.g. 'Food'.")
    date: str = Field(..., description="Calendar day in YYYY-MM-DD form.")

    def to_item(self) -> dict:
        """Serialize into the JSON shape written to the store."""
        return self.model_dump(by_alias=True, mode="json")


class DocumentKey(BaseModel):
    """Minimal projection used when only the key of a document is needed."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    document_type: str


class FoodDocument(Document):
    document_type: str = FOOD_DOCUMENT_TYPE
    food: FoodResponse = Field(default_factory=FoodResponse)


class SleepDocument(Document):
    document_type: str = SLEEP_DOCUMENT_TYPE
    sleep: SleepResponse = Field(default_factory=SleepResponse)


DOCUMENT_MODELS: Dict[str, Type[Document]] = {
    FOOD_DOCUMENT_TYPE: FoodDocument,
    SLEEP_DOCUMENT_TYPE: SleepDocument,
}


def build_document_id(document_type: str, date: str) -> str:
    """Return the stable identifier for a domain's document of a given day."""
    return str(uuid.uuid5(_DOCUMENT_ID_NAMESPACE, f"{document_type}:{date}"))


__all__ = [
    "DOCUMENT_MODELS",
    "Document",
    "DocumentKey",
    "FOOD_DOCUMENT_TYPE",
    "FoodDocument",
    "SLEEP_DOCUMENT_TYPE",
    "SleepDocument",
    "build_document_id",
]
