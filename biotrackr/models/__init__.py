"""Domain model exports."""

from .documents import (
    DOCUMENT_MODELS,
    FOOD_DOCUMENT_TYPE,
    SLEEP_DOCUMENT_TYPE,
    Document,
    DocumentKey,
    FoodDocument,
    SleepDocument,
    build_document_id,
)
from .fitbit import FoodResponse, SleepResponse
from .tokens import ClientCredentials, CredentialPair

__all__ = [
    "ClientCredentials",
    "CredentialPair",
    "DOCUMENT_MODELS",
    "Document",
    "DocumentKey",
    "FOOD_DOCUMENT_TYPE",
    "FoodDocument",
    "FoodResponse",
    "SLEEP_DOCUMENT_TYPE",
    "SleepDocument",
    "SleepResponse",
    "build_document_id",
]
