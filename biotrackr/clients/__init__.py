"""Expose constructed client wrappers."""

from .document_store import DocumentStore
from .dynamodb import DynamoDBDocumentStore
from .fitbit import FitbitClient
from .secrets_manager import (
    ACCESS_TOKEN_SECRET,
    FITBIT_CREDENTIALS_SECRET,
    REFRESH_TOKEN_SECRET,
    SecretsManagerClient,
)
from .sqlite_store import SQLiteDocumentStore

__all__ = [
    "ACCESS_TOKEN_SECRET",
    "DocumentStore",
    "DynamoDBDocumentStore",
    "FITBIT_CREDENTIALS_SECRET",
    "FitbitClient",
    "REFRESH_TOKEN_SECRET",
    "SQLiteDocumentStore",
    "SecretsManagerClient",
]
