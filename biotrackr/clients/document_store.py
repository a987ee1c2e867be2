"""
Contract shared by the DynamoDB and SQLite document stores.

Documents are plain JSON dictionaries carrying at least ``id``,
``documentType`` (the partition key) and ``date`` (``YYYY-MM-DD``).
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol

from biotrackr.models import DocumentKey


class DocumentStore(Protocol):
    async def upsert(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """Create or replace the document keyed by (documentType, id)."""
        ...

    async def read_by_id(
        self, document_id: str, document_type: str
    ) -> Optional[Dict[str, Any]]:
        ...

    async def query(
        self,
        document_type: str,
        *,
        date: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        descending: bool = False,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Return documents of one partition filtered by exact date or an
        inclusive date range, ordered by date, then sliced by offset/limit.
        """
        ...

    async def count(
        self,
        document_type: str,
        *,
        date: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> int:
        ...

    async def list_keys(self, document_type: str) -> List[DocumentKey]:
        ...

    async def delete(self, document_id: str, document_type: str) -> None:
        ...

    async def ping(self) -> None:
        """Raise ``PersistenceError`` when the store cannot be reached."""
        ...


def require_document_keys(document: Dict[str, Any]) -> tuple[str, str, str]:
    """Return (id, documentType, date), raising ``ValueError`` when absent."""
    document_id = document.get("id")
    document_type = document.get("documentType")
    date = document.get("date")
    if not document_id or not document_type or not date:
        raise ValueError("Document must include 'id', 'documentType' and 'date'.")
    return document_id, document_type, date


__all__ = ["DocumentStore", "require_document_keys"]
