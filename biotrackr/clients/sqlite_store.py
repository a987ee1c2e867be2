"""SQLite-backed substitute for the DynamoDB document store."""

from __future__ import annotations

import asyncio
import json
import sqlite3
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TypeVar

from biotrackr.clients.document_store import require_document_keys
from biotrackr.core.errors import PersistenceError
from biotrackr.models import DocumentKey

T = TypeVar("T")


class SQLiteDocumentStore:
    """Document table keyed by (document_type, id) with a date index."""

    def __init__(self, db_path: str) -> None:
        self._db_path = Path(db_path)
        if self._db_path.parent and not self._db_path.parent.exists():
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS documents (
                    document_type TEXT NOT NULL,
                    id TEXT NOT NULL,
                    date TEXT NOT NULL,
                    data TEXT NOT NULL,
                    PRIMARY KEY (document_type, id)
                )
                """
            )
            conn.execute(
                """
                CREATE INDEX IF NOT EXISTS ix_documents_type_date
                ON documents (document_type, date)
                """
            )

    async def _run(self, func: Callable[[], T]) -> T:
        def _guarded() -> T:
            try:
                return func()
            except sqlite3.Error as exc:
                raise PersistenceError(f"SQLite operation failed: {exc}") from exc

        return await asyncio.to_thread(_guarded)

    @staticmethod
    def _where(
        document_type: str,
        date: Optional[str],
        start_date: Optional[str],
        end_date: Optional[str],
    ) -> tuple[str, list]:
        clauses = ["document_type = ?"]
        params: list = [document_type]
        if date is not None:
            clauses.append("date = ?")
            params.append(date)
        if start_date is not None:
            clauses.append("date >= ?")
            params.append(start_date)
        if end_date is not None:
            clauses.append("date <= ?")
            params.append(end_date)
        return " AND ".join(clauses), params

    async def upsert(self, document: Dict[str, Any]) -> Dict[str, Any]:
        document_id, document_type, date = require_document_keys(document)
        data_json = json.dumps(document)

        def _execute() -> None:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO documents (document_type, id, date, data)
                    VALUES (?, ?, ?, ?)
                    ON CONFLICT(document_type, id) DO UPDATE SET
                        date = excluded.date,
                        data = excluded.data
                    """,
                    (document_type, document_id, date, data_json),
                )

        await self._run(_execute)
        return document

    async def read_by_id(
        self, document_id: str, document_type: str
    ) -> Optional[Dict[str, Any]]:
        def _execute() -> Optional[sqlite3.Row]:
            with self._connect() as conn:
                return conn.execute(
                    "SELECT data FROM documents WHERE document_type = ? AND id = ?",
                    (document_type, document_id),
                ).fetchone()

        row = await self._run(_execute)
        if not row:
            return None
        return json.loads(row["data"])

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
        where, params = self._where(document_type, date, start_date, end_date)
        direction = "DESC" if descending else "ASC"
        # SQLite only accepts OFFSET after a LIMIT; -1 means unbounded.
        sql = (
            f"SELECT data FROM documents WHERE {where} "
            f"ORDER BY date {direction}, rowid ASC LIMIT ? OFFSET ?"
        )
        params.extend([-1 if limit is None else limit, offset])

        def _execute() -> list[sqlite3.Row]:
            with self._connect() as conn:
                return conn.execute(sql, params).fetchall()

        rows = await self._run(_execute)
        return [json.loads(row["data"]) for row in rows]

    async def count(
        self,
        document_type: str,
        *,
        date: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> int:
        where, params = self._where(document_type, date, start_date, end_date)

        def _execute() -> int:
            with self._connect() as conn:
                row = conn.execute(
                    f"SELECT COUNT(1) AS total FROM documents WHERE {where}", params
                ).fetchone()
            return int(row["total"]) if row else 0

        return await self._run(_execute)

    async def list_keys(self, document_type: str) -> List[DocumentKey]:
        def _execute() -> list[sqlite3.Row]:
            with self._connect() as conn:
                return conn.execute(
                    "SELECT id, document_type FROM documents WHERE document_type = ?",
                    (document_type,),
                ).fetchall()

        rows = await self._run(_execute)
        return [DocumentKey(id=row["id"], document_type=row["document_type"]) for row in rows]

    async def delete(self, document_id: str, document_type: str) -> None:
        def _execute() -> None:
            with self._connect() as conn:
                conn.execute(
                    "DELETE FROM documents WHERE document_type = ? AND id = ?",
                    (document_type, document_id),
                )

        await self._run(_execute)

    async def ping(self) -> None:
        def _execute() -> None:
            with self._connect() as conn:
                conn.execute("SELECT 1").fetchone()

        await self._run(_execute)


__all__ = ["SQLiteDocumentStore"]
