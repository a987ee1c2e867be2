"""
DynamoDB-backed document store.

Table layout: partition key ``pk`` holds the document type, sort key ``sk`` the
document id. A global secondary index keyed by (``documentType``, ``date``)
serves the ordered date and range queries.
"""

from __future__ import annotations

import asyncio
import json
from decimal import Decimal
from typing import Any, Callable, Dict, Iterator, List, Optional, TypeVar

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError

from biotrackr.clients.document_store import require_document_keys
from biotrackr.clients.secrets_manager import build_boto_config
from biotrackr.core.config import AWSSettings
from biotrackr.core.errors import PersistenceError
from biotrackr.models import DocumentKey

T = TypeVar("T")

DATE_INDEX_NAME = "documentType-date-index"
_KEY_ATTRIBUTES = ("pk", "sk")


def _to_dynamo(document: Dict[str, Any]) -> Dict[str, Any]:
    """DynamoDB rejects floats; round-trip through JSON to get Decimals."""
    return json.loads(json.dumps(document), parse_float=Decimal)


def _plain(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_plain(v) for v in value]
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    return value


def _from_dynamo(item: Dict[str, Any]) -> Dict[str, Any]:
    """Drop the table key attributes and convert Decimals back to numbers."""
    return {k: _plain(v) for k, v in item.items() if k not in _KEY_ATTRIBUTES}


class DynamoDBDocumentStore:
    """Document store operations over a single DynamoDB table."""

    def __init__(
        self,
        settings: AWSSettings,
        table: Any | None = None,
        index_name: str = DATE_INDEX_NAME,
    ) -> None:
        self._settings = settings
        self._index_name = index_name
        if table is None:
            resource = boto3.resource("dynamodb", config=build_boto_config(settings))
            table = resource.Table(settings.dynamodb_table_name)
        self._table = table

    async def _run(self, func: Callable[[], T]) -> T:
        def _guarded() -> T:
            try:
                return func()
            except (ClientError, BotoCoreError) as exc:
                raise PersistenceError(f"DynamoDB operation failed: {exc}") from exc

        return await asyncio.to_thread(_guarded)

    def _key_condition(
        self,
        document_type: str,
        date: Optional[str],
        start_date: Optional[str],
        end_date: Optional[str],
    ):
        condition = Key("documentType").eq(document_type)
        if date is not None:
            return condition & Key("date").eq(date)
        if start_date is not None and end_date is not None:
            return condition & Key("date").between(start_date, end_date)
        if start_date is not None:
            return condition & Key("date").gte(start_date)
        if end_date is not None:
            return condition & Key("date").lte(end_date)
        return condition

    def _paginate(self, **kwargs: Any) -> Iterator[Dict[str, Any]]:
        """Yield each page of a Query, following ``LastEvaluatedKey``."""
        while True:
            response = self._table.query(**kwargs)
            yield response
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return
            kwargs["ExclusiveStartKey"] = last_key

    async def upsert(self, document: Dict[str, Any]) -> Dict[str, Any]:
        document_id, document_type, _ = require_document_keys(document)
        item = _to_dynamo({**document, "pk": document_type, "sk": document_id})
        await self._run(lambda: self._table.put_item(Item=item))
        return document

    async def read_by_id(
        self, document_id: str, document_type: str
    ) -> Optional[Dict[str, Any]]:
        response = await self._run(
            lambda: self._table.get_item(Key={"pk": document_type, "sk": document_id})
        )
        item = response.get("Item")
        return _from_dynamo(item) if item else None

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
        kwargs: Dict[str, Any] = {
            "IndexName": self._index_name,
            "KeyConditionExpression": self._key_condition(
                document_type, date, start_date, end_date
            ),
            "ScanIndexForward": not descending,
        }
        wanted = None if limit is None else offset + limit

        def _execute() -> List[Dict[str, Any]]:
            items: List[Dict[str, Any]] = []
            for page in self._paginate(**kwargs):
                items.extend(page.get("Items", []))
                if wanted is not None and len(items) >= wanted:
                    break
            end = None if wanted is None else wanted
            return items[offset:end]

        items = await self._run(_execute)
        return [_from_dynamo(item) for item in items]

    async def count(
        self,
        document_type: str,
        *,
        date: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> int:
        kwargs: Dict[str, Any] = {
            "IndexName": self._index_name,
            "KeyConditionExpression": self._key_condition(
                document_type, date, start_date, end_date
            ),
            "Select": "COUNT",
        }
        return await self._run(
            lambda: sum(page.get("Count", 0) for page in self._paginate(**kwargs))
        )

    async def list_keys(self, document_type: str) -> List[DocumentKey]:
        kwargs: Dict[str, Any] = {
            "KeyConditionExpression": Key("pk").eq(document_type),
            "ProjectionExpression": "pk, sk",
        }

        def _execute() -> List[DocumentKey]:
            return [
                DocumentKey(id=item["sk"], document_type=item["pk"])
                for page in self._paginate(**kwargs)
                for item in page.get("Items", [])
            ]

        return await self._run(_execute)

    async def delete(self, document_id: str, document_type: str) -> None:
        await self._run(
            lambda: self._table.delete_item(Key={"pk": document_type, "sk": document_id})
        )

    async def ping(self) -> None:
        await self._run(
            lambda: self._table.meta.client.describe_table(TableName=self._table.name)
        )


__all__ = ["DATE_INDEX_NAME", "DynamoDBDocumentStore"]
