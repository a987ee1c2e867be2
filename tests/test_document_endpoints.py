try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import asyncio

import httpx
import pytest

from biotrackr import dependencies
from biotrackr.clients import SQLiteDocumentStore
from biotrackr.core.errors import PersistenceError
from biotrackr.main import food_app, sleep_app
from biotrackr.models import FoodDocument, SleepDocument, build_document_id
from biotrackr.schemas import HealthStatus
from biotrackr.services import DocumentStoreHealthCheck

pytestmark = pytest.mark.anyio("asyncio")


class UnreachableStore:
    async def ping(self) -> None:
        raise PersistenceError("connection refused")

    async def query(self, *args, **kwargs):
        raise PersistenceError("connection refused")

    async def count(self, *args, **kwargs):
        raise PersistenceError("connection refused")


class SlowStore:
    async def ping(self) -> None:
        await asyncio.sleep(0.05)


@pytest.fixture()
def store(tmp_path) -> SQLiteDocumentStore:
    return SQLiteDocumentStore(str(tmp_path / "documents.db"))


@pytest.fixture()
def overrides(store):
    for app in (food_app, sleep_app):
        app.dependency_overrides.clear()
        app.dependency_overrides.update(
            {
                dependencies.get_document_store: lambda: store,
                dependencies.get_health_check: lambda: DocumentStoreHealthCheck(store),
            }
        )
    yield store
    for app in (food_app, sleep_app):
        app.dependency_overrides.clear()


async def _get(app, path: str) -> httpx.Response:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        return await client.get(path)


async def _seed_food(store: SQLiteDocumentStore, *dates: str) -> None:
    for date in dates:
        document = FoodDocument.model_validate(
            {
                "id": build_document_id("Food", date),
                "date": date,
                "food": {"summary": {"calories": 2000, "water": 750}},
            }
        )
        await store.upsert(document.to_item())


async def test_get_by_date_returns_camel_case_document(overrides) -> None:
    await _seed_food(overrides, "2024-01-15")

    response = await _get(food_app, "/2024-01-15")

    assert response.status_code == 200
    body = response.json()
    assert body["documentType"] == "Food"
    assert body["date"] == "2024-01-15"
    assert body["id"] == build_document_id("Food", "2024-01-15")
    assert body["food"]["summary"]["water"] == 750


@pytest.mark.parametrize("path", ["/2024-13-45", "/range/2024-02-01/2024-01-01", "/range/2024-01-01/bad"])
async def test_invalid_dates_return_400(overrides, path: str) -> None:
    response = await _get(food_app, path)

    assert response.status_code == 400


async def test_missing_day_returns_404(overrides) -> None:
    response = await _get(sleep_app, "/2024-01-15")

    assert response.status_code == 404


@pytest.mark.parametrize(
    "query",
    [
        "pageNumber=0",
        "pageSize=0",
        "pageNumber=-1&pageSize=5",
        "pageNumber=99999999999999999999",
        "pageSize=5000",
        "pageNumber=abc",
    ],
)
async def test_out_of_range_or_malformed_page_values_return_400(overrides, query: str) -> None:
    response = await _get(food_app, f"/?{query}")

    assert response.status_code == 400


async def test_malformed_page_value_is_not_echoed(overrides) -> None:
    response = await _get(sleep_app, "/?pageNumber=abc&pageSize=xyz")

    assert response.status_code == 400
    assert response.json() == {"detail": "Bad Request"}
    assert "abc" not in response.text and "xyz" not in response.text


async def test_get_all_returns_pagination_envelope(overrides) -> None:
    await _seed_food(overrides, "2024-01-01", "2024-01-15", "2024-01-31")

    response = await _get(food_app, "/?pageNumber=1&pageSize=2")

    assert response.status_code == 200
    body = response.json()
    assert [item["date"] for item in body["items"]] == ["2024-01-31", "2024-01-15"]
    assert body["totalCount"] == 3
    assert body["pageNumber"] == 1
    assert body["pageSize"] == 2
    assert body["totalPages"] == 2
    assert body["hasPreviousPage"] is False
    assert body["hasNextPage"] is True
    assert body["items"][0]["food"]["summary"]["calories"] == 2000


async def test_get_all_uses_default_page_size(overrides) -> None:
    response = await _get(sleep_app, "/")

    assert response.status_code == 200
    body = response.json()
    assert body["items"] == []
    assert body["pageNumber"] == 1
    assert body["pageSize"] == 20
    assert body["totalCount"] == 0


async def test_range_returns_documents_oldest_first(overrides) -> None:
    await _seed_food(overrides, "2024-01-31", "2024-01-01", "2024-01-15")

    response = await _get(food_app, "/range/2024-01-10/2024-01-31")

    assert response.status_code == 200
    body = response.json()
    assert [item["date"] for item in body["items"]] == ["2024-01-15", "2024-01-31"]
    assert body["totalCount"] == 2


async def test_sleep_api_only_serves_sleep_documents(overrides) -> None:
    await _seed_food(overrides, "2024-01-15")
    await overrides.upsert(
        SleepDocument(id=build_document_id("Sleep", "2024-01-16"), date="2024-01-16").to_item()
    )

    response = await _get(sleep_app, "/")

    body = response.json()
    assert [item["documentType"] for item in body["items"]] == ["Sleep"]
    assert "sleep" in body["items"][0]


async def test_store_outage_returns_503_without_detail(overrides) -> None:
    food_app.dependency_overrides[dependencies.get_document_store] = lambda: UnreachableStore()

    response = await _get(food_app, "/2024-01-15")

    assert response.status_code == 503
    assert "connection refused" not in response.text


async def test_liveness_reports_healthy_store(overrides) -> None:
    response = await _get(food_app, "/healthz/liveness")

    assert response.status_code == 200
    assert response.json()["status"] == HealthStatus.HEALTHY.value


async def test_liveness_reports_unreachable_store(overrides) -> None:
    food_app.dependency_overrides[dependencies.get_health_check] = (
        lambda: DocumentStoreHealthCheck(UnreachableStore())
    )

    response = await _get(food_app, "/healthz/liveness")

    assert response.status_code == 503
    assert response.json()["status"] == HealthStatus.UNHEALTHY.value


async def test_liveness_reports_slow_store_as_degraded(overrides) -> None:
    food_app.dependency_overrides[dependencies.get_health_check] = (
        lambda: DocumentStoreHealthCheck(SlowStore(), degraded_threshold_ms=1)
    )

    response = await _get(food_app, "/healthz/liveness")

    assert response.status_code == 200
    assert response.json()["status"] == HealthStatus.DEGRADED.value


async def test_health_check_times_out_hung_store() -> None:
    class HungStore:
        async def ping(self) -> None:
            await asyncio.sleep(10)

    report = await DocumentStoreHealthCheck(HungStore(), timeout_seconds=0.05).check()

    assert report.status is HealthStatus.UNHEALTHY
