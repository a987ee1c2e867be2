try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import base64

import httpx
import pytest

from biotrackr.clients import FitbitClient
from biotrackr.core.config import FitbitSettings
from biotrackr.core.errors import (
    SecretUnavailableError,
    SecretWriteError,
    TokenExchangeFailedError,
)
from biotrackr.models import CredentialPair
from biotrackr.services import (
    RefreshState,
    TokenRefreshService,
    decode_client_credentials,
)

ENCODED_CREDENTIALS = base64.b64encode(b"client-id:client-secret").decode()


class FakeSecretStore:
    def __init__(self, secrets: dict[str, str] | None = None, fail_writes_for=()) -> None:
        self.secrets = dict(secrets or {})
        self.writes: list[tuple[str, str]] = []
        self.fail_writes_for = set(fail_writes_for)

    async def get_secret(self, name: str) -> str:
        if name not in self.secrets:
            raise SecretUnavailableError(name, "ResourceNotFoundException")
        return self.secrets[name]

    async def set_secret(self, name: str, value: str) -> None:
        if name in self.fail_writes_for:
            raise SecretWriteError(name, "AccessDeniedException")
        self.writes.append((name, value))
        self.secrets[name] = value


class StubFitbitClient:
    def __init__(self, result=None, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.calls = []

    async def refresh_tokens(self, *, refresh_token, credentials):
        self.calls.append((refresh_token, credentials))
        if self.error is not None:
            raise self.error
        return self.result


def _stored_secrets() -> dict[str, str]:
    return {
        "RefreshToken": "old-refresh",
        "FitbitCredentials": ENCODED_CREDENTIALS,
    }


def _fitbit_with_transport(handler) -> FitbitClient:
    settings = FitbitSettings(FITBIT_RETRY_ATTEMPTS=1, FITBIT_RETRY_BACKOFF_SECONDS=0)
    return FitbitClient(
        settings, http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler))
    )


def test_decode_client_credentials_splits_on_first_colon() -> None:
    encoded = base64.b64encode(b"abc:s3cr:et").decode()

    credentials = decode_client_credentials(encoded)

    assert credentials.client_id == "abc"
    assert credentials.client_secret == "s3cr:et"


@pytest.mark.parametrize(
    "encoded",
    [
        "not base64!!",
        base64.b64encode(b"no-separator").decode(),
        base64.b64encode(b":secret-only").decode(),
    ],
)
def test_decode_client_credentials_rejects_malformed_values(encoded: str) -> None:
    with pytest.raises(SecretUnavailableError):
        decode_client_credentials(encoded)


@pytest.mark.asyncio
async def test_run_cycle_writes_access_token_then_refresh_token() -> None:
    store = FakeSecretStore(_stored_secrets())
    fitbit = StubFitbitClient(
        result=CredentialPair(access_token="A2", refresh_token="R2", expires_in=28800)
    )
    service = TokenRefreshService(secret_store=store, fitbit_client=fitbit)

    outcome = await service.run_cycle()

    assert outcome.succeeded is True
    assert outcome.expires_in == 28800
    assert store.writes == [("AccessToken", "A2"), ("RefreshToken", "R2")]
    refresh_token, credentials = fitbit.calls[0]
    assert refresh_token == "old-refresh"
    assert credentials.client_id == "client-id"
    assert service.state is RefreshState.IDLE


@pytest.mark.asyncio
async def test_run_cycle_sends_basic_auth_form_to_token_endpoint() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(
            200,
            json={
                "access_token": "A2",
                "refresh_token": "R2",
                "expires_in": 28800,
                "token_type": "Bearer",
                "user_id": "ABC123",
            },
        )

    store = FakeSecretStore(_stored_secrets())
    fitbit = _fitbit_with_transport(handler)
    service = TokenRefreshService(secret_store=store, fitbit_client=fitbit)

    outcome = await service.run_cycle()
    await fitbit.aclose()

    assert outcome.succeeded is True
    request = captured[0]
    assert request.method == "POST"
    assert request.headers["Authorization"] == f"Basic {ENCODED_CREDENTIALS}"
    body = request.content.decode()
    assert "grant_type=refresh_token" in body
    assert "refresh_token=old-refresh" in body


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [401, 429])
async def test_run_cycle_leaves_vault_untouched_on_rejected_exchange(status_code: int) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json={"errors": [{"errorType": "invalid_grant"}]})

    store = FakeSecretStore(_stored_secrets())
    fitbit = _fitbit_with_transport(handler)
    service = TokenRefreshService(secret_store=store, fitbit_client=fitbit)

    outcome = await service.run_cycle()
    await fitbit.aclose()

    assert outcome.succeeded is False
    assert outcome.error == "TokenExchangeFailedError"
    assert store.writes == []
    assert store.secrets["RefreshToken"] == "old-refresh"


@pytest.mark.asyncio
async def test_refresh_tokens_propagates_exchange_failure() -> None:
    store = FakeSecretStore(_stored_secrets())
    fitbit = StubFitbitClient(error=TokenExchangeFailedError(401, "invalid_grant"))
    service = TokenRefreshService(secret_store=store, fitbit_client=fitbit)

    with pytest.raises(TokenExchangeFailedError) as excinfo:
        await service.refresh_tokens()

    assert excinfo.value.status_code == 401


@pytest.mark.asyncio
async def test_run_cycle_reports_missing_refresh_token_without_calling_fitbit() -> None:
    store = FakeSecretStore({"FitbitCredentials": ENCODED_CREDENTIALS})
    fitbit = StubFitbitClient()
    service = TokenRefreshService(secret_store=store, fitbit_client=fitbit)

    outcome = await service.run_cycle()

    assert outcome.succeeded is False
    assert outcome.error == "SecretUnavailableError"
    assert fitbit.calls == []


@pytest.mark.asyncio
async def test_run_cycle_reports_malformed_credentials_without_calling_fitbit() -> None:
    store = FakeSecretStore(
        {"RefreshToken": "old-refresh", "FitbitCredentials": "%%%"}
    )
    fitbit = StubFitbitClient()
    service = TokenRefreshService(secret_store=store, fitbit_client=fitbit)

    outcome = await service.run_cycle()

    assert outcome.succeeded is False
    assert fitbit.calls == []
    assert store.writes == []


@pytest.mark.asyncio
async def test_save_tokens_reraises_when_refresh_token_write_fails() -> None:
    store = FakeSecretStore(_stored_secrets(), fail_writes_for={"RefreshToken"})
    service = TokenRefreshService(secret_store=store, fitbit_client=StubFitbitClient())

    with pytest.raises(SecretWriteError):
        await service.save_tokens(
            CredentialPair(access_token="A2", refresh_token="R2", expires_in=28800)
        )

    assert store.writes == [("AccessToken", "A2")]
    assert store.secrets["RefreshToken"] == "old-refresh"


@pytest.mark.asyncio
async def test_run_cycle_contains_unexpected_errors() -> None:
    store = FakeSecretStore(_stored_secrets())
    fitbit = StubFitbitClient(error=RuntimeError("boom"))
    service = TokenRefreshService(secret_store=store, fitbit_client=fitbit)

    outcome = await service.run_cycle()

    assert outcome.succeeded is False
    assert outcome.error == "RuntimeError"
    assert service.state is RefreshState.IDLE
