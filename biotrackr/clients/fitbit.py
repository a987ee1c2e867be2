"""
Fitbit Web API client.

Covers the OAuth refresh-token exchange and the per-day food and sleep log
endpoints. Responses are validated into the typed entities in
``biotrackr.models``.
"""

from __future__ import annotations

import logging
from typing import Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from biotrackr.core.config import FitbitSettings
from biotrackr.core.errors import (
    MalformedResponseError,
    TokenExchangeFailedError,
    UpstreamError,
)
from biotrackr.models import ClientCredentials, CredentialPair, FoodResponse, SleepResponse
from biotrackr.utils.http import RetryConfig, request_with_retry

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class FitbitClient:
    """Issue authenticated calls against the Fitbit Web API."""

    FOOD_LOG_PATH = "/1/user/-/foods/log/date/{date}.json"
    SLEEP_LOG_PATH = "/1.2/user/-/sleep/date/{date}.json"

    def __init__(
        self,
        settings: FitbitSettings,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = str(settings.api_base_url).rstrip("/")
        self._token_url = str(settings.token_url)
        self._retry = RetryConfig(
            attempts=settings.retry_attempts,
            backoff_seconds=settings.retry_backoff_seconds,
        )
        self._http = http_client or httpx.AsyncClient(timeout=settings.timeout_seconds)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def refresh_tokens(
        self, *, refresh_token: str, credentials: ClientCredentials
    ) -> CredentialPair:
        """Exchange a refresh token for a new access/refresh token pair."""
        payload = {
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
        }

        try:
            response = await request_with_retry(
                self._http.post,
                self._token_url,
                data=payload,
                auth=(credentials.client_id, credentials.client_secret),
                retry_config=self._retry,
            )
        except httpx.HTTPError as exc:
            raise UpstreamError(
                f"Token endpoint unreachable: {type(exc).__name__}"
            ) from exc

        if not response.is_success:
            raise TokenExchangeFailedError(response.status_code, response.text)

        return self._parse(response, CredentialPair)

    async def get_food_log(self, *, date: str, access_token: str) -> FoodResponse:
        """Fetch the food log summary for a single day."""
        return await self._get(
            self.FOOD_LOG_PATH.format(date=date), access_token, FoodResponse
        )

    async def get_sleep_log(self, *, date: str, access_token: str) -> SleepResponse:
        """Fetch the sleep logs for a single day."""
        return await self._get(
            self.SLEEP_LOG_PATH.format(date=date), access_token, SleepResponse
        )

    async def _get(
        self, path: str, access_token: str, model: Type[ModelT]
    ) -> ModelT:
        url = f"{self._base_url}{path}"
        headers = {
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/json",
        }

        try:
            response = await request_with_retry(
                self._http.get, url, headers=headers, retry_config=self._retry
            )
        except httpx.HTTPError as exc:
            raise UpstreamError(f"GET {path} failed: {type(exc).__name__}") from exc

        if not response.is_success:
            logger.warning(
                "Fitbit request failed",
                extra={"path": path, "status_code": response.status_code},
            )
            raise UpstreamError(
                f"GET {path} returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        return self._parse(response, model)

    @staticmethod
    def _parse(response: httpx.Response, model: Type[ModelT]) -> ModelT:
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise MalformedResponseError(
                f"Unexpected {model.__name__} payload from Fitbit."
            ) from exc


__all__ = ["FitbitClient"]
