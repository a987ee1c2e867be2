"""
Refresh-token lifecycle for the Fitbit integration.

Each cycle reads the stored refresh token and app credentials from the vault,
exchanges them at the Fitbit token endpoint and writes the new tokens back.
"""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import ValidationError

from biotrackr.clients import (
    ACCESS_TOKEN_SECRET,
    FITBIT_CREDENTIALS_SECRET,
    REFRESH_TOKEN_SECRET,
    FitbitClient,
    SecretsManagerClient,
)
from biotrackr.core.errors import BiotrackrError, SecretUnavailableError
from biotrackr.models import ClientCredentials, CredentialPair

logger = logging.getLogger(__name__)


class RefreshState(str, Enum):
    IDLE = "idle"
    REFRESHING = "refreshing"


@dataclass(frozen=True)
class RefreshOutcome:
    """Result of one refresh cycle; failures carry the error type name."""

    succeeded: bool
    expires_in: Optional[int] = None
    error: Optional[str] = None


def decode_client_credentials(encoded: str) -> ClientCredentials:
    """Decode the base64 ``clientId:clientSecret`` stored as FitbitCredentials."""
    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
    except (binascii.Error, ValueError) as exc:
        raise SecretUnavailableError(
            FITBIT_CREDENTIALS_SECRET, "value is not valid base64"
        ) from exc

    client_id, sep, client_secret = decoded.partition(":")
    if not sep:
        raise SecretUnavailableError(
            FITBIT_CREDENTIALS_SECRET, "expected 'clientId:clientSecret'"
        )
    try:
        return ClientCredentials(client_id=client_id, client_secret=client_secret)
    except ValidationError as exc:
        raise SecretUnavailableError(
            FITBIT_CREDENTIALS_SECRET, "client id or secret is empty"
        ) from exc


class TokenRefreshService:
    """Keeps the Fitbit access token in the vault fresh."""

    def __init__(
        self,
        secret_store: SecretsManagerClient,
        fitbit_client: FitbitClient,
    ) -> None:
        self._secrets = secret_store
        self._fitbit = fitbit_client
        self._state = RefreshState.IDLE

    @property
    def state(self) -> RefreshState:
        return self._state

    async def refresh_tokens(self) -> CredentialPair:
        """Exchange the stored refresh token for a new credential pair."""
        refresh_token = await self._secrets.get_secret(REFRESH_TOKEN_SECRET)
        encoded_credentials = await self._secrets.get_secret(FITBIT_CREDENTIALS_SECRET)
        credentials = decode_client_credentials(encoded_credentials)

        return await self._fitbit.refresh_tokens(
            refresh_token=refresh_token, credentials=credentials
        )

    async def save_tokens(self, tokens: CredentialPair) -> None:
        """Persist the access token, then the refresh token."""
        await self._secrets.set_secret(ACCESS_TOKEN_SECRET, tokens.access_token)
        try:
            await self._secrets.set_secret(REFRESH_TOKEN_SECRET, tokens.refresh_token)
        except BiotrackrError:
            # The access token is already replaced; the next cycle runs with
            # the previous refresh token.
            logger.error("Access token saved but refresh token write failed")
            raise

    async def run_cycle(self) -> RefreshOutcome:
        """Run one refresh cycle, containing every failure at this boundary."""
        self._state = RefreshState.REFRESHING
        logger.info("Starting token refresh cycle")
        try:
            tokens = await self.refresh_tokens()
            await self.save_tokens(tokens)
        except BiotrackrError as exc:
            logger.error(
                "Token refresh cycle failed",
                extra={"error_type": type(exc).__name__, "error": str(exc)},
            )
            return RefreshOutcome(succeeded=False, error=type(exc).__name__)
        except Exception as exc:
            logger.exception("Unexpected failure during token refresh cycle")
            return RefreshOutcome(succeeded=False, error=type(exc).__name__)
        finally:
            self._state = RefreshState.IDLE

        logger.info(
            "Token refresh cycle completed", extra={"expires_in": tokens.expires_in}
        )
        return RefreshOutcome(succeeded=True, expires_in=tokens.expires_in)


__all__ = [
    "RefreshOutcome",
    "RefreshState",
    "TokenRefreshService",
    "decode_client_credentials",
]
