"""
AWS Secrets Manager wrapper used as the vault for Fitbit credentials.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from biotrackr.core.config import AWSSettings
from biotrackr.core.errors import SecretUnavailableError, SecretWriteError

logger = logging.getLogger(__name__)

REFRESH_TOKEN_SECRET = "RefreshToken"
ACCESS_TOKEN_SECRET = "AccessToken"
FITBIT_CREDENTIALS_SECRET = "FitbitCredentials"


def build_boto_config(settings: AWSSettings) -> Config:
    """Client config bounding every AWS call by the configured timeouts."""
    return Config(
        region_name=settings.region_name,
        connect_timeout=settings.connect_timeout_seconds,
        read_timeout=settings.read_timeout_seconds,
        retries={"mode": "standard", "max_attempts": 3},
    )


class SecretsManagerClient:
    """Read and write named secrets stored under a common prefix."""

    def __init__(self, settings: AWSSettings, client: Any | None = None) -> None:
        self._prefix = settings.secrets_prefix
        self._client = client or boto3.client(
            "secretsmanager", config=build_boto_config(settings)
        )

    def _secret_id(self, name: str) -> str:
        return f"{self._prefix}{name}"

    async def get_secret(self, name: str) -> str:
        """Return the current string value of a secret."""

        def _execute_get() -> str:
            try:
                response = self._client.get_secret_value(SecretId=self._secret_id(name))
            except ClientError as exc:
                code = exc.response.get("Error", {}).get("Code", "Unknown")
                raise SecretUnavailableError(name, code) from exc
            except BotoCoreError as exc:
                raise SecretUnavailableError(name, type(exc).__name__) from exc

            value = response.get("SecretString")
            if not value:
                raise SecretUnavailableError(name, "secret has no string value")
            return value

        return await asyncio.to_thread(_execute_get)

    async def set_secret(self, name: str, value: str) -> None:
        """Store a new version of a secret, creating it on first write."""
        secret_id = self._secret_id(name)

        def _execute_set() -> None:
            try:
                self._client.put_secret_value(SecretId=secret_id, SecretString=value)
                return
            except ClientError as exc:
                code = exc.response.get("Error", {}).get("Code", "Unknown")
                if code != "ResourceNotFoundException":
                    raise SecretWriteError(name, code) from exc
            except BotoCoreError as exc:
                raise SecretWriteError(name, type(exc).__name__) from exc

            logger.info("Creating missing secret", extra={"secret_name": name})
            try:
                self._client.create_secret(Name=secret_id, SecretString=value)
            except (ClientError, BotoCoreError) as exc:
                raise SecretWriteError(name, type(exc).__name__) from exc

        await asyncio.to_thread(_execute_set)


__all__ = [
    "ACCESS_TOKEN_SECRET",
    "FITBIT_CREDENTIALS_SECRET",
    "REFRESH_TOKEN_SECRET",
    "SecretsManagerClient",
    "build_boto_config",
]
