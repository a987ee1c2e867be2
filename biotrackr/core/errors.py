"""
Error taxonomy shared by the clients, services and API layer.

Client wrappers translate library exceptions (botocore, httpx, sqlite3,
pydantic) into these types so callers only reason about one hierarchy.
"""

from __future__ import annotations


class BiotrackrError(Exception):
    """Base class for all service errors."""


class SecretUnavailableError(BiotrackrError):
    """Raised when a secret cannot be read: missing, unreachable or malformed."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"Secret {name!r} unavailable: {reason}")
        self.name = name
        self.reason = reason


class SecretWriteError(BiotrackrError):
    """Raised when writing a secret back to the vault fails."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"Failed to write secret {name!r}: {reason}")
        self.name = name
        self.reason = reason


class MalformedResponseError(BiotrackrError):
    """Raised when a 2xx response body does not match the expected shape."""


class TokenExchangeFailedError(BiotrackrError):
    """Raised when the token endpoint answers with a non-2xx status."""

    def __init__(self, status_code: int, body: str = "") -> None:
        super().__init__(f"Token exchange failed with HTTP {status_code}")
        self.status_code = status_code
        self.body = body


class UpstreamError(BiotrackrError):
    """Raised when a Fitbit data endpoint fails (non-2xx or transport error)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PersistenceError(BiotrackrError):
    """Raised when the document store rejects or cannot serve an operation."""


class InvalidArgumentError(BiotrackrError):
    """Raised for malformed request input such as invalid calendar dates."""


class DocumentNotFoundError(BiotrackrError):
    """Raised when no document matches the requested key."""


__all__ = [
    "BiotrackrError",
    "DocumentNotFoundError",
    "InvalidArgumentError",
    "MalformedResponseError",
    "PersistenceError",
    "SecretUnavailableError",
    "SecretWriteError",
    "TokenExchangeFailedError",
    "UpstreamError",
]
