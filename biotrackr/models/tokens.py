"""
Domain models for the OAuth credentials kept in the secret vault.
"""

from typing import Optional

from pydantic import BaseModel, Field


class CredentialPair(BaseModel):
    """Tokens returned by the Fitbit token endpoint for a refresh grant."""

    access_token: str = Field(..., min_length=1)
    refresh_token: str = Field(..., min_length=1)
    expires_in: int = Field(..., description="Access token lifetime in seconds.")
    token_type: Optional[str] = None
    scope: Optional[str] = None
    user_id: Optional[str] = None


class ClientCredentials(BaseModel):
    """Decoded form of the ``FitbitCredentials`` secret."""

    client_id: str = Field(..., min_length=1)
    client_secret: str = Field(..., min_length=1)


__all__ = ["ClientCredentials", "CredentialPair"]
