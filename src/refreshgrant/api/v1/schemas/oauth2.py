# OAuth2 schemas.
# Created: 2026-02-20

from __future__ import annotations

from pydantic import BaseModel


class TokenRequest(BaseModel):
    """Refresh token request body."""

    grant_type: str | None = None
    client_id: str | None = None
    refresh_token: str | None = None
    scope: str | None = None


class TokenResponse(BaseModel):
    """OAuth2 token response."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int | None = None
    refresh_token: str | None = None
    scope: str | None = None


class ErrorResponse(BaseModel):
    """OAuth2 error response (RFC 6749 section 5.2)."""

    error: str
    error_description: str | None = None
