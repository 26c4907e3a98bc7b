# OAuth2 data models for the refresh grant.
# Created: 2026-02-20

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any


@dataclass(frozen=True)
class OAuthClient:
    """Authenticated OAuth2 client."""

    id: str
    name: str = ""
    grants: tuple[str, ...] = ("refresh_token",)


@dataclass(frozen=True)
class OAuthUser:
    """Resource owner. The grant only passes it through to the store."""

    id: str


@dataclass
class RefreshToken:
    """A refresh token as returned by ``TokenStore.get_refresh_token()``."""

    refresh_token: str
    client: OAuthClient | None
    user: Any
    scope: str | set[str] | None = None
    refresh_token_expires_at: datetime | None = None


@dataclass
class IssuedToken:
    """Token record produced by a successful refresh.

    ``refresh_token`` and ``refresh_token_expires_at`` are only set when
    refresh token rotation is enabled.
    """

    access_token: str
    access_token_expires_at: datetime | None
    scope: str | set[str] | None
    refresh_token: str | None = None
    refresh_token_expires_at: datetime | None = None
    client: OAuthClient | None = None
    user: Any = None

    def to_response(self) -> dict[str, Any]:
        """Serialize as an RFC 6749 section 5.1 token response."""
        data: dict[str, Any] = {
            "access_token": self.access_token,
            "token_type": "Bearer",
        }
        if self.access_token_expires_at is not None:
            remaining = as_utc(self.access_token_expires_at) - datetime.now(UTC)
            data["expires_in"] = max(int(remaining.total_seconds()), 0)
        if self.refresh_token is not None:
            data["refresh_token"] = self.refresh_token
        if self.scope:
            data["scope"] = scope_to_string(self.scope)
        return data


@dataclass
class TokenRequest:
    """Inbound token request; the grant reads ``body['refresh_token']``."""

    body: Mapping[str, Any]


def as_utc(value: datetime) -> datetime:
    """Attach UTC to a naive datetime; aware values pass through."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def scope_to_string(scope: str | set[str] | None) -> str:
    if scope is None:
        return ""
    if isinstance(scope, str):
        return scope
    return " ".join(sorted(scope))
