# Collaborator protocols for the refresh grant.
# Created: 2026-02-20
#
# The grant depends on these capability sets, not on concrete classes.
# Store methods may be plain functions or coroutines; the grant awaits
# whatever comes back if it is awaitable.

from __future__ import annotations

import inspect
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from refreshgrant.oauth2.models import IssuedToken, OAuthClient, RefreshToken


@runtime_checkable
class TokenStore(Protocol):
    """Persistence facade required by the refresh grant.

    Implementations must make ``revoke_token`` atomic: when two requests
    redeem the same refresh token concurrently, at most one revocation may
    report success.
    """

    async def get_refresh_token(self, refresh_token: str) -> RefreshToken | None:
        """Look up a refresh token. Return None if it does not exist."""
        ...

    async def revoke_token(self, token: RefreshToken) -> bool:
        """Revoke a refresh token. Return False if it was already revoked or missing."""
        ...

    async def save_token(
        self, token: IssuedToken, client: OAuthClient, user: Any
    ) -> IssuedToken:
        """Persist a newly issued token and return the stored record."""
        ...


@runtime_checkable
class TokenFactory(Protocol):
    """Token string generation and expiry computation."""

    async def generate_access_token(
        self, client: OAuthClient, user: Any, scope: Any
    ) -> str: ...

    async def generate_refresh_token(
        self, client: OAuthClient, user: Any, scope: Any
    ) -> str: ...

    async def get_access_token_expires_at(self) -> datetime: ...

    async def get_refresh_token_expires_at(self) -> datetime: ...


REQUIRED_STORE_METHODS = ("get_refresh_token", "revoke_token", "save_token")


async def maybe_await(value: Any) -> Any:
    """Resolve ``value`` if a store method handed back an awaitable."""
    if inspect.isawaitable(value):
        return await value
    return value
