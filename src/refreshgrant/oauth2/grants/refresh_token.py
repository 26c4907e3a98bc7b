# Refresh token grant (RFC 6749 section 6).
# Created: 2026-02-20
#
# Pipeline: look up + validate the refresh token, revoke it (unless rotation
# is off), generate replacement credentials, persist. Any failure aborts the
# pipeline; a revocation is not rolled back if a later step fails.

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from typing import Any

from refreshgrant.oauth2.errors import (
    InvalidArgumentError,
    InvalidGrantError,
    InvalidRequestError,
    ServerError,
)
from refreshgrant.oauth2.formats import is_token_vschar
from refreshgrant.oauth2.models import (
    IssuedToken,
    OAuthClient,
    RefreshToken,
    TokenRequest,
    as_utc,
)
from refreshgrant.oauth2.protocol import (
    REQUIRED_STORE_METHODS,
    TokenFactory,
    TokenStore,
    maybe_await,
)
from refreshgrant.oauth2.tokens import DefaultTokenFactory

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class RefreshTokenGrantType:
    """Exchanges a refresh token for a new access token.

    Args:
        model: Token store implementing ``get_refresh_token``, ``revoke_token``
            and ``save_token``. Checked on construction.
        token_factory: Source of token strings and expiry times. Defaults to
            a ``DefaultTokenFactory`` bound to ``model``.
        always_issue_new_refresh_token: Rotate refresh tokens. ``None`` reads
            the setting (default True).
    """

    def __init__(
        self,
        model: TokenStore | None = None,
        token_factory: TokenFactory | None = None,
        always_issue_new_refresh_token: bool | None = None,
        access_token_lifetime: int | None = None,
        refresh_token_lifetime: int | None = None,
    ):
        if model is None:
            raise InvalidArgumentError("Missing parameter: `model`")

        for method in REQUIRED_STORE_METHODS:
            if not callable(getattr(model, method, None)):
                raise InvalidArgumentError(
                    f"Invalid argument: model does not implement `{method}()`"
                )

        if (
            always_issue_new_refresh_token is None
            or access_token_lifetime is None
            or refresh_token_lifetime is None
        ):
            from refreshgrant.config import get_settings

            settings = get_settings()
            if always_issue_new_refresh_token is None:
                always_issue_new_refresh_token = settings.always_issue_new_refresh_token
            if access_token_lifetime is None:
                access_token_lifetime = settings.access_token_lifetime
            if refresh_token_lifetime is None:
                refresh_token_lifetime = settings.refresh_token_lifetime

        self.model = model
        self.always_issue_new_refresh_token = always_issue_new_refresh_token
        self.token_factory = token_factory or DefaultTokenFactory(
            model,
            access_token_lifetime=access_token_lifetime,
            refresh_token_lifetime=refresh_token_lifetime,
        )

    async def handle(self, request: TokenRequest | None, client: OAuthClient | None) -> IssuedToken:
        """Run the refresh grant and return the saved token."""
        if request is None:
            raise InvalidArgumentError("Missing parameter: `request`")

        if client is None:
            raise InvalidArgumentError("Missing parameter: `client`")

        token = await self.get_refresh_token(request, client)
        token = await self.revoke_token(token)
        return await self.save_token(token.user, client, token.scope)

    async def get_refresh_token(self, request: TokenRequest, client: OAuthClient) -> RefreshToken:
        """Read ``refresh_token`` from the request body and validate the stored token."""
        value = request.body.get("refresh_token")
        if not value:
            raise InvalidRequestError("Missing parameter: `refresh_token`")

        if not is_token_vschar(value):
            raise InvalidRequestError("Invalid parameter: `refresh_token`")

        token = await maybe_await(self.model.get_refresh_token(value))
        if not token:
            raise InvalidGrantError("Invalid grant: refresh token is invalid")

        if not token.client:
            raise ServerError(
                "Server error: `get_refresh_token()` did not return a `client` object"
            )

        if not token.user:
            raise ServerError(
                "Server error: `get_refresh_token()` did not return a `user` object"
            )

        if token.client.id != client.id:
            logger.debug("Refresh token for client %s presented by %s", token.client.id, client.id)
            raise InvalidGrantError("Invalid grant: refresh token was issued to another client")

        expires_at = token.refresh_token_expires_at
        if expires_at is not None:
            if not isinstance(expires_at, datetime):
                raise ServerError("Server error: `refresh_token_expires_at` must be a datetime")
            if as_utc(expires_at) < _utcnow():
                raise InvalidGrantError("Invalid grant: refresh token has expired")

        return token

    async def revoke_token(self, token: RefreshToken) -> RefreshToken:
        """Revoke the old refresh token when rotation is enabled.

        See https://tools.ietf.org/html/rfc6749#section-6
        """
        if self.always_issue_new_refresh_token is False:
            return token

        status = await maybe_await(self.model.revoke_token(token))
        if not status:
            raise InvalidGrantError(
                "Invalid grant: refresh token is invalid or could not be revoked"
            )

        return token

    async def save_token(self, user: Any, client: OAuthClient, scope: Any) -> IssuedToken:
        """Generate replacement credentials and persist them."""
        factory = self.token_factory
        access_token, refresh_token, access_expires_at, refresh_expires_at = await asyncio.gather(
            factory.generate_access_token(client, user, scope),
            factory.generate_refresh_token(client, user, scope),
            factory.get_access_token_expires_at(),
            factory.get_refresh_token_expires_at(),
        )

        token = IssuedToken(
            access_token=access_token,
            access_token_expires_at=access_expires_at,
            scope=scope,
        )

        if self.always_issue_new_refresh_token is not False:
            token.refresh_token = refresh_token
            token.refresh_token_expires_at = refresh_expires_at

        return await maybe_await(self.model.save_token(token, client, user))
