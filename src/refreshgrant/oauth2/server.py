# OAuth2 token endpoint logic.
# Created: 2026-02-20
#
# Authenticates the client against the storage registry and hands the
# request to the refresh grant. Only the refresh_token grant is served.

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from refreshgrant.oauth2.errors import (
    InvalidClientError,
    InvalidGrantError,
    InvalidRequestError,
    OAuthError,
    ServerError,
    UnauthorizedClientError,
    UnsupportedGrantTypeError,
)
from refreshgrant.oauth2.grants.refresh_token import RefreshTokenGrantType
from refreshgrant.oauth2.models import IssuedToken, OAuthClient, TokenRequest
from refreshgrant.oauth2.storage import OAuthStorage
from refreshgrant.security.audit import AuditSeverity, get_audit_logger

logger = logging.getLogger(__name__)

_SEVERITY = {
    InvalidRequestError: AuditSeverity.WARNING,
    InvalidGrantError: AuditSeverity.WARNING,
    ServerError: AuditSeverity.ALERT,
}


class AuthorizationServer:
    """Token endpoint for the refresh grant."""

    def __init__(
        self,
        storage: OAuthStorage | None = None,
        always_issue_new_refresh_token: bool | None = None,
    ):
        self.storage = storage or OAuthStorage()
        self.grant = RefreshTokenGrantType(
            model=self.storage,
            always_issue_new_refresh_token=always_issue_new_refresh_token,
        )

    def authenticate_client(self, client_id: str | None) -> OAuthClient:
        if not client_id:
            raise InvalidRequestError("Missing parameter: `client_id`")
        client = self.storage.get_client(client_id)
        if client is None:
            raise InvalidClientError("Invalid client: client is invalid")
        return client

    async def token(
        self, grant_type: str | None, body: Mapping[str, Any], client_id: str | None
    ) -> IssuedToken:
        """Handle a token request. Raises ``OAuthError`` on failure."""
        if not grant_type:
            raise InvalidRequestError("Missing parameter: `grant_type`")
        if grant_type != "refresh_token":
            raise UnsupportedGrantTypeError("Unsupported grant type: `grant_type` is invalid")

        client = self.authenticate_client(client_id)
        if "refresh_token" not in client.grants:
            raise UnauthorizedClientError("Unauthorized client: `grant_type` is invalid")

        try:
            token = await self.grant.handle(TokenRequest(body=body), client)
        except OAuthError as exc:
            self._audit(client, "error", _SEVERITY.get(type(exc), AuditSeverity.WARNING), exc.name)
            raise

        logger.info("Refreshed access token for client %s", client.id)
        self._audit(
            client,
            "success",
            AuditSeverity.INFO,
            None,
            rotated=token.refresh_token is not None,
        )
        return token

    def _audit(
        self,
        client: OAuthClient,
        status: str,
        severity: AuditSeverity,
        error: str | None,
        **context: Any,
    ) -> None:
        from refreshgrant.config import get_settings

        if not get_settings().audit_enabled:
            return
        if error:
            context["error"] = error
        get_audit_logger().log_token_event(client.id, status, severity, **context)


# Singleton
_server: AuthorizationServer | None = None


def get_oauth_server() -> AuthorizationServer:
    global _server
    if _server is None:
        _server = AuthorizationServer()
    return _server


def reset_oauth_server() -> None:
    global _server
    _server = None
