# OAuth2 error hierarchy.
# Created: 2026-02-20
#
# Each error carries the RFC 6749 section 5.2 error code (``name``) and the
# HTTP status the transport should use (``code``).

from __future__ import annotations


class OAuthError(Exception):
    """Base class for all OAuth2 errors."""

    code: int = 500
    name: str = "server_error"

    def __init__(self, message: str = "", *, code: int | None = None, name: str | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if name is not None:
            self.name = name

    def to_dict(self) -> dict[str, str]:
        data = {"error": self.name}
        if self.message:
            data["error_description"] = self.message
        return data


class InvalidArgumentError(OAuthError):
    """The grant handler or one of its call sites is misconfigured."""

    code = 500
    name = "invalid_argument"


class InvalidRequestError(OAuthError):
    """The request is missing a parameter or a parameter is malformed."""

    code = 400
    name = "invalid_request"


class InvalidGrantError(OAuthError):
    """The refresh token is invalid, expired, revoked or issued to another client."""

    code = 400
    name = "invalid_grant"


class InvalidClientError(OAuthError):
    """Client authentication failed."""

    code = 401
    name = "invalid_client"


class UnsupportedGrantTypeError(OAuthError):
    code = 400
    name = "unsupported_grant_type"


class ServerError(OAuthError):
    """The token store broke its contract."""

    code = 503
    name = "server_error"


class UnauthorizedClientError(OAuthError):
    """The client may not use this grant type."""

    code = 400
    name = "unauthorized_client"
