# OAuth2 grant handlers.
# Created: 2026-02-20

from refreshgrant.oauth2.grants.refresh_token import RefreshTokenGrantType

__all__ = ["RefreshTokenGrantType"]
