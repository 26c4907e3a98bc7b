# Default token factory.
# Created: 2026-02-20
#
# Token strings come from the store when it implements
# generate_access_token()/generate_refresh_token() and returns a value,
# otherwise from a random generator.

from __future__ import annotations

import hashlib
import logging
import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

from refreshgrant.oauth2.models import OAuthClient
from refreshgrant.oauth2.protocol import maybe_await

logger = logging.getLogger(__name__)


def generate_random_token() -> str:
    """Return a random 64-char hex token."""
    return hashlib.sha256(secrets.token_bytes(256)).hexdigest()


class DefaultTokenFactory:
    """Generates token strings and expiry timestamps for the grant."""

    def __init__(
        self,
        model: Any = None,
        access_token_lifetime: int = 3600,
        refresh_token_lifetime: int = 1209600,
    ):
        self.model = model
        self.access_token_lifetime = access_token_lifetime
        self.refresh_token_lifetime = refresh_token_lifetime

    async def generate_access_token(self, client: OAuthClient, user: Any, scope: Any) -> str:
        generate = getattr(self.model, "generate_access_token", None)
        if generate is not None:
            token = await maybe_await(generate(client, user, scope))
            if token:
                return token
        return generate_random_token()

    async def generate_refresh_token(self, client: OAuthClient, user: Any, scope: Any) -> str:
        generate = getattr(self.model, "generate_refresh_token", None)
        if generate is not None:
            token = await maybe_await(generate(client, user, scope))
            if token:
                return token
        return generate_random_token()

    async def get_access_token_expires_at(self) -> datetime:
        return datetime.now(UTC) + timedelta(seconds=self.access_token_lifetime)

    async def get_refresh_token_expires_at(self) -> datetime:
        return datetime.now(UTC) + timedelta(seconds=self.refresh_token_lifetime)
