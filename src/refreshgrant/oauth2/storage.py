# OAuth2 token storage.
# Created: 2026-02-20
#
# File-backed token persistence; tokens survive server restarts.
# Clients are registered in memory by the embedding application.
# All token operations run under one asyncio.Lock, which makes
# revoke_token() a compare-and-revoke: of several concurrent redemptions
# of the same refresh token, only the first revocation succeeds.

from __future__ import annotations

import asyncio
import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from refreshgrant.oauth2.models import IssuedToken, OAuthClient, OAuthUser, RefreshToken, as_utc

logger = logging.getLogger(__name__)


def _default_persist_path() -> Path:
    from refreshgrant.config import get_config_dir

    return get_config_dir() / "oauth_tokens.json"


def _dump_dt(value: datetime | None) -> str | None:
    return as_utc(value).isoformat() if value else None


def _load_dt(value: str | None) -> datetime | None:
    return as_utc(datetime.fromisoformat(value)) if value else None


def _dump_scope(scope: Any) -> Any:
    if isinstance(scope, (set, frozenset)):
        return sorted(scope)
    return scope


def _load_scope(scope: Any) -> Any:
    if isinstance(scope, list):
        return set(scope)
    return scope


class OAuthStorage:
    """File-backed token store for the refresh grant.

    Records are keyed by access token; ``_refresh_index`` maps refresh
    tokens to their record.
    """

    def __init__(self, persist_path: Path | None = None):
        self._clients: dict[str, OAuthClient] = {}
        self._tokens: dict[str, dict[str, Any]] = {}  # keyed by access_token
        self._refresh_index: dict[str, str] = {}  # refresh_token -> access_token
        self._persist_path = persist_path
        self._lock = asyncio.Lock()
        self._load_tokens()

    def _get_path(self) -> Path:
        if self._persist_path is not None:
            return self._persist_path
        return _default_persist_path()

    def _load_tokens(self) -> None:
        """Load tokens from disk on startup."""
        path = self._get_path()
        if not path.exists():
            return
        try:
            data = json.loads(path.read_text())
            for entry in data:
                self._index(entry)
            logger.debug("Loaded %d OAuth tokens from %s", len(self._tokens), path)
        except (json.JSONDecodeError, OSError, KeyError, TypeError) as exc:
            logger.warning("Failed to load OAuth tokens from %s: %s", path, exc)

    def _save_tokens(self) -> None:
        """Persist tokens to disk."""
        path = self._get_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(list(self._tokens.values()), indent=2))
        try:
            path.chmod(0o600)
        except OSError:
            pass

    def _index(self, entry: dict[str, Any]) -> None:
        self._tokens[entry["access_token"]] = entry
        if entry.get("refresh_token"):
            self._refresh_index[entry["refresh_token"]] = entry["access_token"]

    # -- clients -----------------------------------------------------------

    def register_client(self, client: OAuthClient) -> None:
        self._clients[client.id] = client

    def get_client(self, client_id: str) -> OAuthClient | None:
        return self._clients.get(client_id)

    # -- TokenStore ----------------------------------------------------------

    async def get_refresh_token(self, refresh_token: str) -> RefreshToken | None:
        async with self._lock:
            access_token = self._refresh_index.get(refresh_token)
            entry = self._tokens.get(access_token) if access_token else None
            if entry is None or entry["revoked"]:
                return None
            return RefreshToken(
                refresh_token=entry["refresh_token"],
                client=self._clients.get(entry["client_id"]),
                user=OAuthUser(entry["user_id"]) if entry.get("user_id") else None,
                scope=_load_scope(entry.get("scope")),
                refresh_token_expires_at=_load_dt(entry.get("refresh_token_expires_at")),
            )

    async def revoke_token(self, token: RefreshToken) -> bool:
        async with self._lock:
            access_token = self._refresh_index.get(token.refresh_token)
            entry = self._tokens.get(access_token) if access_token else None
            if entry is None or entry["revoked"]:
                return False
            entry["revoked"] = True
            self._save_tokens()
            logger.debug("Revoked refresh token for client %s", entry["client_id"])
            return True

    async def save_token(
        self, token: IssuedToken, client: OAuthClient, user: Any
    ) -> IssuedToken:
        entry = {
            "access_token": token.access_token,
            "access_token_expires_at": _dump_dt(token.access_token_expires_at),
            "refresh_token": token.refresh_token,
            "refresh_token_expires_at": _dump_dt(token.refresh_token_expires_at),
            "scope": _dump_scope(token.scope),
            "client_id": client.id,
            "user_id": getattr(user, "id", user),
            "created_at": datetime.now(UTC).isoformat(),
            "revoked": False,
        }
        async with self._lock:
            self._index(entry)
            self._save_tokens()
        token.client = client
        token.user = user
        return token

    # -- housekeeping -------------------------------------------------------

    async def get_access_token(self, access_token: str) -> IssuedToken | None:
        """Return a live (unrevoked, unexpired) access token record."""
        async with self._lock:
            entry = self._tokens.get(access_token)
        if entry is None or entry["revoked"]:
            return None
        expires_at = _load_dt(entry.get("access_token_expires_at"))
        if expires_at and datetime.now(UTC) > expires_at:
            return None
        return IssuedToken(
            access_token=entry["access_token"],
            access_token_expires_at=expires_at,
            scope=_load_scope(entry.get("scope")),
            refresh_token=entry.get("refresh_token"),
            refresh_token_expires_at=_load_dt(entry.get("refresh_token_expires_at")),
            client=self._clients.get(entry["client_id"]),
            user=OAuthUser(entry["user_id"]) if entry.get("user_id") else None,
        )

    async def cleanup_expired(self) -> int:
        """Drop revoked tokens and tokens whose every credential has expired."""
        now = datetime.now(UTC)

        def _dead(entry: dict[str, Any]) -> bool:
            if entry["revoked"]:
                return True
            access_exp = _load_dt(entry.get("access_token_expires_at"))
            refresh_exp = _load_dt(entry.get("refresh_token_expires_at"))
            access_dead = access_exp is not None and now > access_exp
            if not entry.get("refresh_token"):
                return access_dead
            return access_dead and refresh_exp is not None and now > refresh_exp

        async with self._lock:
            expired = [k for k, v in self._tokens.items() if _dead(v)]
            for k in expired:
                entry = self._tokens.pop(k)
                if entry.get("refresh_token"):
                    self._refresh_index.pop(entry["refresh_token"], None)
            if expired:
                self._save_tokens()
        return len(expired)
