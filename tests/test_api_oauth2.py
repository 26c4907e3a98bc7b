# Tests for the OAuth2 token endpoint.
# Created: 2026-02-20

import asyncio
from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from refreshgrant.api import create_app
from refreshgrant.oauth2.models import IssuedToken, OAuthClient, OAuthUser
from refreshgrant.oauth2.server import AuthorizationServer
from refreshgrant.oauth2.storage import OAuthStorage

CLIENT = OAuthClient(id="desktop", name="Desktop")


@pytest.fixture
def storage(tmp_path):
    s = OAuthStorage(persist_path=tmp_path / "tokens.json")
    s.register_client(CLIENT)
    s.register_client(OAuthClient(id="other"))
    s.register_client(OAuthClient(id="no-refresh", grants=("authorization_code",)))
    now = datetime.now(UTC)
    asyncio.run(
        s.save_token(
            IssuedToken(
                access_token="at-1",
                access_token_expires_at=now + timedelta(hours=1),
                scope="chat sessions",
                refresh_token="rt-1",
                refresh_token_expires_at=now + timedelta(days=14),
            ),
            CLIENT,
            OAuthUser(id="u1"),
        )
    )
    return s


@pytest.fixture
def server(storage):
    return AuthorizationServer(storage)


@pytest.fixture
def client(server, monkeypatch):
    import refreshgrant.oauth2.server as mod

    monkeypatch.setattr(mod, "_server", server)
    return TestClient(create_app())


def _refresh(client, refresh_token="rt-1", client_id="desktop", **extra):
    body = {"grant_type": "refresh_token", "client_id": client_id, "refresh_token": refresh_token}
    body.update(extra)
    return client.post("/api/v1/oauth/token", json=body)


class TestTokenEndpoint:
    def test_refresh_success(self, client):
        resp = _refresh(client)
        assert resp.status_code == 200
        data = resp.json()
        assert data["token_type"] == "Bearer"
        assert data["access_token"]
        assert data["refresh_token"] != "rt-1"
        assert data["scope"] == "chat sessions"
        assert 0 < data["expires_in"] <= 3600
        assert resp.headers["cache-control"] == "no-store"
        assert resp.headers["pragma"] == "no-cache"

    def test_new_refresh_token_is_usable(self, client):
        first = _refresh(client).json()
        second = _refresh(client, refresh_token=first["refresh_token"])
        assert second.status_code == 200

    def test_old_refresh_token_rejected_after_rotation(self, client):
        assert _refresh(client).status_code == 200
        resp = _refresh(client)
        assert resp.status_code == 400
        assert resp.json()["error"] == "invalid_grant"

    def test_missing_refresh_token(self, client):
        resp = client.post(
            "/api/v1/oauth/token", json={"grant_type": "refresh_token", "client_id": "desktop"}
        )
        assert resp.status_code == 400
        assert resp.json() == {
            "error": "invalid_request",
            "error_description": "Missing parameter: `refresh_token`",
        }

    def test_malformed_refresh_token(self, client):
        resp = _refresh(client, refresh_token="bad token")
        assert resp.status_code == 400
        assert resp.json()["error"] == "invalid_request"

    def test_token_of_another_client(self, client):
        resp = _refresh(client, client_id="other")
        assert resp.status_code == 400
        assert resp.json()["error"] == "invalid_grant"
        assert "another client" in resp.json()["error_description"]

    def test_unknown_client(self, client):
        resp = _refresh(client, client_id="stranger")
        assert resp.status_code == 401
        assert resp.json()["error"] == "invalid_client"
        assert "www-authenticate" in resp.headers

    def test_client_not_allowed_refresh_grant(self, client):
        resp = _refresh(client, client_id="no-refresh")
        assert resp.status_code == 400
        assert resp.json()["error"] == "unauthorized_client"

    def test_unsupported_grant_type(self, client):
        resp = _refresh(client, grant_type="password")
        assert resp.status_code == 400
        assert resp.json()["error"] == "unsupported_grant_type"

    def test_missing_grant_type(self, client):
        resp = client.post("/api/v1/oauth/token", json={"refresh_token": "rt-1"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "invalid_request"


class TestTokenEndpointWithoutRotation:
    @pytest.fixture
    def server(self, storage):
        return AuthorizationServer(storage, always_issue_new_refresh_token=False)

    def test_refresh_token_omitted_and_reusable(self, client):
        first = _refresh(client)
        assert first.status_code == 200
        assert "refresh_token" not in first.json()
        assert _refresh(client).status_code == 200


class NaiveClockFactory:
    """Token factory returning naive (UTC wall clock) expiry times."""

    async def generate_access_token(self, client, user, scope):
        return "naive-at"

    async def generate_refresh_token(self, client, user, scope):
        return "naive-rt"

    async def get_access_token_expires_at(self):
        return datetime.now(UTC).replace(tzinfo=None) + timedelta(hours=1)

    async def get_refresh_token_expires_at(self):
        return datetime.now(UTC).replace(tzinfo=None) + timedelta(days=14)


class TestTokenEndpointNaiveExpiry:
    @pytest.fixture
    def server(self, storage):
        s = AuthorizationServer(storage)
        s.grant.token_factory = NaiveClockFactory()
        return s

    def test_refresh_succeeds_and_token_is_usable(self, client, storage):
        resp = _refresh(client)
        assert resp.status_code == 200
        data = resp.json()
        assert data["access_token"] == "naive-at"
        assert data["refresh_token"] == "naive-rt"
        assert 3500 < data["expires_in"] <= 3600

        stored = asyncio.run(storage.get_access_token("naive-at"))
        assert stored is not None
        assert stored.access_token_expires_at.tzinfo is not None

        new_refresh = asyncio.run(storage.get_refresh_token("naive-rt"))
        assert new_refresh.refresh_token_expires_at.tzinfo is not None
        assert asyncio.run(storage.cleanup_expired()) == 1  # only the rotated-out pair

