# Tests for OAuth2 data models.
# Created: 2026-02-20

import dataclasses
from datetime import UTC, datetime, timedelta

import pytest

from refreshgrant.oauth2.models import IssuedToken, OAuthClient, as_utc, scope_to_string


class TestOAuthClient:
    def test_hashable_and_immutable(self):
        client = OAuthClient(id="c1")
        assert hash(client) == hash(OAuthClient(id="c1"))
        assert client.grants == ("refresh_token",)
        with pytest.raises(dataclasses.FrozenInstanceError):
            client.grants = ("password",)


class TestAsUtc:
    def test_naive_gets_utc(self):
        naive = datetime(2030, 1, 1, 12, 0)
        assert as_utc(naive) == datetime(2030, 1, 1, 12, 0, tzinfo=UTC)

    def test_aware_unchanged(self):
        aware = datetime(2030, 1, 1, tzinfo=UTC)
        assert as_utc(aware) is aware


class TestIssuedTokenResponse:
    def test_naive_expiry(self):
        expires = datetime.now(UTC).replace(tzinfo=None) + timedelta(hours=1)
        data = IssuedToken("at", expires, "read").to_response()
        assert 3500 < data["expires_in"] <= 3600
        assert data["scope"] == "read"
        assert "refresh_token" not in data

    def test_past_expiry_clamped(self):
        expires = datetime.now(UTC) - timedelta(minutes=1)
        assert IssuedToken("at", expires, None).to_response()["expires_in"] == 0

    def test_set_scope_joined(self):
        assert scope_to_string({"write", "read"}) == "read write"
