# Shared fixtures.
# Created: 2026-02-20

import pytest

from refreshgrant.config import get_settings


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point the data directory at a temp dir and reset singletons."""
    import refreshgrant.oauth2.server as server_mod
    import refreshgrant.security.audit as audit_mod

    monkeypatch.setenv("REFRESHGRANT_CONFIG_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("REFRESHGRANT_ALWAYS_ISSUE_NEW_REFRESH_TOKEN", raising=False)
    get_settings.cache_clear()
    monkeypatch.setattr(server_mod, "_server", None)
    monkeypatch.setattr(audit_mod, "_audit_logger", None)
    yield
    get_settings.cache_clear()
