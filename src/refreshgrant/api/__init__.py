# RefreshGrant HTTP API layer.
# Created: 2026-02-20
#
# Versioned token endpoint mounted at /api/v1/.

from __future__ import annotations

from fastapi import FastAPI


def create_app() -> FastAPI:
    """Build a FastAPI app serving the OAuth2 token endpoint."""
    from refreshgrant.api.v1.oauth2 import router

    app = FastAPI(title="RefreshGrant")
    app.include_router(router, prefix="/api/v1")
    return app
