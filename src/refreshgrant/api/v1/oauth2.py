# OAuth2 router: refresh_token grant.
# Created: 2026-02-20

from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from refreshgrant.api.v1.schemas.oauth2 import ErrorResponse, TokenRequest, TokenResponse
from refreshgrant.oauth2.errors import OAuthError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["OAuth2"])

_NO_CACHE = {"Cache-Control": "no-store", "Pragma": "no-cache"}


@router.post(
    "/oauth/token",
    response_model=TokenResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def token_exchange(body: TokenRequest):
    """Exchange a refresh token for a new access token."""
    from refreshgrant.oauth2.server import get_oauth_server

    server = get_oauth_server()
    try:
        token = await server.token(
            grant_type=body.grant_type,
            body=body.model_dump(exclude_none=True),
            client_id=body.client_id,
        )
    except OAuthError as exc:
        if exc.code >= 500:
            logger.error("Token endpoint failure: %s", exc.message)
        headers = dict(_NO_CACHE)
        if exc.code == 401:
            headers["WWW-Authenticate"] = 'Basic realm="Service"'
        return JSONResponse(status_code=exc.code, content=exc.to_dict(), headers=headers)

    return JSONResponse(content=token.to_response(), headers=_NO_CACHE)
