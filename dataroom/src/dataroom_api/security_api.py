# coding: utf-8

from __future__ import annotations

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from dataroom_api.auth.context import set_current_token
from dataroom_api.auth.service import decode_access_token
from dataroom_api.models.extra_models import TokenModel


bearer_auth = HTTPBearer(auto_error=False)


async def get_token_bearerAuth(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_auth),
) -> TokenModel:
    """
    Decode and validate bearer tokens for protected endpoints.

    The resolved token is also stored in a ContextVar so implementations can
    read the caller through ``require_principal``.
    """

    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status.HTTP_401_UNAUTHORIZED,
            detail={"error": "unauthorized", "message": "Missing bearer token"},
        )

    token_model = decode_access_token(credentials.credentials)
    set_current_token(token_model)
    return token_model
