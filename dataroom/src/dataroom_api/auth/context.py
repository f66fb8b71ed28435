from __future__ import annotations

from contextvars import ContextVar
from typing import Optional

from fastapi import HTTPException, status

from dataroom_api.models.extra_models import TokenModel

_current_token: ContextVar[Optional[TokenModel]] = ContextVar("current_token", default=None)


def set_current_token(token: TokenModel) -> None:
    _current_token.set(token)


def get_current_token() -> Optional[TokenModel]:
    return _current_token.get()


def require_principal() -> str:
    """Principal id of the authenticated caller."""
    token = get_current_token()
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "unauthorized", "message": "Authentication required."},
        )
    return token.sub
