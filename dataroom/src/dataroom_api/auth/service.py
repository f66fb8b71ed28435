"""JWT issuance and verification.

Identity (sign-up, login, e-mail verification) is owned elsewhere; these
helpers only mint and check bearer tokens for principals that already exist.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import HTTPException, status

from dataroom_api.config import DataRoomSettings, get_settings
from dataroom_api.db.session import SessionLocal
from dataroom_api.repo.principals import PrincipalRepository
from dataroom_api.models.extra_models import TokenModel


def _unauthorized(message: str = "Invalid token") -> HTTPException:
    return HTTPException(status.HTTP_401_UNAUTHORIZED, detail={"error": "unauthorized", "message": message})


def create_access_token(
    principal_id: str,
    *,
    email: Optional[str] = None,
    expires_minutes: Optional[int] = None,
    settings: Optional[DataRoomSettings] = None,
) -> tuple[str, int]:
    settings = settings or get_settings()
    minutes = expires_minutes or settings.jwt_access_minutes
    expire = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    payload = {"sub": principal_id, "exp": expire}
    if email:
        payload["email"] = email
    token = jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    return token, minutes * 60


def decode_access_token(token: str, *, settings: Optional[DataRoomSettings] = None) -> TokenModel:
    settings = settings or get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.PyJWTError as exc:
        raise _unauthorized() from exc
    principal_id = payload.get("sub")
    if not principal_id:
        raise _unauthorized()
    with SessionLocal() as session:
        principal = PrincipalRepository().get(principal_id, session=session)
        if principal is None:
            raise _unauthorized()
        return TokenModel(sub=principal.id, email=principal.email)


__all__ = ["create_access_token", "decode_access_token"]
