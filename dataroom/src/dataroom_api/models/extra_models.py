# coding: utf-8

from typing import Optional

from pydantic import BaseModel


class TokenModel(BaseModel):
    """Authenticated caller resolved from the bearer token."""

    sub: str
    email: Optional[str] = None
