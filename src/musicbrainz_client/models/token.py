"""OAuth2 authorization token."""

from __future__ import annotations
from typing import Optional

from pydantic import BaseModel


class AuthorizationToken(BaseModel):
    """
    Token returned by the OAuth2 token endpoint.

    Attributes:
        access_token: Bearer token to send with authenticated requests
        token_type: Token type (``bearer``)
        expires_in: Lifetime in seconds
        refresh_token: Token usable to obtain a new access token, if granted
    """

    access_token: str
    token_type: str
    expires_in: Optional[int] = None
    refresh_token: Optional[str] = None

    model_config = {"extra": "allow", "frozen": True}


__all__ = ["AuthorizationToken"]
