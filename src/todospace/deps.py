from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .errors import ExpiredToken, InvalidToken, MissingToken
from .repositories import Storage
from .security import PasswordHasher, TokenService, TokenStatus

_bearer = HTTPBearer(auto_error=False)


# PUBLIC_INTERFACE
def get_storage(request: Request) -> Storage:
    """Return the storage selected for this app at startup."""
    return request.app.state.storage


# PUBLIC_INTERFACE
def get_tokens(request: Request) -> TokenService:
    return request.app.state.tokens


# PUBLIC_INTERFACE
def get_hasher(request: Request) -> PasswordHasher:
    return request.app.state.hasher


# PUBLIC_INTERFACE
def get_current_user_id(
    request: Request,
    creds: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    tokens: TokenService = Depends(get_tokens),
) -> str:
    """
    Resolve the caller from an ``Authorization: Bearer <token>`` header.

    On success the user id is also attached to ``request.state.user_id``.

    Raises:
        MissingToken if the header is absent, empty or not in the exact "Bearer <token>" form.
        InvalidToken if the token fails verification.
        ExpiredToken (an InvalidToken) if the token is past its expiry.
    """
    if creds is None or creds.scheme != "Bearer" or not creds.credentials:
        raise MissingToken()

    check = tokens.verify(creds.credentials)
    if check.status is TokenStatus.EXPIRED:
        raise ExpiredToken()
    if not check.ok or check.user_id is None:
        raise InvalidToken()

    request.state.user_id = check.user_id
    return check.user_id
