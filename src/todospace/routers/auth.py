"""Auth routes: signup and signin issuing bearer tokens."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from ..deps import get_hasher, get_storage, get_tokens
from ..errors import Conflict, Unauthorized, ValidationError
from ..models import UserEntity
from ..repositories import Storage
from ..schemas import AuthResponse, Credentials, ErrorOut, UserOut
from ..security import PasswordHasher, TokenService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


def _normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def _require(payload: Credentials) -> tuple[str, str]:
    email = _normalize_email(payload.email)
    password = payload.password or ""
    if not email or not password:
        raise ValidationError("Email and password required")
    return email, password


def _auth_response(user: UserEntity, tokens: TokenService) -> AuthResponse:
    return AuthResponse(
        token=tokens.issue(user["id"]),
        user=UserOut(id=user["id"], email=user["email"]),
    )


# PUBLIC_INTERFACE
@router.post(
    "/signup",
    response_model=AuthResponse,
    summary="Sign up",
    description="Register a new account and return a bearer token with the public user fields.",
    responses={
        400: {"model": ErrorOut, "description": "Email or password missing"},
        409: {"model": ErrorOut, "description": "Email already in use"},
    },
)
def signup(
    payload: Credentials,
    storage: Storage = Depends(get_storage),
    tokens: TokenService = Depends(get_tokens),
    hasher: PasswordHasher = Depends(get_hasher),
) -> AuthResponse:
    """
    Create an account. The password is stored only as a salted hash.
    """
    email, password = _require(payload)
    if storage.users.get_by_email(email) is not None:
        logger.info("Signup rejected: email already registered")
        raise Conflict()

    user = storage.users.create(email, hasher.hash(password))
    logger.info("User signed up id=%s", user["id"])
    return _auth_response(user, tokens)


# PUBLIC_INTERFACE
@router.post(
    "/signin",
    response_model=AuthResponse,
    summary="Sign in",
    description="Exchange email and password for a fresh bearer token.",
    responses={
        400: {"model": ErrorOut, "description": "Email or password missing"},
        401: {"model": ErrorOut, "description": "Invalid credentials"},
    },
)
def signin(
    payload: Credentials,
    storage: Storage = Depends(get_storage),
    tokens: TokenService = Depends(get_tokens),
    hasher: PasswordHasher = Depends(get_hasher),
) -> AuthResponse:
    """
    Verify credentials. Unknown email and wrong password fail identically.
    """
    email, password = _require(payload)
    user = storage.users.get_by_email(email)
    if user is None:
        hasher.dummy_verify()
        raise Unauthorized()
    if not hasher.verify(password, user["password_hash"]):
        raise Unauthorized()

    logger.info("User signed in id=%s", user["id"])
    return _auth_response(user, tokens)
