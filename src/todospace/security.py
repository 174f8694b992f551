"""Password hashing and bearer token signing."""
from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from passlib.exc import PasswordValueError

from .errors import ValidationError
from .settings import Settings


class PasswordHasher:
    """Salted bcrypt hashing through passlib."""

    def __init__(self, rounds: int = 12) -> None:
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__default_rounds=rounds,
        )

    def hash(self, password: str) -> str:
        try:
            return self._context.hash(password)
        except PasswordValueError as exc:
            raise ValidationError("Password contains unsupported characters") from exc

    def verify(self, password: str, hashed: str) -> bool:
        # A password bcrypt cannot hash (e.g. NUL bytes) never matches.
        try:
            return self._context.verify(password, hashed)
        except PasswordValueError:
            return False

    def dummy_verify(self) -> None:
        """Spend the same time as a real verify (used when the email is unknown)."""
        self._context.dummy_verify()


class TokenStatus(enum.Enum):
    OK = "ok"
    EXPIRED = "expired"
    INVALID = "invalid"


@dataclass(frozen=True)
class TokenCheck:
    """Outcome of verifying a bearer token. ``user_id`` is set only when OK."""

    status: TokenStatus
    user_id: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is TokenStatus.OK


# PUBLIC_INTERFACE
class TokenService:
    """
    Issues and verifies signed, time-limited bearer tokens (JWT).

    Tokens carry the user id in ``sub`` and expire ``ttl`` after issue. There is
    no refresh or revocation; clients sign in again once a token expires.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", ttl: timedelta = timedelta(days=7)) -> None:
        if not secret:
            raise ValueError("token secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = ttl

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            ttl=timedelta(days=settings.token_ttl_days),
        )

    def issue(self, user_id: str, now: Optional[datetime] = None) -> str:
        issued = now or datetime.now(timezone.utc)
        claims = {"sub": str(user_id), "iat": issued, "exp": issued + self._ttl}
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def verify(self, token: Optional[str]) -> TokenCheck:
        """
        Verify a token without raising.

        Returns:
            TokenCheck(OK, user_id) for a valid token, TokenCheck(EXPIRED) once
            past ``exp``, TokenCheck(INVALID) for anything else (absent, bad
            signature, malformed, no subject).
        """
        if not token:
            return TokenCheck(TokenStatus.INVALID)
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except ExpiredSignatureError:
            return TokenCheck(TokenStatus.EXPIRED)
        except JWTError:
            return TokenCheck(TokenStatus.INVALID)

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            return TokenCheck(TokenStatus.INVALID)
        return TokenCheck(TokenStatus.OK, subject)
