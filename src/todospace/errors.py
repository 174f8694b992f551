"""Application error taxonomy. Each error maps to one HTTP status."""
from __future__ import annotations


class AppError(Exception):
    """Base class for errors surfaced to API callers as ``{"error": message}``."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class Unauthorized(AppError):
    status_code = 401
    default_message = "Invalid credentials"


class MissingToken(AppError):
    status_code = 401
    default_message = "Missing token"


class InvalidToken(AppError):
    status_code = 401
    default_message = "Invalid token"


class ExpiredToken(InvalidToken):
    default_message = "Token expired"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class Conflict(AppError):
    status_code = 409
    default_message = "Email already in use"


class InternalError(AppError):
    status_code = 500
    default_message = "Internal server error"
