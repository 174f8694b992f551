from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# PUBLIC_INTERFACE
class Credentials(BaseModel):
    """
    Body of signup and signin requests.

    Both fields are optional at the schema level so that a missing field yields
    the API's own 400 "Email and password required" instead of a schema error.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"email": "a@x.com", "password": "pw1"}}
    )

    email: Optional[str] = Field(default=None, description="Account email (case-insensitive)")
    password: Optional[str] = Field(default=None, description="Plaintext password; only its hash is stored")


# PUBLIC_INTERFACE
class UserOut(BaseModel):
    """Public user fields."""

    id: str = Field(..., description="Unique identifier of the user")
    email: str = Field(..., description="Normalized email address")


# PUBLIC_INTERFACE
class AuthResponse(BaseModel):
    """Returned by signup and signin."""

    model_config = ConfigDict(
        json_schema_extra={"example": {"token": "eyJhbGciOi...", "user": {"id": "1", "email": "a@x.com"}}}
    )

    token: str = Field(..., description="Bearer token valid for the configured lifetime")
    user: UserOut


# PUBLIC_INTERFACE
class TaskCreate(BaseModel):
    """
    Schema for creating a new task.
    """

    model_config = ConfigDict(json_schema_extra={"example": {"text": "buy milk"}})

    text: Optional[str] = Field(default=None, description="Task text; trimmed, must not be blank")

    @field_validator("text")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        """
        Strip surrounding whitespace. Blank text is rejected by the route, not here.
        """
        return v.strip() if v is not None else None


# PUBLIC_INTERFACE
class TaskUpdate(BaseModel):
    """
    Schema for partially updating a task.

    Only fields present with the right JSON type are applied: a non-string
    ``text`` or non-boolean ``completed`` is dropped rather than coerced, and a
    text that is blank after trimming is ignored.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"text": "buy oat milk", "completed": True}}
    )

    text: Optional[str] = Field(default=None, description="New task text")
    completed: Optional[bool] = Field(default=None, description="New completion status")

    @field_validator("text", mode="before")
    @classmethod
    def keep_text_if_string(cls, v: Any) -> Optional[str]:
        if not isinstance(v, str):
            return None
        s = v.strip()
        return s or None

    @field_validator("completed", mode="before")
    @classmethod
    def keep_completed_if_bool(cls, v: Any) -> Optional[bool]:
        return v if isinstance(v, bool) else None


# PUBLIC_INTERFACE
class TaskOut(BaseModel):
    """
    Schema returned by the API for a task.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"id": "1", "text": "buy milk", "completed": False}}
    )

    id: str = Field(..., description="Unique identifier of the task")
    text: str = Field(..., description="Task text")
    completed: bool = Field(..., description="Completion status flag")


# PUBLIC_INTERFACE
class ErrorOut(BaseModel):
    """Body of every error response."""

    error: str = Field(..., description="Human readable error message")


# PUBLIC_INTERFACE
class ServiceInfo(BaseModel):
    """Payload of the root endpoint."""

    message: str
    endpoints: List[str]
    backend: str
