from __future__ import annotations

from datetime import datetime
from typing import TypedDict


# PUBLIC_INTERFACE
class UserEntity(TypedDict):
    """
    A registered account as held by the storage backends.

    Fields:
    - id: Unique string identifier assigned by the store
    - email: Normalized (stripped, lower-cased) email address
    - password_hash: Salted one-way hash of the password; never returned by the API
    - created_at: UTC creation timestamp
    """

    id: str
    email: str
    password_hash: str
    created_at: datetime


# PUBLIC_INTERFACE
class TaskEntity(TypedDict):
    """
    A single to-do item owned by one user.

    Fields:
    - id: Unique string identifier assigned by the store
    - owner_id: Id of the owning user (immutable)
    - text: Non-empty trimmed text
    - completed: Completion flag
    - created_at: UTC creation timestamp, used for newest-first ordering
    """

    id: str
    owner_id: str
    text: str
    completed: bool
    created_at: datetime
