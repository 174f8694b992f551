from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from itertools import count
from threading import RLock
from typing import Dict, List, Optional

from .errors import Conflict
from .models import TaskEntity, UserEntity
from .settings import Settings

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class UserRepository(ABC):
    """Abstract credential store."""

    @abstractmethod
    def create(self, email: str, password_hash: str) -> UserEntity:
        """Create and return a new user. Raise Conflict if the email is taken."""

    @abstractmethod
    def get(self, user_id: str) -> Optional[UserEntity]:
        """Return a user by id, or None if not found."""

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[UserEntity]:
        """Return a user by normalized email, or None if not found."""


# PUBLIC_INTERFACE
class TaskRepository(ABC):
    """
    Abstract task store. Every operation is scoped to an owner: a task id that
    exists but belongs to someone else behaves exactly like a missing one.
    """

    @abstractmethod
    def list(self, owner_id: str) -> List[TaskEntity]:
        """Return the owner's tasks, most recently created first."""

    @abstractmethod
    def create(self, owner_id: str, text: str) -> TaskEntity:
        """Create and return a new, not completed task."""

    @abstractmethod
    def update(
        self,
        owner_id: str,
        task_id: str,
        text: Optional[str] = None,
        completed: Optional[bool] = None,
    ) -> Optional[TaskEntity]:
        """Apply the non-None fields. Return the updated task or None if not found."""

    @abstractmethod
    def delete(self, owner_id: str, task_id: str) -> Optional[TaskEntity]:
        """Remove a task. Return the removed task or None if not found."""


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryUserRepository(UserRepository):
    """
    Thread-safe in-memory credential store.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._by_id: Dict[str, UserEntity] = {}
        self._ids = count(1)

    def create(self, email: str, password_hash: str) -> UserEntity:
        with self._lock:
            if self.get_by_email(email) is not None:
                raise Conflict()
            user: UserEntity = {
                "id": str(next(self._ids)),
                "email": email,
                "password_hash": password_hash,
                "created_at": _now(),
            }
            self._by_id[user["id"]] = user
            return user.copy()

    def get(self, user_id: str) -> Optional[UserEntity]:
        with self._lock:
            user = self._by_id.get(user_id)
            return None if user is None else user.copy()

    def get_by_email(self, email: str) -> Optional[UserEntity]:
        with self._lock:
            for user in self._by_id.values():
                if user["email"] == email:
                    return user.copy()
            return None


class InMemoryTaskRepository(TaskRepository):
    """
    Thread-safe in-memory task store. Each owner's tasks are kept newest first.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._by_owner: Dict[str, List[TaskEntity]] = {}
        self._ids = count(1)

    def _find(self, owner_id: str, task_id: str) -> Optional[int]:
        for idx, task in enumerate(self._by_owner.get(owner_id, [])):
            if task["id"] == task_id:
                return idx
        return None

    def list(self, owner_id: str) -> List[TaskEntity]:
        with self._lock:
            return [t.copy() for t in self._by_owner.get(owner_id, [])]

    def create(self, owner_id: str, text: str) -> TaskEntity:
        with self._lock:
            task: TaskEntity = {
                "id": str(next(self._ids)),
                "owner_id": owner_id,
                "text": text,
                "completed": False,
                "created_at": _now(),
            }
            self._by_owner.setdefault(owner_id, []).insert(0, task)
            return task.copy()

    def update(
        self,
        owner_id: str,
        task_id: str,
        text: Optional[str] = None,
        completed: Optional[bool] = None,
    ) -> Optional[TaskEntity]:
        with self._lock:
            idx = self._find(owner_id, task_id)
            if idx is None:
                return None

            task = self._by_owner[owner_id][idx]
            if text is not None:
                task["text"] = text
            if completed is not None:
                task["completed"] = completed
            return task.copy()

    def delete(self, owner_id: str, task_id: str) -> Optional[TaskEntity]:
        with self._lock:
            idx = self._find(owner_id, task_id)
            if idx is None:
                return None
            return self._by_owner[owner_id].pop(idx)


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class Storage:
    """The pair of stores an app instance works against, plus the backend name."""

    users: UserRepository
    tasks: TaskRepository
    backend: str


def memory_storage() -> Storage:
    return Storage(users=InMemoryUserRepository(), tasks=InMemoryTaskRepository(), backend="memory")


# PUBLIC_INTERFACE
def build_storage(settings: Settings) -> Storage:
    """
    Factory returning the configured storage, chosen once at startup.
    - memory: in-memory stores
    - mongo: MongoDB stores; falls back to memory when the server is unreachable
    """
    if settings.storage_backend == "mongo":
        from pymongo.errors import PyMongoError

        from .mongo import connect_storage

        try:
            return connect_storage(settings)
        except PyMongoError as exc:
            logger.warning("MongoDB unavailable at startup (%s); falling back to in-memory storage", exc)
            return memory_storage()

    if settings.storage_backend != "memory":
        logger.warning("Unknown STORAGE_BACKEND %r; using in-memory storage", settings.storage_backend)
    return memory_storage()
