from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, MongoClient, ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from .errors import Conflict
from .models import TaskEntity, UserEntity
from .repositories import Storage, TaskRepository, UserRepository
from .settings import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Names:
    users: str = "users"
    tasks: str = "todos"


_NAMES = _Names()

_NEWEST_FIRST = [("created_at", DESCENDING), ("_id", DESCENDING)]


def _object_id(value: str) -> Optional[ObjectId]:
    return ObjectId(value) if ObjectId.is_valid(value) else None


def _now() -> datetime:
    return datetime.now(timezone.utc)


class MongoUserRepository(UserRepository):
    """
    Credential store backed by a MongoDB collection with a unique email index.
    """

    def __init__(self, db: Database) -> None:
        self._col: Collection = db[_NAMES.users]
        self._col.create_index([("email", ASCENDING)], unique=True)

    def _doc_to_entity(self, doc: Mapping[str, Any]) -> UserEntity:
        return {
            "id": str(doc["_id"]),
            "email": str(doc["email"]),
            "password_hash": str(doc["password_hash"]),
            "created_at": doc["created_at"],
        }

    def create(self, email: str, password_hash: str) -> UserEntity:
        doc: Dict[str, Any] = {"email": email, "password_hash": password_hash, "created_at": _now()}
        try:
            result = self._col.insert_one(doc)
        except DuplicateKeyError as exc:
            raise Conflict() from exc
        doc["_id"] = result.inserted_id
        return self._doc_to_entity(doc)

    def get(self, user_id: str) -> Optional[UserEntity]:
        oid = _object_id(user_id)
        if oid is None:
            return None
        doc = self._col.find_one({"_id": oid})
        return self._doc_to_entity(doc) if doc else None

    def get_by_email(self, email: str) -> Optional[UserEntity]:
        doc = self._col.find_one({"email": email})
        return self._doc_to_entity(doc) if doc else None


class MongoTaskRepository(TaskRepository):
    """
    Task store backed by a MongoDB collection.

    Update and delete filter on both ``_id`` and ``owner_id`` in a single
    find-and-modify call, so the ownership check and the write are atomic per
    document.
    """

    def __init__(self, db: Database) -> None:
        self._col: Collection = db[_NAMES.tasks]
        self._col.create_index([("owner_id", ASCENDING), ("created_at", DESCENDING)])

    def _doc_to_entity(self, doc: Mapping[str, Any]) -> TaskEntity:
        return {
            "id": str(doc["_id"]),
            "owner_id": str(doc["owner_id"]),
            "text": str(doc["text"]),
            "completed": bool(doc.get("completed", False)),
            "created_at": doc["created_at"],
        }

    def _owned(self, owner_id: str, task_id: str) -> Optional[Dict[str, Any]]:
        oid = _object_id(task_id)
        if oid is None:
            return None
        return {"_id": oid, "owner_id": owner_id}

    def list(self, owner_id: str) -> List[TaskEntity]:
        cursor = self._col.find({"owner_id": owner_id}).sort(_NEWEST_FIRST)
        return [self._doc_to_entity(d) for d in cursor]

    def create(self, owner_id: str, text: str) -> TaskEntity:
        doc: Dict[str, Any] = {
            "owner_id": owner_id,
            "text": text,
            "completed": False,
            "created_at": _now(),
        }
        result = self._col.insert_one(doc)
        doc["_id"] = result.inserted_id
        return self._doc_to_entity(doc)

    def update(
        self,
        owner_id: str,
        task_id: str,
        text: Optional[str] = None,
        completed: Optional[bool] = None,
    ) -> Optional[TaskEntity]:
        query = self._owned(owner_id, task_id)
        if query is None:
            return None

        fields: Dict[str, Any] = {}
        if text is not None:
            fields["text"] = text
        if completed is not None:
            fields["completed"] = completed

        if not fields:
            doc = self._col.find_one(query)
        else:
            doc = self._col.find_one_and_update(
                query, {"$set": fields}, return_document=ReturnDocument.AFTER
            )
        return self._doc_to_entity(doc) if doc else None

    def delete(self, owner_id: str, task_id: str) -> Optional[TaskEntity]:
        query = self._owned(owner_id, task_id)
        if query is None:
            return None
        doc = self._col.find_one_and_delete(query)
        return self._doc_to_entity(doc) if doc else None


# PUBLIC_INTERFACE
def mongo_storage(db: Database) -> Storage:
    """Build Mongo-backed stores over an already connected database handle."""
    return Storage(users=MongoUserRepository(db), tasks=MongoTaskRepository(db), backend="mongo")


# PUBLIC_INTERFACE
def connect_storage(settings: Settings) -> Storage:
    """
    Connect to MongoDB and verify the server answers a ping.

    Raises:
        pymongo.errors.PyMongoError if the server cannot be reached within
        MONGODB_TIMEOUT_MS.
    """
    client: MongoClient = MongoClient(
        settings.mongodb_uri,
        serverSelectionTimeoutMS=settings.mongodb_timeout_ms,
        tz_aware=True,
    )
    try:
        client.admin.command("ping")
        storage = mongo_storage(client[settings.mongodb_db])
    except Exception:
        client.close()
        raise
    logger.info("Connected to MongoDB database %r", settings.mongodb_db)
    return storage
