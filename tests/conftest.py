from __future__ import annotations

import os

import pytest
from fastapi.testclient import TestClient

# Keep module-level app creation (todospace.main.app) cheap and offline.
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from todospace.main import create_app  # noqa: E402
from todospace.repositories import memory_storage  # noqa: E402
from todospace.settings import Settings  # noqa: E402


@pytest.fixture()
def settings() -> Settings:
    """
    Explicit settings so tests do not depend on the caller's environment.
    Four bcrypt rounds keeps hashing fast.
    """
    return Settings(
        storage_backend="memory",
        mongodb_uri="mongodb://127.0.0.1:1",
        mongodb_db="todospace_test",
        mongodb_timeout_ms=50,
        jwt_secret="test-secret",
        jwt_algorithm="HS256",
        token_ttl_days=7,
        bcrypt_rounds=4,
        cors_allow_origins=["*"],
        log_level="WARNING",
    )


@pytest.fixture()
def app(settings: Settings):
    return create_app(settings=settings, storage=memory_storage())


@pytest.fixture()
def client(app) -> TestClient:
    return TestClient(app)
