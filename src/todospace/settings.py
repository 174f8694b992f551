from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List

DEFAULT_JWT_SECRET = "dev-secret-change-me"


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - STORAGE_BACKEND: 'memory' (default) or 'mongo'
    - MONGODB_URI: Mongo connection string. Default 'mongodb://localhost:27017'
    - MONGODB_DB: Mongo database name. Default 'todospace'
    - MONGODB_TIMEOUT_MS: server selection timeout used for the startup ping. Default 2000
    - JWT_SECRET: secret used to sign bearer tokens
    - JWT_ALGORITHM: JWT signing algorithm. Default 'HS256'
    - TOKEN_TTL_DAYS: bearer token lifetime in days. Default 7
    - BCRYPT_ROUNDS: bcrypt cost factor (4..31). Default 12
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - LOG_LEVEL: root log level name. Default 'INFO'
    """

    storage_backend: str
    mongodb_uri: str
    mongodb_db: str
    mongodb_timeout_ms: int
    jwt_secret: str
    jwt_algorithm: str
    token_ttl_days: int
    bcrypt_rounds: int
    cors_allow_origins: List[str]
    log_level: str


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_int(value: str, default: int, minimum: int, maximum: int) -> int:
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return min(max(parsed, minimum), maximum)


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    backend = _get_env("STORAGE_BACKEND", "memory").strip().lower()

    return Settings(
        storage_backend=backend,
        mongodb_uri=_get_env("MONGODB_URI", "mongodb://localhost:27017").strip(),
        mongodb_db=_get_env("MONGODB_DB", "todospace").strip(),
        mongodb_timeout_ms=_parse_int(_get_env("MONGODB_TIMEOUT_MS", "2000"), 2000, 1, 60000),
        jwt_secret=_get_env("JWT_SECRET", DEFAULT_JWT_SECRET),
        jwt_algorithm=_get_env("JWT_ALGORITHM", "HS256").strip().upper(),
        token_ttl_days=_parse_int(_get_env("TOKEN_TTL_DAYS", "7"), 7, 1, 365),
        bcrypt_rounds=_parse_int(_get_env("BCRYPT_ROUNDS", "12"), 12, 4, 31),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
    )
