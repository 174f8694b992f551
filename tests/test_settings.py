from todospace.settings import DEFAULT_JWT_SECRET, get_settings


def test_defaults(monkeypatch):
    for name in ("STORAGE_BACKEND", "JWT_SECRET", "TOKEN_TTL_DAYS", "BCRYPT_ROUNDS", "CORS_ALLOW_ORIGINS"):
        monkeypatch.delenv(name, raising=False)
    s = get_settings()
    assert s.storage_backend == "memory"
    assert s.jwt_secret == DEFAULT_JWT_SECRET
    assert s.token_ttl_days == 7
    assert s.bcrypt_rounds == 12
    assert s.cors_allow_origins == ["*"]


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", " Mongo ")
    monkeypatch.setenv("MONGODB_URI", "mongodb://db:27017")
    monkeypatch.setenv("BCRYPT_ROUNDS", "2")
    monkeypatch.setenv("TOKEN_TTL_DAYS", "not-a-number")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://localhost:5173, http://example.com")
    s = get_settings()
    assert s.storage_backend == "mongo"
    assert s.mongodb_uri == "mongodb://db:27017"
    assert s.bcrypt_rounds == 4
    assert s.token_ttl_days == 7
    assert s.cors_allow_origins == ["http://localhost:5173", "http://example.com"]
