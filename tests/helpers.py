from __future__ import annotations

from fastapi.testclient import TestClient


def signup(client: TestClient, email: str = "a@x.com", password: str = "pw1") -> dict:
    res = client.post("/auth/signup", json={"email": email, "password": password})
    assert res.status_code == 200, res.text
    return res.json()


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
