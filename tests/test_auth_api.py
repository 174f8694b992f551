from fastapi.testclient import TestClient

from .helpers import signup


class TestSignup:
    def test_signup_returns_token_for_new_user(self, app, client: TestClient):
        body = signup(client, "a@x.com", "pw1")
        assert set(body) == {"token", "user"}
        assert body["user"] == {"id": "1", "email": "a@x.com"}

        check = app.state.tokens.verify(body["token"])
        assert check.ok
        assert check.user_id == body["user"]["id"]

    def test_password_never_returned_or_stored_plain(self, app, client: TestClient):
        body = signup(client, "a@x.com", "hunter2")
        assert "hunter2" not in str(body)

        stored = app.state.storage.users.get_by_email("a@x.com")
        assert stored["password_hash"] != "hunter2"
        assert app.state.hasher.verify("hunter2", stored["password_hash"])

    def test_duplicate_email_conflicts_regardless_of_password(self, client: TestClient):
        signup(client, "a@x.com", "pw1")
        for password in ("pw1", "other"):
            res = client.post("/auth/signup", json={"email": "a@x.com", "password": password})
            assert res.status_code == 409
            assert res.json() == {"error": "Email already in use"}

    def test_email_is_case_insensitive(self, client: TestClient):
        signup(client, "Someone@Example.com", "pw1")
        res = client.post("/auth/signup", json={"email": "someone@example.COM ", "password": "pw2"})
        assert res.status_code == 409

    def test_missing_fields(self, client: TestClient):
        for body in ({}, {"email": "a@x.com"}, {"password": "pw"}, {"email": "  ", "password": "pw"}):
            res = client.post("/auth/signup", json=body)
            assert res.status_code == 400
            assert res.json() == {"error": "Email and password required"}

    def test_missing_body(self, client: TestClient):
        res = client.post("/auth/signup")
        assert res.status_code == 400
        assert "error" in res.json()


class TestSignin:
    def test_signin_returns_fresh_token(self, app, client: TestClient):
        created = signup(client, "a@x.com", "pw1")
        res = client.post("/auth/signin", json={"email": "A@x.com", "password": "pw1"})
        assert res.status_code == 200
        body = res.json()
        assert body["user"] == created["user"]
        assert app.state.tokens.verify(body["token"]).user_id == created["user"]["id"]

    def test_wrong_password_and_unknown_email_look_the_same(self, client: TestClient):
        signup(client, "a@x.com", "pw1")
        wrong = client.post("/auth/signin", json={"email": "a@x.com", "password": "nope"})
        unknown = client.post("/auth/signin", json={"email": "b@x.com", "password": "pw1"})

        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json() == unknown.json() == {"error": "Invalid credentials"}

    def test_missing_fields(self, client: TestClient):
        res = client.post("/auth/signin", json={"email": "a@x.com", "password": ""})
        assert res.status_code == 400
        assert res.json() == {"error": "Email and password required"}


class TestUnhashablePasswords:
    def test_signup_with_nul_byte_password_is_rejected(self, client: TestClient):
        res = client.post("/auth/signup", json={"email": "n@x.com", "password": "pw\u0000x"})
        assert res.status_code == 400
        assert res.json() == {"error": "Password contains unsupported characters"}

        # Nothing was stored, so the email is still free.
        signup(client, "n@x.com", "pw")

    def test_signin_with_nul_byte_password_is_invalid_credentials(self, client: TestClient):
        signup(client, "n@x.com", "pw")
        res = client.post("/auth/signin", json={"email": "n@x.com", "password": "pw\u0000x"})
        assert res.status_code == 401
        assert res.json() == {"error": "Invalid credentials"}
