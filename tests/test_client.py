import pytest
from fastapi.testclient import TestClient

from todospace.client import SESSION_EXPIRED, ApiClient, ApiError, TodoBoard


@pytest.fixture()
def api(client: TestClient) -> ApiClient:
    return ApiClient(http=client)


@pytest.fixture()
def board(api: ApiClient) -> TodoBoard:
    return TodoBoard(api)


class TestApiClient:
    def test_signup_stores_token_and_sends_it(self, api: ApiClient):
        assert not api.is_authenticated()
        res = api.signup("a@x.com", "pw1")
        assert api.token == res["token"]

        created = api.add_todo("buy milk")
        assert api.get_todos() == [created]

    def test_server_error_message_is_surfaced(self, api: ApiClient):
        api.signup("a@x.com", "pw1")
        with pytest.raises(ApiError) as excinfo:
            api.signup("a@x.com", "pw1")
        assert excinfo.value.message == "Email already in use"
        assert excinfo.value.status_code == 409

    def test_401_clears_token(self, api: ApiClient):
        api.set_token("bogus")
        with pytest.raises(ApiError) as excinfo:
            api.get_todos()
        assert excinfo.value.message == SESSION_EXPIRED
        assert not api.is_authenticated()

    def test_logout(self, api: ApiClient):
        api.signup("a@x.com", "pw1")
        api.logout()
        assert api.token == ""

    def test_unreachable_server(self):
        api = ApiClient(base_url="http://127.0.0.1:1")
        with pytest.raises(ApiError) as excinfo:
            api.get_todos()
        assert excinfo.value.message.startswith("Unable to connect to server")
        api.close()


class TestTodoBoard:
    def test_starts_on_auth_screen(self, board: TodoBoard):
        assert board.screen == "auth"

    def test_sign_up_shows_list(self, board: TodoBoard):
        assert board.sign_up("a@x.com", "pw1")
        assert board.screen == "todos"
        assert board.user["email"] == "a@x.com"
        assert board.todos == []

    def test_failed_sign_in_stays_on_auth_with_notice(self, board: TodoBoard):
        assert not board.sign_in("nobody@x.com", "pw")
        assert board.screen == "auth"
        assert board.notices[-1].title == "Login failed"
        assert board.notices[-1].destructive

    def test_add_toggle_edit_remove(self, board: TodoBoard):
        board.sign_up("a@x.com", "pw1")

        assert not board.add("   ")
        assert board.add(" first ")
        assert board.add("second")
        assert [t["text"] for t in board.todos] == ["second", "first"]
        assert board.remaining == 2

        first_id = board.todos[1]["id"]
        assert board.toggle(first_id)
        assert board.todos[1]["completed"] is True
        assert (board.remaining, board.done_count) == (1, 1)

        # Completed tasks can still be edited.
        board.start_edit(first_id)
        assert board.editing_text == "first"
        board.editing_text = "first, renamed"
        assert board.save_edit()
        assert board.editing_id is None
        assert board.todos[1]["text"] == "first, renamed"

        assert board.remove(first_id)
        assert [t["text"] for t in board.todos] == ["second"]

        # Local state matches the server.
        assert board.api.get_todos() == board.todos

    def test_save_edit_skips_blank_or_unchanged(self, board: TodoBoard):
        board.sign_up("a@x.com", "pw1")
        board.add("same")
        tid = board.todos[0]["id"]

        board.start_edit(tid)
        assert not board.save_edit()

        board.start_edit(tid)
        board.editing_text = "  "
        assert not board.save_edit()
        assert board.todos[0]["text"] == "same"

    def test_remove_unknown_adds_notice(self, board: TodoBoard):
        board.sign_up("a@x.com", "pw1")
        assert not board.remove("999")
        assert board.notices[-1].description == "Not found"
        assert board.screen == "todos"

    def test_expired_session_returns_to_auth(self, board: TodoBoard):
        board.sign_up("a@x.com", "pw1")
        board.api.set_token("expired-or-bogus")
        assert not board.refresh()
        assert board.screen == "auth"
        assert board.notices[-1].description == SESSION_EXPIRED

    def test_sign_out(self, board: TodoBoard):
        board.sign_up("a@x.com", "pw1")
        board.add("x")
        board.sign_out()
        assert board.screen == "auth"
        assert board.todos == []
        assert not board.api.is_authenticated()
