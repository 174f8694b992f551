"""
Client side of TodoSpace.

``ApiClient`` wraps the HTTP API and holds the bearer token. ``TodoBoard``
keeps the state a front end renders (signed-in user, task list, the task
being edited and user-facing notices) and reconciles it with API responses.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000"
SESSION_EXPIRED = "Session expired. Please login again."


class ApiError(Exception):
    """A failed API call, carrying the message to show the user."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


# PUBLIC_INTERFACE
class ApiClient:
    """
    Thin JSON client for the TodoSpace HTTP API.

    Args:
        base_url: API root; ignored when ``http`` is given.
        http: Optional pre-built ``httpx.Client`` (FastAPI's ``TestClient`` works too).
    """

    def __init__(self, base_url: str = DEFAULT_BASE_URL, http: Optional[httpx.Client] = None) -> None:
        self._base_url = base_url.rstrip("/")
        self._http = http or httpx.Client(base_url=self._base_url, timeout=10.0)
        self._token = ""

    @property
    def token(self) -> str:
        return self._token

    def set_token(self, token: Optional[str]) -> None:
        if token:
            self._token = token

    def clear_token(self) -> None:
        self._token = ""

    def is_authenticated(self) -> bool:
        return bool(self._token)

    def close(self) -> None:
        self._http.close()

    def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Any:
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        try:
            res = self._http.request(method, path, json=json, headers=headers)
        except httpx.TransportError as exc:
            logger.warning("API unreachable: %s", exc)
            raise ApiError(
                f"Unable to connect to server. Please check if the backend is running on {self._base_url}"
            ) from exc

        try:
            data = res.json()
        except ValueError:
            data = {}

        if res.is_success:
            return data

        if res.status_code == 401:
            self.clear_token()
            raise ApiError(SESSION_EXPIRED, 401)
        message = data.get("error") if isinstance(data, dict) else None
        raise ApiError(message or f"Request failed with status {res.status_code}", res.status_code)

    def signup(self, email: str, password: str) -> Dict[str, Any]:
        res = self._request("POST", "/auth/signup", {"email": email, "password": password})
        self.set_token(res.get("token"))
        return res

    def signin(self, email: str, password: str) -> Dict[str, Any]:
        res = self._request("POST", "/auth/signin", {"email": email, "password": password})
        self.set_token(res.get("token"))
        return res

    def get_todos(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/todos")

    def add_todo(self, text: str) -> Dict[str, Any]:
        return self._request("POST", "/todos", {"text": text})

    def toggle_todo(self, todo_id: str, completed: bool) -> Dict[str, Any]:
        return self._request("PATCH", f"/todos/{todo_id}", {"completed": completed})

    def update_todo(self, todo_id: str, text: str) -> Dict[str, Any]:
        return self._request("PATCH", f"/todos/{todo_id}", {"text": text})

    def delete_todo(self, todo_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/todos/{todo_id}")

    def logout(self) -> None:
        self.clear_token()


@dataclass(frozen=True)
class Notice:
    """A toast-style message for the user."""

    title: str
    description: str = ""
    destructive: bool = False


# PUBLIC_INTERFACE
@dataclass
class TodoBoard:
    """
    View state of the to-do front end.

    The board shows the auth form until a user signs in and the task list
    afterwards. Every mutation goes through the API first; local state is only
    changed from the server's response. Failures become notices instead of
    exceptions, and a 401 drops back to the auth form.
    """

    api: ApiClient
    user: Optional[Dict[str, Any]] = None
    todos: List[Dict[str, Any]] = field(default_factory=list)
    editing_id: Optional[str] = None
    editing_text: str = ""
    notices: List[Notice] = field(default_factory=list)

    @property
    def screen(self) -> str:
        return "todos" if self.user is not None else "auth"

    @property
    def remaining(self) -> int:
        return sum(1 for t in self.todos if not t["completed"])

    @property
    def done_count(self) -> int:
        return sum(1 for t in self.todos if t["completed"])

    def _fail(self, title: str, err: ApiError) -> bool:
        self.notices.append(Notice(title, err.message, destructive=True))
        if err.status_code == 401:
            self._reset()
        return False

    def _reset(self) -> None:
        self.user = None
        self.todos = []
        self.editing_id = None
        self.editing_text = ""

    def _find(self, todo_id: str) -> Optional[Dict[str, Any]]:
        return next((t for t in self.todos if t["id"] == todo_id), None)

    def _replace(self, updated: Dict[str, Any]) -> None:
        self.todos = [updated if t["id"] == updated["id"] else t for t in self.todos]

    def sign_up(self, email: str, password: str) -> bool:
        try:
            res = self.api.signup(email, password)
        except ApiError as err:
            return self._fail("Signup failed", err)
        self.user = res["user"]
        return self.refresh()

    def sign_in(self, email: str, password: str) -> bool:
        try:
            res = self.api.signin(email, password)
        except ApiError as err:
            return self._fail("Login failed", err)
        self.user = res["user"]
        return self.refresh()

    def sign_out(self) -> None:
        self.api.logout()
        self._reset()

    def refresh(self) -> bool:
        try:
            self.todos = self.api.get_todos()
        except ApiError as err:
            return self._fail("Could not load tasks", err)
        return True

    def add(self, text: str) -> bool:
        text = text.strip()
        if not text:
            return False
        try:
            created = self.api.add_todo(text)
        except ApiError as err:
            return self._fail("Add failed", err)
        self.todos = [created, *self.todos]
        self.notices.append(Notice("Task added", f'"{created["text"]}"'))
        return True

    def toggle(self, todo_id: str) -> bool:
        todo = self._find(todo_id)
        if todo is None:
            return False
        try:
            updated = self.api.toggle_todo(todo_id, not todo["completed"])
        except ApiError as err:
            return self._fail("Update failed", err)
        self._replace(updated)
        return True

    def start_edit(self, todo_id: str) -> None:
        todo = self._find(todo_id)
        if todo is not None:
            self.editing_id = todo_id
            self.editing_text = todo["text"]

    def cancel_edit(self) -> None:
        self.editing_id = None
        self.editing_text = ""

    def save_edit(self) -> bool:
        """Send the edited text; blank or unchanged text just closes the editor."""
        todo_id, text = self.editing_id, self.editing_text.strip()
        self.cancel_edit()
        todo = self._find(todo_id) if todo_id is not None else None
        if todo is None or not text or text == todo["text"]:
            return False
        try:
            updated = self.api.update_todo(todo["id"], text)
        except ApiError as err:
            return self._fail("Update failed", err)
        self._replace(updated)
        self.notices.append(Notice("Task updated", f'"{updated["text"]}"'))
        return True

    def remove(self, todo_id: str) -> bool:
        try:
            removed = self.api.delete_todo(todo_id)
        except ApiError as err:
            return self._fail("Delete failed", err)
        self.todos = [t for t in self.todos if t["id"] != todo_id]
        self.notices.append(Notice("Task removed", f'"{removed["text"]}"', destructive=True))
        return True
