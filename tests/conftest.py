from __future__ import annotations

from typing import Any, Dict, List, Tuple

import pytest


class FakeResponse:
    """Just enough of requests.Response for the clients."""

    def __init__(self, text: str = "", status_code: int = 200) -> None:
        self._text = text
        self.status_code = status_code

    @property
    def text(self) -> str:
        return self._text

    @property
    def ok(self) -> bool:
        return self.status_code < 400


class FakeSession:
    """
    Stand-in for requests.Session that replays queued responses and
    records every call as (method, url, kwargs).
    """

    def __init__(self) -> None:
        self.headers: Dict[str, str] = {}
        self.calls: List[Tuple[str, str, Dict[str, Any]]] = []
        self._responses: Dict[str, List[Any]] = {"GET": [], "POST": []}

    def queue(self, method: str, response: Any) -> None:
        self._responses[method].append(response)

    def _reply(self, method: str, url: str, kwargs: Dict[str, Any]) -> FakeResponse:
        self.calls.append((method, url, kwargs))
        response = self._responses[method].pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._reply("GET", url, kwargs)

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._reply("POST", url, kwargs)


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def make_response():
    def _make(text: str = "", status_code: int = 200) -> FakeResponse:
        return FakeResponse(text=text, status_code=status_code)

    return _make


class UndecodableResponse:
    """An error response whose body cannot be decoded."""

    status_code = 502
    ok = False

    @property
    def text(self) -> str:
        raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")


@pytest.fixture
def undecodable_response() -> UndecodableResponse:
    return UndecodableResponse()


LOGIN_PAGE = """
<html><body>
<form action="/login" method="post">
  <input type="hidden" name="csrf_token" value="abc123">
  <input type="text" name="username">
</form>
</body></html>
"""


@pytest.fixture
def login_page() -> str:
    return LOGIN_PAGE


@pytest.fixture
def no_reddit_env(monkeypatch):
    monkeypatch.delenv("REDDIT_USERNAME", raising=False)
    monkeypatch.delenv("REDDIT_PASSWORD", raising=False)

