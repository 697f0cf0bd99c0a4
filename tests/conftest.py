# tests/conftest.py
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import pytest
import requests


# ──────────────────────────────────────────────────────────────────────────────
# Fake HTTP layer: replaces requests.post inside the completion client
# ──────────────────────────────────────────────────────────────────────────────

class FakeResponse:
    """Minimal stand-in for requests.Response: status_code, text, json()."""

    def __init__(self, status_code: int = 200, payload: Any = None, text: Optional[str] = None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    def json(self) -> Any:
        return json.loads(self.text)


class FakePost:
    """Callable that records each post() and hands back a queued response."""

    def __init__(self) -> None:
        self.calls: List[Dict[str, Any]] = []
        self._response: Optional[FakeResponse] = None
        self._raise: Optional[BaseException] = None

    def queue_reply(self, content: str) -> None:
        self.queue_response(
            FakeResponse(200, {"choices": [{"message": {"role": "assistant", "content": content}}]})
        )

    def queue_response(self, resp: FakeResponse) -> None:
        self._response = resp
        self._raise = None

    def queue_exception(self, exc: BaseException) -> None:
        self._response = None
        self._raise = exc

    def __call__(self, url: str, json: Dict[str, Any] | None = None, headers=None, timeout=None):
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self._raise is not None:
            raise self._raise
        if self._response is None:
            raise requests.ConnectionError("no queued response")
        return self._response


@pytest.fixture
def fake_post(monkeypatch) -> FakePost:
    fake = FakePost()
    monkeypatch.setattr("lc.llm.client.requests.post", fake)
    return fake


@pytest.fixture
def app_dir(tmp_path, monkeypatch):
    """Point config and history at a temporary directory."""
    directory = tmp_path / "lc"
    monkeypatch.setenv("LC_CONFIG_DIR", str(directory))
    return directory
