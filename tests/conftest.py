import json
import os
import sys
import tempfile
from contextlib import contextmanager
from pathlib import Path
from types import SimpleNamespace

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("ENABLE_FILE_LOGS", "0")

from config import InterviewConfig, LlmRoute
from config.settings import settings
from services.sessions import ScreeningContext
from step_templates import TemplateCatalog
from storage.migrate import migrate


@pytest.fixture(autouse=True)
def tmp_db(monkeypatch):
    td = tempfile.TemporaryDirectory()
    db_path = os.path.join(td.name, "test.db")
    monkeypatch.setattr(settings, "DB_PATH", db_path, raising=False)
    migrate(db_path)
    try:
        yield db_path
    finally:
        td.cleanup()


class FakeResponse:
    def __init__(self, status_code=200, payload=None, lines=None, fail_after=None):
        self.status_code = status_code
        self._payload = payload
        self._lines = list(lines or [])
        self._fail_after = fail_after

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload

    @property
    def text(self):
        return json.dumps(self._payload)

    def iter_lines(self):
        for index, line in enumerate(self._lines):
            if self._fail_after is not None and index >= self._fail_after:
                raise RuntimeError("connection reset")
            yield line


class FakeLlmClient:
    """Stands in for httpx.Client; replays canned responses and records calls."""

    def __init__(self, responses=None, stream_response=None):
        self.responses = list(responses or [])
        self.stream_response = stream_response
        self.calls = []

    def post(self, url, *, json, headers, timeout):
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    @contextmanager
    def stream(self, method, url, *, json, headers, timeout):
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if isinstance(self.stream_response, Exception):
            raise self.stream_response
        yield self.stream_response


def chat_reply(text):
    return FakeResponse(payload={"choices": [{"message": {"role": "assistant", "content": text}}]})


def sse_lines(*chunks):
    lines = [
        "data: " + json.dumps({"choices": [{"delta": {"content": chunk}}]})
        for chunk in chunks
    ]
    return lines + ["data: [DONE]"]


@pytest.fixture
def route():
    return LlmRoute(
        name="interviewer",
        base_url="http://llm.test",
        model="test-model",
        max_retries=1,
        api_key_env=None,
    )


@pytest.fixture
def catalog():
    return TemplateCatalog.with_builtins()


@pytest.fixture
def context(catalog):
    return ScreeningContext(interview=InterviewConfig(), catalog=catalog)


@pytest.fixture
def llm_context(catalog, route):
    def build(client):
        return ScreeningContext(interview=InterviewConfig(), catalog=catalog, route=route, client=client)

    return build


@pytest.fixture
def fakes():
    return SimpleNamespace(
        client=FakeLlmClient,
        response=FakeResponse,
        reply=chat_reply,
        sse=sse_lines,
    )
