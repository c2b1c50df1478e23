"""Shared fixtures for claude-afk tests."""

import logging

import httpx
import pytest

from claude_afk.client import BackendClient
from claude_afk.config import AfkConfig


class FakeClock:
    """Monotonic clock that only moves when sleep() is called."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float):
        self.sleeps.append(seconds)
        self.now += seconds


class ScriptedBackend:
    """httpx.MockTransport handler replaying queued responses per route.

    Each queued item is a dict (200 JSON), an httpx.Response, or an
    exception to raise. The last item for a route repeats forever.
    """

    def __init__(self):
        self.routes = {}
        self.requests = []

    def queue(self, method: str, path: str, *responses):
        self.routes.setdefault((method, path), []).extend(responses)

    def calls(self, method: str, path: str) -> int:
        return sum(1 for r in self.requests if r.method == method and r.url.path == path)

    def last(self, method: str, path: str) -> httpx.Request:
        return [r for r in self.requests if r.method == method and r.url.path == path][-1]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        pending = self.routes.get((request.method, request.url.path))
        if not pending:
            return httpx.Response(404, json={"message": "Not found"})
        item = pending.pop(0) if len(pending) > 1 else pending[0]
        if isinstance(item, Exception):
            raise item
        if isinstance(item, httpx.Response):
            return item
        return httpx.Response(200, json=item)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the config store at a temp dir and clear env overrides."""
    config_dir = tmp_path / "afk-config"
    monkeypatch.setenv("CLAUDE_AFK_CONFIG_DIR", str(config_dir))
    monkeypatch.delenv("CLAUDE_AFK_API_URL", raising=False)
    monkeypatch.delenv("CLAUDE_AFK_DEBUG", raising=False)
    return config_dir


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers setup_logging() attached so tests don't leak streams."""
    yield
    root = logging.getLogger("claude_afk")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.propagate = True
    root.setLevel(logging.NOTSET)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def backend():
    return ScriptedBackend()


@pytest.fixture
def http(backend):
    client = httpx.Client(transport=httpx.MockTransport(backend))
    yield client
    client.close()


@pytest.fixture
def client(http):
    """BackendClient wired to the scripted backend."""
    return BackendClient("https://afk.test/", device_token="dev-token", http=http)


@pytest.fixture
def paired_config():
    return AfkConfig(device_token="dev-token", backend_url="https://afk.test", active=True)
