import os
import sys
from typing import Any, Callable, List, Optional, Union

import httpx
import pytest

# ensure workspace root is on sys.path so our application packages can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from api.routes import common  # noqa: E402

Handler = Callable[[httpx.Request], Union[httpx.Response, Exception]]


class FakeHTTP:
    """Stands in for the upstream backends: records every outbound request and
    answers it with ``handler``."""

    def __init__(self) -> None:
        self.calls: List[httpx.Request] = []
        self.timeouts: List[Any] = []
        self.handler: Handler = lambda request: httpx.Response(200, json={})

    def respond_json(self, payload: Any, status_code: int = 200) -> None:
        self.handler = lambda request: httpx.Response(status_code, json=payload)

    def respond_text(self, text: str, status_code: int = 200) -> None:
        self.handler = lambda request: httpx.Response(status_code, text=text)

    def raise_error(self, exc: Exception) -> None:
        self.handler = lambda request: exc

    @property
    def last(self) -> httpx.Request:
        return self.calls[-1]


class DummyClient:
    def __init__(self, fake: FakeHTTP, timeout: Optional[Any]):
        self.fake = fake
        fake.timeouts.append(timeout)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def request(self, method, url, params=None, headers=None, content=None):
        request = httpx.Request(method, url, params=params, headers=headers, content=content)
        self.fake.calls.append(request)
        result = self.fake.handler(request)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def fake_http(monkeypatch):
    fake = FakeHTTP()
    monkeypatch.setattr(httpx, "AsyncClient", lambda timeout=None, **kwargs: DummyClient(fake, timeout))
    return fake


@pytest.fixture(autouse=True)
def clean_default_config(monkeypatch):
    """Keep the env-derived default instance out of every test."""
    for name in list(os.environ):
        if name.startswith("CONNECT_"):
            monkeypatch.delenv(name, raising=False)
    common.reset_default_config()
    yield
    common.reset_default_config()
