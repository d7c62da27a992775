"""
Shared fixtures for asset pipeline tests.

Provides:
- FakeResponse / FakeSession: scripted stand-ins for aiohttp.ClientSession.get
- no_sleep: disables retry backoff sleeps and records requested delays
- sample detail records and payload bytes
"""

import json
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union
from unittest.mock import AsyncMock, patch

import pytest


class FakeResponse:
    """Async context manager mimicking aiohttp.ClientResponse."""

    def __init__(
        self,
        status: int = 200,
        body: Union[bytes, str, Dict[str, Any]] = b"",
        content_length: Optional[int] = None,
    ):
        if isinstance(body, dict):
            body = json.dumps(body)
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.status = status
        self._body = body
        self.content_length = content_length

    async def text(self) -> str:
        return self._body.decode("utf-8")

    async def read(self) -> bytes:
        return self._body

    async def __aenter__(self) -> "FakeResponse":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        return None


class FakeSession:
    """
    Scripted session: each get() consumes the next item.

    Items may be FakeResponse instances or exceptions (raised from get()).
    The last item repeats once the script is exhausted.
    """

    def __init__(self, script: Sequence[Union[FakeResponse, BaseException]]):
        self._script = list(script)
        self.calls: List[Tuple[str, Dict[str, Any]]] = []
        self.closed = False

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append((url, kwargs))
        item = self._script.pop(0) if len(self._script) > 1 else self._script[0]
        if isinstance(item, BaseException):
            raise item
        return item

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def no_sleep():
    """Patch the retry executor's sleep; yields the AsyncMock."""
    with patch("asset_pipeline.common.retry.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        yield mock_sleep


@pytest.fixture
def animation_bytes() -> bytes:
    """Pretty-printed Lottie document as a provider would serve it."""
    return b'{\n  "v": "5.7.4",\n  "fr": 30,\n  "layers": []\n}\n'


@pytest.fixture
def sample_detail() -> Dict[str, Any]:
    """Provider detail record with a JSON file link."""
    return {
        "id": "abc123",
        "title": "Fireball",
        "version": 3,
        "license": {"name": "Lottie Simple License"},
        "files": {"json": {"url": "https://cdn.example.com/abc123.json"}},
        "preview": "https://cdn.example.com/abc123.gif",
    }


@pytest.fixture
def make_response():
    """Factory for FakeResponse."""
    return FakeResponse


@pytest.fixture
def make_session():
    """Factory for FakeSession."""
    return FakeSession
