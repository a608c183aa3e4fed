"""Shared fixtures for the TOD TV provider tests."""

from pathlib import Path
from typing import Dict, Optional

import pytest

from todtv.core.exceptions import NetworkError
from todtv.plugins.todtv import TodTvPlugin


FIXTURES_DIR = Path(__file__).parent / "fixtures"
BASE_URL = "https://www.todtv.com.tr"


def load_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


class FakeResponse:
    """Minimal stand-in for an aiohttp response used as a context manager."""

    def __init__(self, body: str = "", status: int = 200):
        self.body = body
        self.status = status

    async def text(self) -> str:
        return self.body

    async def __aenter__(self) -> "FakeResponse":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None


class FakeSession:
    """Records requests and answers them from a URL to response mapping."""

    def __init__(self, responses: Optional[Dict[str, FakeResponse]] = None):
        self.responses = responses or {}
        self.requests = []
        self.closed = False

    def request(self, method: str, url: str, **kwargs) -> FakeResponse:
        self.requests.append((method, url, kwargs))
        return self.responses.get(url, FakeResponse("", status=404))

    def get(self, url: str, **kwargs) -> FakeResponse:
        return self.request("GET", url, **kwargs)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fixture_html():
    return load_fixture


@pytest.fixture
async def plugin():
    instance = TodTvPlugin({"rate_limit": 0})
    yield instance
    await instance.cleanup()


@pytest.fixture
def serve_pages(plugin, monkeypatch):
    """
    Answer the plugin's page fetches from fixture files.

    Returns a function taking a URL to fixture name mapping; unmapped
    URLs fail with a NetworkError. Fetched URLs are recorded in order.
    """
    fetched = []

    def install(pages: Dict[str, str]):
        async def fake_get_text(url: str, **kwargs) -> str:
            fetched.append(url)
            if url not in pages:
                raise NetworkError(f"HTTP 404 error for {url}", url=url, status_code=404)
            return load_fixture(pages[url])

        monkeypatch.setattr(plugin, "_get_text", fake_get_text)
        return fetched

    return install
