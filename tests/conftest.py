"""Shared fixtures: an in-process stand-in for aiohttp.ClientSession."""

import logging
from typing import Any, Dict, List, Optional, Tuple

import pytest

from crate_readme.cache import MemoryCache


class FakeResponse:
    """Minimal aiohttp response usable as ``async with session.get(...) as response``."""

    def __init__(self, status: int = 200, json_data: Any = None, text: str = "", headers: Optional[Dict[str, str]] = None, url: str = ""):
        self.status = status
        self._json = json_data
        self._text = text
        self.headers = headers or {}
        self.url = url

    async def json(self, content_type=None):
        return self._json

    async def text(self):
        return self._text

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """Routes GET requests by URL; unknown URLs answer 404. Entries may be exceptions."""

    def __init__(self, routes: Optional[Dict[str, Any]] = None):
        self.routes = routes or {}
        self.requests: List[Tuple[str, Dict[str, Any]]] = []
        self.closed = False

    def get(self, url, **kwargs):
        self.requests.append((url, kwargs))
        route = self.routes.get(url)
        if isinstance(route, BaseException):
            raise route
        if route is None:
            return FakeResponse(status=404, url=url)
        return route

    async def close(self):
        self.closed = True


@pytest.fixture
def logger():
    return logging.getLogger("crate_readme.tests")


@pytest.fixture
def cache():
    return MemoryCache(default_ttl=60, max_size=100)


@pytest.fixture
def fake_session_factory():
    return FakeSession


@pytest.fixture
def fake_response():
    return FakeResponse
