"""
Shared fixtures: mock HTTP transport for the two sources and record builders.
"""

import json
from datetime import date, timedelta

import httpx
import pytest

from activity_loader.ingestion import ActivitySource, ActivityFetcher, SourceKind


SITE_URL = "https://site.example/"
STATIC_URL = "data/activities.json"
FALLBACK_URL = "https://script.example/macros/exec"


class SourceRoutes:
    """
    Mock transport serving the static and fallback sources.

    Each reply is one of:
    - list / dict: served as JSON with HTTP 200
    - int: empty body with that status
    - bytes: served raw with HTTP 200
    - Exception subclass: raised as a transport error
    """

    def __init__(self, static=None, fallback=None):
        self.static = static
        self.fallback = fallback
        self.calls = {"static": 0, "fallback": 0}

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.host == "script.example":
            self.calls["fallback"] += 1
            return self._reply(request, self.fallback)
        if request.url.path == "/data/activities.json":
            self.calls["static"] += 1
            return self._reply(request, self.static)
        return httpx.Response(404)

    def _reply(self, request, reply):
        if isinstance(reply, type) and issubclass(reply, Exception):
            raise reply("simulated failure", request=request)
        if isinstance(reply, int):
            return httpx.Response(reply)
        if isinstance(reply, bytes):
            return httpx.Response(200, content=reply)
        if reply is None:
            return httpx.Response(404)
        return httpx.Response(200, content=json.dumps(reply).encode("utf-8"))

    def fetcher(self) -> ActivityFetcher:
        return ActivityFetcher(base_url=SITE_URL, transport=httpx.MockTransport(self.handler))


@pytest.fixture
def sources():
    return (
        ActivitySource("static_snapshot", "Static", STATIC_URL, SourceKind.STATIC_SNAPSHOT),
        ActivitySource("spreadsheet_api", "Spreadsheet", FALLBACK_URL, SourceKind.LIVE_FALLBACK),
    )


@pytest.fixture
def routes():
    def _make(static=None, fallback=None):
        return SourceRoutes(static=static, fallback=fallback)
    return _make


@pytest.fixture
def make_activities():
    """Activities with distinct dates, oldest first (deliberately unsorted)."""
    def _make(count, start=date(2025, 1, 1)):
        return [
            {
                "date": (start + timedelta(days=i)).isoformat(),
                "title": f"Activity {i}",
                "content": f"Content {i}",
            }
            for i in range(count)
        ]
    return _make
