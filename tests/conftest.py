"""Shared fixtures: scripted HTTP transport, session storage, fake collaborators."""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass, field

import httpx
import pytest

from site_runtime.page.collaborators import FakeCollaborators
from site_runtime.storage.memory import InMemorySessionStorage

SITE_ORIGIN = "https://www.example.com"


@dataclass
class ScriptedTransport:
    """httpx.MockTransport driven by a URL -> (status, body) table.

    Unknown URLs answer 404. URLs listed in ``broken`` raise ConnectError.
    """

    routes: dict[str, tuple[int, str]] = field(default_factory=dict)
    broken: set[str] = field(default_factory=set)
    requests: list[str] = field(default_factory=list)

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)
        if url in self.broken:
            raise httpx.ConnectError("connection refused", request=request)
        status, body = self.routes.get(url, (404, "Not Found"))
        return httpx.Response(status, text=body)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.transport())


@pytest.fixture
def scripted() -> ScriptedTransport:
    return ScriptedTransport()


@pytest.fixture
def session() -> InMemorySessionStorage:
    return InMemorySessionStorage()


@pytest.fixture
def collaborators() -> FakeCollaborators:
    return FakeCollaborators()


@pytest.fixture
def config_json() -> Callable[[dict[str, str]], str]:
    """Build a config resource body from key/value pairs (in order)."""

    def _build(pairs: dict[str, str]) -> str:
        data = [{"key": key, "value": value} for key, value in pairs.items()]
        return json.dumps({"total": len(data), "offset": 0, "data": data})

    return _build
