"""
Pytest configuration and fixtures for all tests.

This file is automatically loaded by pytest and provides common fixtures
and configuration for all test modules. HTTP traffic never leaves the process:
adapters receive a client factory backed by httpx.MockTransport.
"""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Import pytest for fixtures
import pytest
import httpx


class MockBackend:
    """
    Fake provider endpoints keyed by host.

    Every request is recorded; hosts without a handler answer 404.
    """

    def __init__(self):
        self.handlers = {}
        self.requests = []

    def route(self, host, handler):
        """Register `handler(request) -> httpx.Response` for one host."""
        self.handlers[host] = handler

    def json(self, host, payload, status_code=200):
        self.route(host, lambda request: httpx.Response(status_code, json=payload))

    def sse(self, host, lines, status_code=200):
        """Answer with a `data:` event stream built from `lines`."""
        body = "".join(f"data: {line}\n\n" for line in lines).encode("utf-8")
        self.route(host, lambda request: httpx.Response(
            status_code, content=body, headers={"content-type": "text/event-stream"}))

    def requests_to(self, host):
        return [request for request in self.requests if request.url.host == host]

    def _handle(self, request):
        self.requests.append(request)
        handler = self.handlers.get(request.url.host)
        if handler is None:
            return httpx.Response(404, text=f"no route for {request.url.host}")
        return handler(request)

    def client_factory(self, timeout):
        return httpx.AsyncClient(transport=httpx.MockTransport(self._handle), timeout=timeout)


@pytest.fixture
def backend():
    """Fresh fake backend per test."""
    return MockBackend()


@pytest.fixture
def no_deepl_env(monkeypatch, tmp_path):
    """Hide any DeepL key from the environment and point .env lookups at an empty dir."""
    monkeypatch.delenv("DEEPL_API_KEY", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path
