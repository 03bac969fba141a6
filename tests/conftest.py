"""Pytest fixtures for booking data layer tests."""

from __future__ import annotations

import json
import time
from typing import Any, Callable, Dict, List, Tuple, Union

import httpx
import pytest
from fastapi.testclient import TestClient

from rawej_booking.core.config import Settings
from rawej_booking.domains.auth.schemas import Session, UserRecord
from rawej_booking.domains.auth.session import MemorySessionBackend, SessionStore
from rawej_booking.main import create_app
from rawej_booking.transport.cache import ResponseCache
from rawej_booking.transport.client import SchedulingHttpClient
from rawej_booking.transport.registry import RevalidationRegistry
from rawej_booking.transport.resilient import ResilientClient

API_URL = "https://api.rawej.test"

Handler = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class FakeUpstream:
    """httpx.MockTransport handler that routes by (method, path) and records every request."""

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], List[Handler]] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, path: str, *responses: Handler) -> "FakeUpstream":
        """Queue responses for a route; the last one repeats once the queue runs out."""
        self.routes[(method.upper(), path)] = list(responses)
        return self

    def json(self, method: str, path: str, payload: Any, status_code: int = 200) -> "FakeUpstream":
        return self.add(method, path, httpx.Response(status_code, json=payload))

    def calls(self, path: str) -> List[httpx.Request]:
        return [request for request in self.requests if request.url.path == path]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"message": "not found"})
        handler = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(handler, httpx.Response):
            return handler
        return handler(request)


def request_json(request: httpx.Request) -> Any:
    return json.loads(request.content.decode("utf-8"))


def make_session(token: str = "token-123", *, expires_in: float = 3600, user_id: str = "user-1") -> Session:
    return Session(
        token=token,
        user=UserRecord(id=user_id, name="Test User"),
        expires_at=int((time.time() + expires_in) * 1000),
    )


@pytest.fixture
def settings():
    """Settings isolated from the environment and any local .env file."""
    return Settings(
        _env_file=None,
        remote_api_url=API_URL,
        revalidate_secret="s3cret",
        session_cookie_secure=False,
        enable_mock_fallback=False,
    )


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def http_client(upstream):
    return httpx.AsyncClient(transport=httpx.MockTransport(upstream))


@pytest.fixture
def transport(http_client):
    return SchedulingHttpClient(
        registry=RevalidationRegistry(),
        cache=ResponseCache(),
        http_client=http_client,
    )


@pytest.fixture
def session_backend():
    return MemorySessionBackend()


@pytest.fixture
def session_store(session_backend, transport):
    return SessionStore(
        session_backend,
        transport=transport,
        identity_url=f"{API_URL}/auth/me",
    )


@pytest.fixture
def resilient_client(transport, session_store):
    return ResilientClient(transport, session_store, base_url=API_URL)


@pytest.fixture
def app(settings, upstream):
    return create_app(settings, http_client=httpx.AsyncClient(transport=httpx.MockTransport(upstream)))


@pytest.fixture
def test_client(app):
    """Create a FastAPI test client with the app lifespan running."""
    with TestClient(app) as client:
        yield client
