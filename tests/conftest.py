"""Shared fixtures: a scripted backend behind httpx.MockTransport and a fresh session."""
from __future__ import annotations

import json
import os
import tempfile
from typing import Any, Callable, Dict, List, Optional, Tuple

# Configuration is read at import time; point it at throwaway directories first
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="ledgeros-data-"))
os.environ.setdefault("LOGS_DIR", os.path.join(os.environ["DATA_DIR"], "logs"))

import httpx
import pytest

from api.client import ApiClient
from api.resources import LedgerApi
from api.session import Session
from core.storage import MemoryStorage
from ui.services.notifier import Notifier

BASE_URL = "http://ledgeros.test/api"
TOKEN = "tok-123456"

Handler = Callable[[httpx.Request], httpx.Response]


class FakeBackend:
    """Route table keyed by (method, path without the /api prefix); every request is recorded."""

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], Handler] = {}
        self.requests: List[httpx.Request] = []

    def route(
        self,
        method: str,
        path: str,
        body: Any = None,
        status: int = 200,
        content: Optional[bytes] = None,
        handler: Optional[Handler] = None,
    ) -> None:
        def respond(request: httpx.Request) -> httpx.Response:
            if content is not None:
                return httpx.Response(status, content=content)
            return httpx.Response(status, json=body)

        self.routes[(method.upper(), path)] = handler or respond

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api")
        handler = self.routes.get((request.method, path))
        if handler is None:
            return httpx.Response(404, json={"detail": f"No route for {request.method} {path}"})
        return handler(request)

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method.upper() and r.url.path.removeprefix("/api") == path
        ]

    @staticmethod
    def body(request: httpx.Request) -> Any:
        return json.loads(request.content)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def session(storage: MemoryStorage) -> Session:
    return Session(storage).init()


@pytest.fixture
def client(session: Session, backend: FakeBackend):
    api_client = ApiClient(session, base_url=BASE_URL, transport=httpx.MockTransport(backend))
    yield api_client
    api_client.close()


@pytest.fixture
def logged_in(session: Session) -> Session:
    session.set(TOKEN)
    return session


@pytest.fixture
def ledger(client: ApiClient, logged_in: Session) -> LedgerApi:
    return LedgerApi(client)


@pytest.fixture
def notifier() -> Notifier:
    return Notifier()


def texts(notifier: Notifier, level: Optional[str] = None) -> List[str]:
    return [n.text for n in notifier.pending if level is None or n.level == level]
