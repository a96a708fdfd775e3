from __future__ import annotations

import httpx

from main import probe_backend
from tests.conftest import FakeBackend


def test_probe_reports_a_reachable_backend(backend: FakeBackend) -> None:
    backend.route("GET", "/auth/check", body={"setup_required": True})
    assert probe_backend(transport=httpx.MockTransport(backend)) is True
    assert "token" not in backend.requests[-1].url.params


def test_probe_tolerates_a_failing_backend(backend: FakeBackend) -> None:
    backend.route("GET", "/auth/check", status=503, body={"detail": "starting up"})
    assert probe_backend(transport=httpx.MockTransport(backend)) is False


def test_probe_tolerates_an_unreachable_backend() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    assert probe_backend(transport=httpx.MockTransport(refuse)) is False
