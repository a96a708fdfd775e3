from __future__ import annotations

import httpx
import pytest

from api.auth import AuthApi, bootstrap
from api.client import ApiClient
from api.session import Session
from core.config import TOKEN_KEY
from core.errors import AuthorizationError, ResponseInvalid, ValidationFailure
from core.storage import MemoryStorage
from tests.conftest import BASE_URL, FakeBackend


@pytest.fixture
def auth(client: ApiClient) -> AuthApi:
    return AuthApi(client)


def test_setup_rejects_mismatched_passwords_without_a_request(auth: AuthApi, backend: FakeBackend) -> None:
    with pytest.raises(ValidationFailure, match="do not match"):
        auth.setup("secret", "secrte")
    assert backend.requests == []


def test_setup_rejects_short_password(auth: AuthApi, backend: FakeBackend) -> None:
    with pytest.raises(ValidationFailure, match="at least 4"):
        auth.setup("abc", "abc")
    assert backend.requests == []


def test_setup_stores_the_returned_token(auth: AuthApi, backend: FakeBackend, storage: MemoryStorage, session: Session) -> None:
    session.setup_required = True
    backend.route("POST", "/auth/setup", body={"token": "fresh"})

    auth.setup("secret", "secret")

    assert backend.body(backend.requests[-1]) == {"password": "secret"}
    assert storage.get(TOKEN_KEY) == "fresh"
    assert session.setup_required is False
    assert session.login_required is False


def test_wrong_password_surfaces_server_message(auth: AuthApi, backend: FakeBackend, session: Session) -> None:
    backend.route("POST", "/auth/login", status=401, body={"detail": "Invalid password"})
    with pytest.raises(AuthorizationError) as info:
        auth.login("nope")
    assert info.value.detail == "Invalid password"
    assert session.token is None


def test_login_without_token_in_body_fails(auth: AuthApi, backend: FakeBackend) -> None:
    backend.route("POST", "/auth/login", body={})
    with pytest.raises(ResponseInvalid):
        auth.login("secret")


def test_logout_clears_locally_even_when_server_fails(auth: AuthApi, backend: FakeBackend, logged_in: Session) -> None:
    backend.route("POST", "/auth/logout", status=500, body={"detail": "boom"})
    auth.logout()
    assert logged_in.token is None
    assert logged_in.login_required is True


def test_change_password_checks_confirmation(auth: AuthApi, backend: FakeBackend, logged_in: Session) -> None:
    with pytest.raises(ValidationFailure):
        auth.change_password("old", "newpass", "newpas")
    assert backend.requests == []

    backend.route("POST", "/auth/change-password", body={"message": "ok"})
    auth.change_password("old", "newpass", "newpass")
    assert backend.body(backend.requests[-1]) == {"current_password": "old", "new_password": "newpass"}


def test_bootstrap_network_failure_means_login_required() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    session = Session(MemoryStorage())
    with ApiClient(session, base_url=BASE_URL, transport=httpx.MockTransport(refuse)) as offline:
        status = bootstrap(AuthApi(offline))

    assert status.setup_required is False
    assert session.initialized
    assert session.login_required is True


def test_bootstrap_first_run_needs_setup(auth: AuthApi, backend: FakeBackend, session: Session) -> None:
    backend.route("GET", "/auth/check", body={"setup_required": True})
    status = bootstrap(auth)
    assert status.setup_required is True
    assert session.setup_required is True
    assert backend.calls("GET", "/reports/dashboard") == []


def test_bootstrap_drops_a_rejected_stored_token(auth: AuthApi, backend: FakeBackend, storage: MemoryStorage, logged_in: Session) -> None:
    backend.route("GET", "/auth/check", body={"setup_required": False})
    backend.route("GET", "/reports/dashboard", status=401, body={"detail": "expired"})

    bootstrap(auth)

    assert logged_in.token is None
    assert storage.get(TOKEN_KEY) is None
    assert logged_in.login_required is True


def test_bootstrap_keeps_a_valid_stored_token(auth: AuthApi, backend: FakeBackend, logged_in: Session) -> None:
    backend.route("GET", "/auth/check", body={"setup_required": False})
    backend.route("GET", "/reports/dashboard", body={"net_worth": 0})

    bootstrap(auth)

    assert logged_in.is_authenticated
    assert logged_in.login_required is False
