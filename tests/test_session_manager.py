from __future__ import annotations

from api.resources import LedgerApi
from api.session import Session
from core.config import TOKEN_KEY
from core.storage import get_storage_backend
from tests.conftest import TOKEN, FakeBackend
from ui.services.notifier import Notifier
from ui.services.session_manager import LOGIN_PAGE, end_session


def test_logout_tears_the_browser_session_down(ledger: LedgerApi, backend: FakeBackend, logged_in: Session) -> None:
    backend.route("POST", "/auth/logout", body={"message": "ok"})
    expired = []
    logged_in.on_expired(lambda: expired.append(True))
    notifier = Notifier()
    state = {
        "auth_session": logged_in,
        "ledger": ledger,
        "notifier": notifier,
        "controllers": {"accounts": object()},
        "bootstrapped": True,
        "page": "accounts",
    }

    end_session(state)

    assert backend.calls("POST", "/auth/logout")[-1].url.params["token"] == TOKEN
    assert logged_in.token is None
    assert logged_in.initialized is False
    assert state == {"notifier": notifier, "page": LOGIN_PAGE}

    logged_in.set("later")
    assert logged_in.expire("later") is True
    assert expired == []


def test_logout_removes_the_token_from_session_storage() -> None:
    state: dict = {}
    session = Session(get_storage_backend(state)).init()
    session.set("browser-token")
    state["auth_session"] = session

    end_session(state)

    assert "storage:" + TOKEN_KEY not in state
    assert state["page"] == LOGIN_PAGE
