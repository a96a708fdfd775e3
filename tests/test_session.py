from __future__ import annotations

import pytest

from api.session import Session
from core.config import TOKEN_KEY
from core.storage import MemoryStorage, get_storage_backend


def test_init_restores_persisted_token() -> None:
    session = Session(MemoryStorage({TOKEN_KEY: "stored"})).init()
    assert session.token == "stored"
    assert session.is_authenticated
    assert session.login_required is False


def test_init_without_token_requires_login(session: Session) -> None:
    assert session.token is None
    assert session.login_required is True
    assert session.initialized


def test_set_persists_and_clear_removes(storage: MemoryStorage, session: Session) -> None:
    session.set("abc123")
    assert storage.get(TOKEN_KEY) == "abc123"
    assert session.login_required is False

    session.clear()
    assert storage.get(TOKEN_KEY) is None
    assert session.token is None
    assert session.login_required is True


def test_set_rejects_empty_token(session: Session) -> None:
    with pytest.raises(ValueError):
        session.set("")


def test_expire_notifies_once_for_the_same_token(storage: MemoryStorage, session: Session) -> None:
    fired = []
    session.on_expired(lambda: fired.append(True))
    session.set("live")

    assert session.expire("live") is True
    assert session.expire("live") is False
    assert fired == [True]
    assert storage.get(TOKEN_KEY) is None
    assert session.login_required is True


def test_expire_ignores_rejections_of_a_replaced_token(session: Session) -> None:
    fired = []
    session.on_expired(lambda: fired.append(True))
    session.set("old")
    session.set("new")

    assert session.expire("old") is False
    assert session.token == "new"
    assert fired == []


def test_failing_listener_does_not_break_expiry(session: Session) -> None:
    calls = []

    def broken() -> None:
        raise RuntimeError("listener bug")

    session.on_expired(broken)
    session.on_expired(lambda: calls.append("second"))
    session.set("live")

    assert session.expire("live") is True
    assert calls == ["second"]


def test_teardown_keeps_persisted_token(storage: MemoryStorage, session: Session) -> None:
    fired = []
    session.on_expired(lambda: fired.append(True))
    session.set("keep")
    session.teardown()

    assert storage.get(TOKEN_KEY) == "keep"
    assert session.initialized is False

    revived = Session(storage).init()
    assert revived.expire("keep") is True
    assert fired == []


def test_login_in_one_browser_does_not_authenticate_another() -> None:
    first_browser: dict = {}
    second_browser: dict = {}
    Session(get_storage_backend(first_browser)).init().set("secret-token")

    visitor = Session(get_storage_backend(second_browser)).init()
    assert visitor.is_authenticated is False
    assert visitor.login_required is True

    returning = Session(get_storage_backend(first_browser)).init()
    assert returning.token == "secret-token"
