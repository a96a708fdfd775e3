"""Session state management service."""
from __future__ import annotations
from typing import Any, Dict, MutableMapping, Optional
import streamlit as st

from api.client import ApiClient
from api.resources import LedgerApi
from api.session import Session
from core.config import config
from core.logger import get_logger
from core.storage import get_storage_backend
from ui.services.crud import CrudController
from ui.services.entries import TransactionBook
from ui.services.import_workflow import StatementImport
from ui.services.notifier import Notifier

log = get_logger("ui/services/session_manager")

LOGIN_PAGE = "login"
HOME_PAGE = "dashboard"

# Everything bound to one login; dropped when the browser session ends
SESSION_KEYS = ("auth_session", "ledger", "controllers", "bootstrapped")


def _announce_expiry() -> None:
    """Expiry listener: toast once and route back to the login view."""
    SessionManager.get_notifier().error("Session expired. Please login again.")
    st.session_state["page"] = LOGIN_PAGE


def end_session(state: MutableMapping[str, Any]) -> None:
    """Log out, close the client and tear the auth session down."""
    ledger = state.get("ledger")
    session = state.get("auth_session")
    if ledger is not None:
        ledger.auth.logout()
        ledger.client.close()
    if session is not None:
        session.clear()
        session.teardown()
    for key in SESSION_KEYS:
        state.pop(key, None)
    state["page"] = LOGIN_PAGE
    log.info("Browser session ended")


class SessionManager:
    """Centralized session state management."""

    @staticmethod
    def init_session() -> None:
        """Initialize session-specific state."""
        if "auth_session" not in st.session_state:
            session = Session(get_storage_backend(st.session_state)).init()
            session.on_expired(_announce_expiry)
            st.session_state["auth_session"] = session

        if "notifier" not in st.session_state:
            st.session_state["notifier"] = Notifier()

        if "ledger" not in st.session_state:
            client = ApiClient(st.session_state["auth_session"])
            st.session_state["ledger"] = LedgerApi(client)

        if "page" not in st.session_state:
            st.session_state["page"] = HOME_PAGE

        if "controllers" not in st.session_state:
            st.session_state["controllers"] = {}

        if "bootstrapped" not in st.session_state:
            st.session_state["bootstrapped"] = False

    @staticmethod
    def get_session() -> Session:
        SessionManager.init_session()
        return st.session_state["auth_session"]

    @staticmethod
    def get_ledger() -> LedgerApi:
        SessionManager.init_session()
        return st.session_state["ledger"]

    @staticmethod
    def get_notifier() -> Notifier:
        SessionManager.init_session()
        return st.session_state["notifier"]

    @staticmethod
    def is_bootstrapped() -> bool:
        SessionManager.init_session()
        return st.session_state["bootstrapped"]

    @staticmethod
    def mark_bootstrapped() -> None:
        st.session_state["bootstrapped"] = True

    # Navigation

    @staticmethod
    def get_page() -> str:
        SessionManager.init_session()
        return st.session_state["page"]

    @staticmethod
    def set_page(page: str) -> None:
        """Switch page; in-flight fetches of the page being left become stale."""
        previous = st.session_state.get("page")
        if previous and previous != page:
            controller = st.session_state.get("controllers", {}).get(previous)
            if controller is not None and hasattr(controller, "leave"):
                controller.leave()
        st.session_state["page"] = page
        log.debug(f"Navigated {previous} -> {page}")

    # Controllers

    @staticmethod
    def get_controller(key: str, factory) -> Any:
        """Per-page controller, created once per browser session."""
        SessionManager.init_session()
        controllers: Dict[str, Any] = st.session_state["controllers"]
        if key not in controllers:
            controllers[key] = factory()
            log.debug(f"Created controller for {key}")
        return controllers[key]

    @staticmethod
    def get_crud(key: str, spec) -> CrudController:
        ledger = SessionManager.get_ledger()
        return SessionManager.get_controller(
            key,
            lambda: CrudController(
                getattr(ledger, spec.resource),
                SessionManager.get_notifier(),
                spec.fields,
                spec.entity_label,
                to_payload=spec.to_payload,
                drill_in_filter=spec.drill_in_filter,
                recent_limit=config.recent_txn_limit,
            ),
        )

    @staticmethod
    def get_import() -> StatementImport:
        return SessionManager.get_controller(
            "bank_upload",
            lambda: StatementImport(SessionManager.get_ledger(), SessionManager.get_notifier()),
        )

    @staticmethod
    def get_transaction_book() -> TransactionBook:
        return SessionManager.get_controller(
            "transactions",
            lambda: TransactionBook(SessionManager.get_ledger(), SessionManager.get_notifier()),
        )

    # Confirmation prompts

    @staticmethod
    def request_confirm(key: str, payload: Any = True) -> None:
        st.session_state[f"confirm_{key}"] = payload

    @staticmethod
    def pending_confirm(key: str) -> Optional[Any]:
        return st.session_state.get(f"confirm_{key}")

    @staticmethod
    def clear_confirm(key: str) -> None:
        st.session_state.pop(f"confirm_{key}", None)

    @staticmethod
    def end_session() -> None:
        """Logout: the next run starts from a fresh session and client."""
        end_session(st.session_state)

    @staticmethod
    def clear_session_data() -> None:
        """Drop page controllers (after logout or a data reset)."""
        st.session_state["controllers"] = {}
        log.info("Cleared per-page session data")
