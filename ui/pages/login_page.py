"""Login and first-run setup page."""
from __future__ import annotations
import streamlit as st

from core.config import config
from core.errors import LedgerError, user_message
from core.logger import get_logger
from ui.services.session_manager import HOME_PAGE, SessionManager

log = get_logger("ui/pages/login")


def render() -> None:
    """Render setup when no password exists yet, login otherwise."""
    session = SessionManager.get_session()
    auth = SessionManager.get_ledger().auth

    st.header("🔐 LedgerOS")
    if session.setup_required:
        st.caption("Create a password to protect your ledger.")
        with st.form("setup_form"):
            password = st.text_input("Password", type="password")
            confirm = st.text_input("Confirm password", type="password")
            submitted = st.form_submit_button("Set password ➜")
        if submitted:
            try:
                auth.setup(password, confirm)
            except LedgerError as e:
                st.error(user_message(e, "Setup failed"))
                return
            SessionManager.set_page(HOME_PAGE)
            st.rerun()
        st.caption(f"At least {config.min_password_length} characters.")
        return

    with st.form("login_form"):
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Login ➜")
    if submitted:
        try:
            auth.login(password)
        except LedgerError as e:
            log.warning(f"Login failed: {e}")
            st.error(user_message(e, "Invalid password"))
            return
        SessionManager.set_page(HOME_PAGE)
        st.rerun()
