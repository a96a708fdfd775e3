"""Settings page: password, data reset, exports, logout."""
from __future__ import annotations
import streamlit as st

from core.config import config
from core.errors import LedgerError, user_message
from core.logger import get_logger
from ui.components import render_confirm
from ui.pages.reports_page import offer_download
from ui.services.session_manager import SessionManager

log = get_logger("ui/pages/settings")


def _render_change_password() -> None:
    st.subheader("🔑 Change password")
    with st.form("change_password", clear_on_submit=True):
        current = st.text_input("Current password", type="password")
        new = st.text_input("New password", type="password")
        confirm = st.text_input("Confirm new password", type="password")
        submitted = st.form_submit_button("Change password")
    if submitted:
        try:
            SessionManager.get_ledger().auth.change_password(current, new, confirm)
        except LedgerError as e:
            st.error(user_message(e, "Failed to change password"))
            return
        SessionManager.get_notifier().success("Password changed")
        st.rerun()


def _render_reset() -> None:
    st.subheader("⚠️ Reset all data")
    st.caption("Deletes every account, transaction and holding on the server.")
    if st.button("Reset all data", type="secondary"):
        SessionManager.request_confirm("reset_all")
        st.rerun()
    answer = render_confirm("reset_all", "This permanently deletes all of your data. Continue?")
    if answer:
        notifier = SessionManager.get_notifier()
        try:
            SessionManager.get_ledger().auth.reset_all_data()
        except LedgerError as e:
            notifier.report(e, "Reset failed")
            return
        SessionManager.clear_session_data()
        notifier.success("All data has been reset")
        st.rerun()


def render() -> None:
    st.header("⚙️ Settings")
    st.caption(f"Backend: {config.backend_url}")
    _render_change_password()
    st.divider()

    st.subheader("📦 Exports")
    ledger = SessionManager.get_ledger()
    offer_download("Balance sheet", ledger.export.balance_sheet, "settings_balance_sheet")
    offer_download("All transactions", ledger.export.transactions, "settings_transactions")
    st.divider()

    _render_reset()
    st.divider()
    if st.button("🚪 Logout", key="settings_logout"):
        SessionManager.end_session()
        st.rerun()
