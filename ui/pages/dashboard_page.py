"""Dashboard page."""
from __future__ import annotations
import pandas as pd
import streamlit as st

from core.errors import LedgerError
from core.utils import format_currency
from ui.services.session_manager import SessionManager


def render() -> None:
    st.header("📊 Dashboard")
    try:
        report = SessionManager.get_ledger().reports.dashboard()
    except LedgerError as e:
        SessionManager.get_notifier().report(e, "Failed to load dashboard")
        return

    col1, col2, col3 = st.columns(3)
    col1.metric("Net worth", format_currency(report.net_worth, decimals=0))
    col2.metric("Total assets", format_currency(report.total_assets, decimals=0))
    col3.metric("Total liabilities", format_currency(report.total_liabilities, decimals=0))

    col4, col5 = st.columns(2)
    col4.metric("Income this month", format_currency(report.monthly_income, decimals=0))
    col5.metric("Expenses this month", format_currency(report.monthly_expense, decimals=0))

    st.divider()
    if report.account_balances:
        st.subheader("🏦 Account balances")
        st.dataframe(pd.DataFrame(report.account_balances), use_container_width=True, hide_index=True)

    st.subheader("🧾 Recent transactions")
    if report.recent_transactions:
        st.dataframe(pd.DataFrame(report.recent_transactions), use_container_width=True, hide_index=True)
    else:
        st.info("No transactions yet. Add an entry or upload a bank statement.")
