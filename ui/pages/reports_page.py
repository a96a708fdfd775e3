"""Reports page: balance sheet, income vs expense, exports."""
from __future__ import annotations
import datetime as dt
import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from api.resources import ExportFile
from core.errors import LedgerError
from core.utils import format_currency
from ui.services.session_manager import SessionManager


def offer_download(label: str, build, key: str) -> None:
    """Fetch an export on demand and hand it to the browser."""
    if st.button(label, key=f"{key}_prepare"):
        try:
            export: ExportFile = build()
        except LedgerError as e:
            SessionManager.get_notifier().report(e, "Export failed")
            return
        st.download_button("⬇️ Download", export.content, file_name=export.file_name, mime=export.mime, key=f"{key}_download")


def _render_balance_sheet() -> None:
    ledger = SessionManager.get_ledger()
    try:
        sheet = ledger.reports.balance_sheet()
    except LedgerError as e:
        SessionManager.get_notifier().report(e, "Failed to load balance sheet")
        return
    col1, col2, col3 = st.columns(3)
    col1.metric("Assets", format_currency(sheet.total_assets, decimals=0))
    col2.metric("Liabilities", format_currency(sheet.total_liabilities, decimals=0))
    col3.metric("Net worth", format_currency(sheet.net_worth, decimals=0))
    left, right = st.columns(2)
    with left:
        st.markdown("**Assets**")
        st.dataframe(pd.DataFrame(sheet.assets), use_container_width=True, hide_index=True)
    with right:
        st.markdown("**Liabilities**")
        st.dataframe(pd.DataFrame(sheet.liabilities), use_container_width=True, hide_index=True)
    offer_download("📤 Export balance sheet", ledger.export.balance_sheet, "export_balance_sheet")


def _render_income_expense() -> None:
    ledger = SessionManager.get_ledger()
    today = dt.date.today()
    col1, col2 = st.columns(2)
    start = col1.date_input("From", value=today.replace(day=1), format="YYYY-MM-DD")
    end = col2.date_input("To", value=today, format="YYYY-MM-DD")
    try:
        report = ledger.reports.income_expense(start, end)
    except LedgerError as e:
        SessionManager.get_notifier().report(e, "Failed to load income & expense")
        return

    col1, col2, col3 = st.columns(3)
    col1.metric("Income", format_currency(report.total_income, decimals=0))
    col2.metric("Expense", format_currency(report.total_expense, decimals=0))
    col3.metric("Net", format_currency(report.net, decimals=0))

    if report.expense:
        fig = go.Figure(go.Bar(x=list(report.expense), y=list(report.expense.values()), name="Expense"))
        fig.update_layout(title="Expense by category", height=360)
        st.plotly_chart(fig, use_container_width=True)
    offer_download("📤 Export transactions", lambda: ledger.export.transactions(start, end), "export_transactions")


def render() -> None:
    st.header("📑 Reports")
    tab1, tab2 = st.tabs(["Balance sheet", "Income & expense"])
    with tab1:
        _render_balance_sheet()
    with tab2:
        _render_income_expense()
