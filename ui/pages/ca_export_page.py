"""CA export page: the accountant's workbook for one financial year."""
from __future__ import annotations
import streamlit as st

from core.config import config
from ui.pages.reports_page import offer_download
from ui.services.session_manager import SessionManager


def render() -> None:
    st.header("📤 CA Export")
    st.caption("Balance sheet, income & expense, loans, investments and deductions in one Excel workbook.")
    financial_year = st.selectbox("Financial year", config.financial_years, key="ca_fy")
    ledger = SessionManager.get_ledger()
    offer_download(
        f"Prepare CA report for FY {financial_year}",
        lambda: ledger.export.ca_report(financial_year),
        f"ca_report_{financial_year}",
    )
