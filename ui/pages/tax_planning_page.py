"""Tax planning page: deduction utilisation per section."""
from __future__ import annotations
import streamlit as st

from core.config import config
from core.errors import LedgerError
from core.utils import format_currency
from models.reports import TAX_SECTIONS, section_utilization
from ui.services.session_manager import SessionManager


def render() -> None:
    st.header("🧮 Tax Planning")
    financial_year = st.selectbox("Financial year", config.financial_years)
    try:
        summary = SessionManager.get_ledger().reports.tax_summary(financial_year)
    except LedgerError as e:
        SessionManager.get_notifier().report(e, "Failed to load tax summary")
        summary = None

    if summary is not None:
        st.metric("Total deductions claimed", format_currency(summary.total_deductions, decimals=0))

    for info in TAX_SECTIONS:
        usage = section_utilization(summary, info)
        with st.container(border=True):
            st.markdown(f"**{info.label}** · {info.description}")
            if usage.limit:
                st.progress(usage.utilized_percent / 100)
                remaining = "limit reached" if usage.exhausted else f"{format_currency(usage.remaining, decimals=0)} remaining"
                st.caption(f"{format_currency(usage.total, decimals=0)} of {format_currency(usage.limit, decimals=0)} · {remaining}")
            else:
                st.caption(f"{format_currency(usage.total, decimals=0)} claimed · no upper limit")
