"""Portfolio page: holdings, broker CSV import and allocation chart."""
from __future__ import annotations
import plotly.graph_objects as go
import streamlit as st

from core.errors import LedgerError
from core.logger import get_logger
from core.utils import format_currency
from models.reports import allocation_by_type, portfolio_summary
from ui.pages.crud_page import render_spec
from ui.pages.registry import PAGES
from ui.services.session_manager import SessionManager

log = get_logger("ui/pages/portfolio")

BROKERS = ("zerodha", "groww", "upstox", "other")


def _render_import() -> None:
    with st.expander("📂 Import holdings from broker CSV"):
        with st.form("holdings_import", clear_on_submit=True):
            broker = st.selectbox("Broker", BROKERS, format_func=str.capitalize)
            file = st.file_uploader("Holdings CSV", type=["csv"])
            submitted = st.form_submit_button("Import ➜")
        if submitted and file is not None:
            notifier = SessionManager.get_notifier()
            try:
                count = SessionManager.get_ledger().investment_holdings.import_csv(broker, file.name, file.getvalue())
            except LedgerError as e:
                notifier.report(e, "Import failed")
                return
            notifier.success(f"Imported {count} holdings")
            SessionManager.get_crud("portfolio", PAGES["portfolio"]).refresh()
            st.rerun()


def _render_allocation(holdings) -> None:
    allocation = allocation_by_type(holdings)
    if not allocation:
        return
    fig = go.Figure(go.Pie(labels=list(allocation), values=list(allocation.values()), hole=0.45))
    fig.update_layout(title="Allocation by type", height=360, margin=dict(t=40, b=0, l=0, r=0))
    st.plotly_chart(fig, use_container_width=True)


def render() -> None:
    _render_import()
    controller = render_spec(PAGES["portfolio"])
    if not controller.items:
        return
    summary = portfolio_summary(controller.items)
    sign = "+" if summary.pnl >= 0 else ""
    st.caption(f"Overall return: {sign}{format_currency(summary.pnl)} ({sign}{summary.pnl_percent:.2f}%)")
    _render_allocation(controller.items)
