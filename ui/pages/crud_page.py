"""Generic list-and-dialog page driven by a PageSpec."""
from __future__ import annotations
from typing import Any, List
import pandas as pd
import streamlit as st

from core.utils import format_currency
from models.schema import Transaction
from ui.components import render_confirm, render_record_form
from ui.pages.registry import PAGES, PageSpec, format_cell
from ui.services.crud import CrudController
from ui.services.session_manager import SessionManager


def records_frame(spec: PageSpec, items: List[Any]) -> pd.DataFrame:
    rows = [{column: format_cell(spec, column, getattr(item, column, None)) for column in spec.columns} for item in items]
    return pd.DataFrame(rows, columns=list(spec.columns))


def transactions_frame(transactions: List[Transaction]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "date": t.date.isoformat(),
                "description": t.description,
                "type": t.transaction_type,
                "amount": format_currency(t.signed_amount),
            }
            for t in transactions
        ],
        columns=["date", "description", "type", "amount"],
    )


def render_totals(spec: PageSpec, items: List[Any]) -> None:
    if not spec.totals:
        return
    totals = spec.totals(items)
    for column, (label, value) in zip(st.columns(len(totals)), totals.items()):
        shown = f"{value:,.2f}" if label == "grams" else format_currency(value, decimals=0)
        column.metric(label.capitalize(), shown)


def render_rows(spec: PageSpec, controller: CrudController, items: List[Any]) -> None:
    """One row per record with edit, delete and (where supported) drill-in actions."""
    st.dataframe(records_frame(spec, items), use_container_width=True, hide_index=True)
    for item in items:
        label = getattr(item, "label", None) or getattr(item, "name", None) or getattr(item, spec.columns[0], item.id)
        cols = st.columns([4, 1, 1, 1] if spec.drill_in_filter else [5, 1, 1])
        cols[0].write(str(label))
        if cols[1].button("✏️", key=f"{spec.key}_edit_{item.id}", help="Edit"):
            controller.open_edit(item)
            st.rerun()
        if cols[2].button("🗑️", key=f"{spec.key}_del_{item.id}", help="Delete"):
            SessionManager.request_confirm(f"{spec.key}_delete", item.id)
            st.rerun()
        if spec.drill_in_filter and cols[3].button("🔍", key=f"{spec.key}_open_{item.id}", help="Transactions"):
            controller.open_detail(item.id, SessionManager.get_ledger().transactions)
            st.rerun()


def render_detail(spec: PageSpec, controller: CrudController) -> None:
    if controller.detail_id is None:
        return
    record = controller.get(controller.detail_id)
    with st.container(border=True):
        title = getattr(record, "name", controller.detail_id)
        st.subheader(f"🔍 {title}: latest transactions")
        if controller.detail_transactions:
            st.dataframe(transactions_frame(controller.detail_transactions), use_container_width=True, hide_index=True)
        else:
            st.info("No transactions for this record.")
        if st.button("Close", key=f"{spec.key}_detail_close"):
            controller.close_detail()
            st.rerun()


def render_delete_prompt(spec: PageSpec, controller: CrudController) -> None:
    confirm_key = f"{spec.key}_delete"
    target = SessionManager.pending_confirm(confirm_key)
    answer = render_confirm(confirm_key, f"Delete this {spec.entity_label}? This cannot be undone.")
    if answer is not None:
        controller.delete(target, confirmed=answer)
        st.rerun()


def render_spec(spec: PageSpec) -> CrudController:
    """Standard layout: header, totals, add button, dialog, grouped list."""
    controller = SessionManager.get_crud(spec.key, spec)
    if not controller.loaded:
        controller.refresh()

    head, action = st.columns([4, 1])
    head.header(f"{spec.icon} {spec.title}")
    if action.button("➕ Add", key=f"{spec.key}_add"):
        controller.open_create()
        st.rerun()

    render_totals(spec, controller.items)
    render_record_form(controller, spec.key)
    render_delete_prompt(spec, controller)

    if not controller.items:
        st.info(f"No {spec.entity_label}s yet.")
        return controller

    if spec.group_by:
        for group, items in controller.grouped(spec.group_by).items():
            st.subheader(str(format_cell(spec, spec.group_by, group)).replace("_", " ").title())
            render_rows(spec, controller, items)
    else:
        render_rows(spec, controller, controller.items)
    render_detail(spec, controller)
    return controller


def render(key: str) -> None:
    render_spec(PAGES[key])
