"""Transactions page: filter, edit, delete, bulk tag, export."""
from __future__ import annotations
from typing import Dict, List
import pandas as pd
import streamlit as st

from core.errors import LedgerError
from core.utils import format_currency, number_or_zero
from models.schema import Account, Category
from ui.components import render_confirm, render_filter_bar
from ui.services.session_manager import SessionManager


def _render_bulk_tag(book, categories: List[Category], accounts: List[Account]) -> None:
    names: Dict[str, str] = {c.id: c.name for c in categories}
    account_names = {a.id: a.label for a in accounts}
    with st.expander(f"🏷️ Bulk tag {len(book.selected_ids)} selected", expanded=bool(book.selected_ids)):
        category_id = st.selectbox("Category", [""] + list(names), format_func=lambda i: names.get(i, "No category"), key="bulk_cat")
        payee_id = st.selectbox(
            "Or transfer account",
            [""] + list(account_names),
            format_func=lambda i: account_names.get(i, "None"),
            key="bulk_payee",
        )
        if st.button("Apply to selected", disabled=not book.selected_ids):
            if payee_id:
                book.bulk_tag(None, payee_id=payee_id)
            else:
                book.bulk_tag(category_id or None)
            st.rerun()


def _render_export(book) -> None:
    ledger = SessionManager.get_ledger()
    if st.button("📤 Prepare Excel export"):
        try:
            export = ledger.export.transactions(book.filters.start_date, book.filters.end_date)
        except LedgerError as e:
            SessionManager.get_notifier().report(e, "Export failed")
            return
        st.download_button("⬇️ Download", export.content, file_name=export.file_name, mime=export.mime)


def render() -> None:
    st.header("📒 Transactions")
    ledger = SessionManager.get_ledger()
    book = SessionManager.get_transaction_book()
    try:
        accounts = ledger.accounts.list()
        categories = ledger.categories.flat()
    except LedgerError as e:
        SessionManager.get_notifier().report(e, "Failed to load accounts and categories")
        return

    filters = render_filter_bar(accounts, categories, book.filters)
    if filters != book.filters or not book.loaded:
        book.set_filters(filters)

    target = SessionManager.pending_confirm("txn_delete")
    answer = render_confirm("txn_delete", "Delete this transaction? Account balances will be recalculated.")
    if answer is not None:
        book.delete(target, confirmed=answer)
        st.rerun()

    _render_bulk_tag(book, categories, accounts)

    if not book.items:
        st.info("No transactions match these filters.")
        return

    account_names = {a.id: a.name for a in accounts}
    category_names = {c.id: c.name for c in categories}
    frame = pd.DataFrame(
        [
            {
                "select": t.id in book.selected_ids,
                "date": t.date.isoformat(),
                "description": t.description,
                "account": account_names.get(t.account_id, ""),
                "category": category_names.get(t.category_id) or account_names.get(t.payee_id, ""),
                "type": t.transaction_type,
                "amount": format_currency(t.signed_amount),
            }
            for t in book.items
        ]
    )
    edited = st.data_editor(frame, hide_index=True, use_container_width=True, disabled=list(frame.columns[1:]), key="txn_table")
    chosen = [t.id for t, picked in zip(book.items, edited["select"]) if picked]
    if chosen != book.selected_ids:
        book.selected_ids = chosen
        st.rerun()

    if len(book.selected_ids) == 1:
        txn = next(t for t in book.items if t.id == book.selected_ids[0])
        with st.container(border=True):
            st.subheader("Edit transaction")
            description = st.text_input("Description", value=txn.description, key=f"edit_desc_{txn.id}")
            amount = st.text_input("Amount", value=str(txn.amount), key=f"edit_amount_{txn.id}")
            notes = st.text_area("Notes", value=txn.notes or "", key=f"edit_notes_{txn.id}")
            col1, col2 = st.columns(2)
            if col1.button("Save changes", type="primary"):
                book.update(txn, {"description": description, "amount": number_or_zero(amount), "notes": notes or None})
                st.rerun()
            if col2.button("🗑️ Delete"):
                SessionManager.request_confirm("txn_delete", txn.id)
                st.rerun()

    _render_export(book)
