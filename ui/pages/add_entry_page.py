"""Add Entry page: one income, expense or transfer."""
from __future__ import annotations
from typing import List
import streamlit as st

from core.errors import LedgerError
from models.schema import Account, Category
from ui.services.entries import ENTRY_KINDS, EntryDraft, record_entry
from ui.services.session_manager import SessionManager


def _flatten(categories: List[Category]) -> List[Category]:
    flat: List[Category] = []
    for category in categories:
        flat.append(category)
        flat.extend(category.children)
    return flat


def render() -> None:
    st.header("➕ Add Entry")
    ledger = SessionManager.get_ledger()
    notifier = SessionManager.get_notifier()

    kind = st.radio("Type", ENTRY_KINDS, horizontal=True, format_func=str.capitalize)
    try:
        accounts: List[Account] = ledger.accounts.list()
        categories: List[Category] = [] if kind == "transfer" else ledger.categories.list(type=kind)
    except LedgerError as e:
        notifier.report(e, "Failed to load accounts and categories")
        return

    if not accounts:
        st.info("Create an account under Accounts & Ledgers first.")
        return

    names = {a.id: a.label for a in accounts}
    flat = _flatten(categories)
    category_names = {c.id: (c.name if not c.parent_id else f"  ↳ {c.name}") for c in flat}

    with st.form("entry_form", clear_on_submit=True):
        date = st.date_input("Date", format="YYYY-MM-DD")
        amount = st.text_input("Amount", placeholder="0.00")
        description = st.text_input("Description")
        account_id = st.selectbox(
            "From account" if kind == "transfer" else "Account",
            list(names),
            format_func=names.get,
        )
        to_account_id = category_id = linked_loan_id = None
        if kind == "transfer":
            to_account_id = st.selectbox("To account", list(names), format_func=names.get)
        else:
            category_id = st.selectbox(
                "Category",
                [""] + list(category_names),
                format_func=lambda i: category_names.get(i, "Uncategorized"),
            )
            loans = [a for a in accounts if a.is_loan_account]
            if loans:
                linked_loan_id = st.selectbox(
                    "Linked loan (interest categories)",
                    [""] + [a.id for a in loans],
                    format_func=lambda i: names.get(i, "None"),
                )
        notes = st.text_area("Notes")
        submitted = st.form_submit_button("Save entry ➜")

    if submitted:
        category = next((c for c in flat if c.id == category_id), None)
        if category is None or not category.links_to_loan_interest:
            linked_loan_id = None
        draft = EntryDraft(
            kind=kind,
            date=date,
            amount=amount,
            description=description,
            account_id=account_id,
            category_id=category_id or None,
            to_account_id=to_account_id,
            linked_loan_id=linked_loan_id or None,
            notes=notes,
        )
        record_entry(ledger, notifier, draft)
        st.rerun()
