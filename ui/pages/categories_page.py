"""Categories page: two-level income and expense trees."""
from __future__ import annotations
import streamlit as st

from core.errors import LedgerError
from models.schema import Category
from ui.components import render_confirm
from ui.services.session_manager import SessionManager


def _render_create(category_type: str, roots: list[Category]) -> None:
    with st.form(f"new_{category_type}_category", clear_on_submit=True):
        name = st.text_input("Name")
        parents = [""] + [c.id for c in roots]
        labels = {c.id: c.name for c in roots}
        parent_id = st.selectbox("Parent", parents, format_func=lambda i: labels.get(i, "(top level)"))
        interest = st.checkbox("Links to loan interest", help="Offer a loan link when tagging with this category.")
        submitted = st.form_submit_button("Add category")
    if submitted:
        if not name.strip():
            SessionManager.get_notifier().error("Name is required")
            return
        try:
            SessionManager.get_ledger().categories.create(
                {
                    "name": name.strip(),
                    "type": category_type,
                    "parent_id": parent_id or None,
                    "links_to_loan_interest": interest,
                }
            )
        except LedgerError as e:
            SessionManager.get_notifier().report(e, "Failed to create category")
            return
        SessionManager.get_notifier().success("Category created")
        st.rerun()


def _render_tree(roots: list[Category]) -> None:
    for root in roots:
        for depth, category in [(0, root)] + [(1, c) for c in root.children]:
            cols = st.columns([6, 1])
            marker = "💸" if category.links_to_loan_interest else ""
            cols[0].write((" ↳ " if depth else "**") + category.name + ("" if depth else "**") + f" {marker}")
            if cols[1].button("🗑️", key=f"cat_del_{category.id}", help="Delete"):
                SessionManager.request_confirm("category_delete", category.id)
                st.rerun()


def render() -> None:
    st.header("🏷️ Categories")
    ledger = SessionManager.get_ledger()
    notifier = SessionManager.get_notifier()

    target = SessionManager.pending_confirm("category_delete")
    answer = render_confirm("category_delete", "Delete this category? Its sub-categories are removed too.")
    if answer:
        try:
            ledger.categories.delete(target)
            notifier.success("Category deleted")
        except LedgerError as e:
            notifier.report(e, "Failed to delete category")
        st.rerun()

    for tab, category_type in zip(st.tabs(["Expense", "Income"]), ("expense", "income")):
        with tab:
            try:
                roots = ledger.categories.list(type=category_type)
            except LedgerError as e:
                notifier.report(e, "Failed to load categories")
                continue
            _render_create(category_type, roots)
            _render_tree(roots)
