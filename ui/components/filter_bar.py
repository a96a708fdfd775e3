"""Filter bar component for the transactions list."""
from __future__ import annotations
from typing import List
import streamlit as st

from models.schema import Account, Category
from ui.services.entries import TransactionFilters


def render_filter_bar(accounts: List[Account], categories: List[Category], current: TransactionFilters) -> TransactionFilters:
    """
    Render account, category, type and date filters.

    Returns:
        The filters as currently set in the widgets
    """
    account_ids = [""] + [a.id for a in accounts]
    names = {a.id: a.name for a in accounts}
    category_ids = [""] + [c.id for c in categories]
    category_names = {c.id: c.name for c in categories}

    col1, col2, col3 = st.columns(3)
    with col1:
        account_id = st.selectbox(
            "Account",
            account_ids,
            index=account_ids.index(current.account_id) if current.account_id in account_ids else 0,
            format_func=lambda i: names.get(i, "All accounts"),
        )
    with col2:
        category_id = st.selectbox(
            "Category",
            category_ids,
            index=category_ids.index(current.category_id) if current.category_id in category_ids else 0,
            format_func=lambda i: category_names.get(i, "All categories"),
        )
    with col3:
        types = ["all", "income", "expense", "transfer"]
        transaction_type = st.selectbox(
            "Type",
            types,
            index=types.index(current.transaction_type) if current.transaction_type in types else 0,
        )

    col4, col5, col6 = st.columns(3)
    with col4:
        start_date = st.date_input("From", value=current.start_date, format="YYYY-MM-DD")
    with col5:
        end_date = st.date_input("To", value=current.end_date, format="YYYY-MM-DD")
    with col6:
        untagged = st.checkbox("Untagged only", value=current.untagged)

    return TransactionFilters(
        account_id=account_id or None,
        category_id=category_id or None,
        transaction_type=transaction_type,
        untagged=untagged,
        start_date=start_date,
        end_date=end_date,
    )
