"""Loans page: CRUD plus interest figures and repayments."""
from __future__ import annotations
import streamlit as st

from core.errors import LedgerError
from core.utils import coerce_number, format_currency
from ui.pages.crud_page import render_spec
from ui.pages.registry import PAGES
from ui.services.session_manager import SessionManager


def _render_interest(loan_id: str) -> None:
    try:
        interest = SessionManager.get_ledger().loans.interest(loan_id)
    except LedgerError as e:
        SessionManager.get_notifier().report(e, "Failed to load interest")
        return
    col1, col2, col3 = st.columns(3)
    col1.metric("Accrued interest", format_currency(interest.accrued_interest))
    col2.metric("Interest paid", format_currency(interest.interest_paid))
    col3.metric("Total due", format_currency(interest.total_due) if interest.total_due is not None else "—")
    if interest.days is not None:
        st.caption(f"{interest.days} days at {interest.interest_rate}% ({interest.interest_type})")


def _render_repayment(loan_id: str) -> None:
    with st.form(f"repayment_{loan_id}", clear_on_submit=True):
        amount = st.text_input("Amount")
        date = st.date_input("Date", format="YYYY-MM-DD")
        is_interest = st.checkbox("Interest payment")
        notes = st.text_input("Notes")
        submitted = st.form_submit_button("Record repayment")
    if not submitted:
        return
    value = coerce_number(amount)
    notifier = SessionManager.get_notifier()
    if value is None or value <= 0:
        notifier.error("Enter an amount greater than zero")
        return
    try:
        SessionManager.get_ledger().loans.repayment(loan_id, value, date, is_interest=is_interest, notes=notes)
    except LedgerError as e:
        notifier.report(e, "Failed to record repayment")
        return
    notifier.success("Repayment recorded")
    SessionManager.get_crud("loans", PAGES["loans"]).refresh()
    st.rerun()


def render() -> None:
    controller = render_spec(PAGES["loans"])
    if not controller.items:
        return
    st.divider()
    st.subheader("💰 Interest & repayments")
    labels = {loan.id: f"{loan.person_name} ({loan.loan_type})" for loan in controller.items}
    loan_id = st.selectbox("Loan", list(labels), format_func=labels.get)
    loan = controller.get(loan_id)
    if loan is not None:
        st.caption(f"Outstanding principal: {format_currency(loan.outstanding)}")
        _render_interest(loan_id)
        _render_repayment(loan_id)
