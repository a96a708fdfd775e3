"""Tag dialog for staged statement rows."""
from __future__ import annotations
import streamlit as st

from ui.services.import_workflow import NO_CATEGORY, StatementImport, TagDraft

DRAFT_KEY = "tag_draft"


def open_dialog(draft: TagDraft) -> None:
    st.session_state[DRAFT_KEY] = draft


def current_draft() -> TagDraft | None:
    return st.session_state.get(DRAFT_KEY)


def close_dialog() -> None:
    st.session_state.pop(DRAFT_KEY, None)


def render_tag_dialog(importer: StatementImport) -> None:
    """
    Category, sub-category, payee and loan pickers for the open draft.

    Choosing a payee clears the category and vice versa.
    """
    draft = current_draft()
    if draft is None:
        return
    row = importer.row(draft.row_id)
    if row is None:
        close_dialog()
        return

    bulk = draft.row_id in importer.selected_ids and len(importer.selected_ids) > 1
    with st.container(border=True):
        st.subheader(f"Tag {len(importer.selected_ids)} transactions" if bulk else "Tag transaction")
        st.caption(f"{row.date.isoformat()} · {row.description} · {row.amount:,.2f} ({row.transaction_type})")

        top = [NO_CATEGORY] + [c.id for c in importer.categories]
        labels = {c.id: c.name for c in importer.categories}
        category = st.selectbox(
            "Category",
            top,
            index=top.index(draft.category_id) if draft.category_id in top else 0,
            format_func=lambda i: labels.get(i, "No category"),
            key=f"tag_cat_{draft.row_id}",
        )
        if category != (draft.category_id or NO_CATEGORY):
            draft = draft.choose_category(category)

        parent, _ = importer.find_category(draft.category_id)
        if parent is not None and parent.children:
            subs = [NO_CATEGORY] + [c.id for c in parent.children]
            sub_labels = {c.id: c.name for c in parent.children}
            sub = st.selectbox(
                "Sub-category",
                subs,
                index=subs.index(draft.sub_category_id) if draft.sub_category_id in subs else 0,
                format_func=lambda i: sub_labels.get(i, "None"),
                key=f"tag_sub_{draft.row_id}_{draft.category_id}",
            )
            if sub != (draft.sub_category_id or NO_CATEGORY):
                draft = draft.choose_sub_category(sub)

        payees = [""] + [a.id for a in importer.accounts if a.id != importer.selected_account]
        payee_labels = {a.id: a.label for a in importer.accounts}
        payee = st.selectbox(
            "Or transfer to / from account",
            payees,
            index=payees.index(draft.payee_id) if draft.payee_id in payees else 0,
            format_func=lambda i: payee_labels.get(i, "None"),
            key=f"tag_payee_{draft.row_id}",
        )
        if (payee or None) != draft.payee_id:
            draft = draft.choose_payee(payee)

        if importer.shows_loan_link(draft):
            loans = [""] + [a.id for a in importer.loan_accounts]
            loan = st.selectbox(
                "Linked loan",
                loans,
                index=loans.index(draft.linked_loan_id) if draft.linked_loan_id in loans else 0,
                format_func=lambda i: payee_labels.get(i, "None"),
                key=f"tag_loan_{draft.row_id}",
            )
            draft = draft.choose_loan(loan)

        with st.expander("➕ New category"):
            target = f"under '{labels.get(draft.category_id)}'" if draft.category_id in labels else "as a top-level category"
            name = st.text_input(f"Name ({target})", key=f"tag_new_cat_{draft.row_id}")
            if st.button("Create", key=f"tag_create_{draft.row_id}"):
                draft = importer.create_category(draft, name)
                open_dialog(draft)
                st.rerun()

        open_dialog(draft)

        col1, col2 = st.columns(2)
        with col1:
            if st.button("Apply", key=f"tag_apply_{draft.row_id}", type="primary"):
                importer.apply_tag(draft)
                close_dialog()
                st.rerun()
        with col2:
            if st.button("Cancel", key=f"tag_cancel_{draft.row_id}"):
                close_dialog()
                st.rerun()
