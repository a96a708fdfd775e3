"""Bank statement upload, staging and tagging page."""
from __future__ import annotations
import pandas as pd
import streamlit as st

from core.logger import get_logger
from ui.components import render_confirm, render_tag_dialog, render_upload_form
from ui.components.tag_dialog import open_dialog
from ui.services.import_workflow import ImportState, StatementImport
from ui.services.session_manager import SessionManager

log = get_logger("ui/pages/bank_upload")


def _tag_label(importer: StatementImport, row) -> str:
    if row.payee_id:
        return f"↔ {importer.payee_label(row.payee_id) or row.payee_id}"
    if row.category_id:
        return importer.category_label(row.category_id) or row.category_id
    return "—"


def _render_staged(importer: StatementImport) -> None:
    tagged = sum(1 for r in importer.rows if r.is_tagged)
    st.subheader(f"🧾 {len(importer.rows)} staged transactions ({tagged} tagged)")
    if importer.file_name:
        st.caption(f"From {importer.file_name}")

    col1, col2, col3, col4 = st.columns(4)
    if col1.button("☑️ Select all" if len(importer.selected_ids) < len(importer.rows) else "Clear selection"):
        importer.toggle_select_all()
        st.rerun()
    if col2.button("🏷️ Tag selected", disabled=not importer.selected_ids):
        open_dialog(importer.open_bulk_tag_dialog())
        st.rerun()
    if col3.button("🗑️ Remove selected", disabled=not importer.selected_ids):
        importer.delete_selected()
        st.rerun()
    if col4.button("🧹 Clear all"):
        SessionManager.request_confirm("import_clear")
        st.rerun()

    answer = render_confirm("import_clear", "Discard all staged transactions? Nothing has been saved yet.")
    if answer is not None:
        importer.clear_all(confirmed=answer)
        st.rerun()

    render_tag_dialog(importer)

    frame = pd.DataFrame(
        [
            {
                "select": r.id in importer.selected_ids,
                "date": r.date.isoformat(),
                "description": r.description,
                "type": r.transaction_type,
                "amount": r.amount,
                "tag": _tag_label(importer, r),
            }
            for r in importer.rows
        ]
    )
    edited = st.data_editor(
        frame,
        hide_index=True,
        use_container_width=True,
        disabled=["date", "description", "type", "amount", "tag"],
        key=f"staged_{importer.file_name}_{len(importer.rows)}",
    )
    chosen = [r.id for r, picked in zip(importer.rows, edited["select"]) if picked]
    if chosen != importer.selected_ids:
        importer.selected_ids = chosen
        st.rerun()

    for r in importer.rows:
        cols = st.columns([6, 1, 1])
        cols[0].caption(f"{r.date.isoformat()} · {r.description[:60]}")
        if cols[1].button("🏷️", key=f"row_tag_{r.id}", help="Tag"):
            open_dialog(importer.open_tag_dialog(r.id))
            st.rerun()
        if cols[2].button("✖", key=f"row_del_{r.id}", help="Remove"):
            importer.delete_row(r.id)
            st.rerun()

    st.divider()
    if st.button(f"💾 Save {len(importer.rows)} transactions", type="primary", disabled=importer.state != ImportState.STAGED):
        with st.spinner("Saving transactions…"):
            importer.save()
        st.rerun()


def render() -> None:
    st.header("📥 Bank Upload")
    importer = SessionManager.get_import()
    if not importer.accounts:
        importer.load_reference_data()

    file, submitted = render_upload_form(importer)
    if submitted and file is not None:
        with st.spinner(f"Parsing {file.name}…"):
            importer.upload(file.name, file.getvalue())
        st.rerun()

    if importer.rows:
        _render_staged(importer)
    else:
        st.info("Upload a statement to stage its transactions for review.")
