"""Upload form component."""
from __future__ import annotations
from typing import Optional, Tuple
from streamlit.runtime.uploaded_file_manager import UploadedFile
import streamlit as st

from core.config import config
from ui.services.import_workflow import StatementImport


def render_upload_form(importer: StatementImport) -> Tuple[Optional[UploadedFile], bool]:
    """
    Render the bank account picker and statement uploader.

    Returns:
        (file, submitted)
    """
    banks = importer.bank_accounts
    if not banks:
        st.warning("Create a bank account under Accounts & Ledgers before uploading statements.")
        return None, False

    ids = [a.id for a in banks]
    index = ids.index(importer.selected_account) if importer.selected_account in ids else 0
    chosen = st.selectbox(
        "Bank account",
        options=ids,
        index=index,
        format_func=lambda account_id: next(a.name for a in banks if a.id == account_id),
        help="Staged rows are saved against the account selected when you press Save.",
    )
    if chosen != importer.selected_account:
        importer.select_account(chosen)

    with st.form("upload_form", clear_on_submit=True):
        file = st.file_uploader(
            "Upload bank statement",
            type=list(config.allowed_statement_ext),
            accept_multiple_files=False,
            help=f"PDF, CSV or Excel statement up to {config.max_upload_mb} MB.",
            disabled=not importer.can_upload,
        )
        submitted = st.form_submit_button("Upload ➜", disabled=not importer.can_upload)

    return file, submitted
