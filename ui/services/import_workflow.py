"""Bank-statement import: upload, stage, tag, then save in one batch."""
from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from api.resources import LedgerApi
from core.config import config
from core.errors import LedgerError
from core.logger import get_logger
from core.utils import human_size
from models.schema import Account, Category
from models.tagging import StagedTransaction, make_tag
from ui.services.notifier import Notifier

log = get_logger("ui/services/import_workflow")

# Dropdown value meaning "explicitly no category"
NO_CATEGORY = "none"


class ImportState(str, Enum):
    IDLE = "idle"
    UPLOADING = "uploading"
    STAGED = "staged"
    SAVING = "saving"


@dataclass(frozen=True)
class TagDraft:
    """
    Values of the open tag dialog.

    ``category_id`` is always a top-level category; ``sub_category_id`` one of
    its children. Payee and category exclude each other.
    """

    row_id: str
    category_id: Optional[str] = None
    sub_category_id: Optional[str] = None
    payee_id: Optional[str] = None
    linked_loan_id: Optional[str] = None

    def choose_category(self, category_id: Optional[str]) -> "TagDraft":
        if category_id in (None, "", NO_CATEGORY):
            return replace(self, category_id=None, sub_category_id=None, linked_loan_id=None)
        return replace(self, category_id=category_id, sub_category_id=None, payee_id=None)

    def choose_sub_category(self, sub_category_id: Optional[str]) -> "TagDraft":
        if sub_category_id in (None, "", NO_CATEGORY):
            return replace(self, sub_category_id=None)
        return replace(self, sub_category_id=sub_category_id, payee_id=None)

    def choose_payee(self, payee_id: Optional[str]) -> "TagDraft":
        if payee_id in (None, ""):
            return replace(self, payee_id=None)
        return replace(self, payee_id=payee_id, category_id=None, sub_category_id=None, linked_loan_id=None)

    def choose_loan(self, loan_id: Optional[str]) -> "TagDraft":
        return replace(self, linked_loan_id=loan_id or None)

    @property
    def effective_category_id(self) -> Optional[str]:
        return self.sub_category_id or self.category_id


class StatementImport:
    """
    State machine for one upload session.

    IDLE -> UPLOADING -> STAGED -> SAVING -> IDLE. Staged rows live only in
    memory; editing them never calls the server.
    """

    def __init__(self, ledger: LedgerApi, notifier: Notifier):
        self.ledger = ledger
        self.notifier = notifier
        self.state = ImportState.IDLE
        self.rows: List[StagedTransaction] = []
        self.selected_ids: List[str] = []
        self.accounts: List[Account] = []
        self.categories: List[Category] = []
        self.selected_account: Optional[str] = None
        self.file_name: Optional[str] = None

    # Reference data

    def load_reference_data(self) -> None:
        try:
            self.accounts = self.ledger.accounts.list()
            self.categories = self.ledger.categories.list(type="expense")
        except LedgerError as e:
            self.notifier.report(e, "Failed to load accounts and categories")
            return
        if self.selected_account is None or self.selected_account not in {a.id for a in self.bank_accounts}:
            first_bank = next(iter(self.bank_accounts), None)
            self.selected_account = first_bank.id if first_bank else None

    def _refresh_categories(self) -> None:
        try:
            self.categories = self.ledger.categories.list(type="expense")
        except LedgerError as e:
            self.notifier.report(e, "Failed to refresh categories")

    @property
    def bank_accounts(self) -> List[Account]:
        return [a for a in self.accounts if a.account_type == "bank"]

    @property
    def loan_accounts(self) -> List[Account]:
        return [a for a in self.accounts if a.is_loan_account]

    def select_account(self, account_id: Optional[str]) -> None:
        self.selected_account = account_id or None

    def find_category(self, category_id: Optional[str]) -> Tuple[Optional[Category], Optional[Category]]:
        """(top-level category, child) for an id; the child is None for top-level ids."""
        if not category_id:
            return None, None
        for cat in self.categories:
            if cat.id == category_id:
                return cat, None
            child = next((c for c in cat.children if c.id == category_id), None)
            if child:
                return cat, child
        return None, None

    def category_label(self, category_id: Optional[str]) -> Optional[str]:
        parent, child = self.find_category(category_id)
        if parent is None:
            return None
        return f"{parent.name} > {child.name}" if child else parent.name

    def payee_label(self, payee_id: Optional[str]) -> Optional[str]:
        account = next((a for a in self.accounts if a.id == payee_id), None)
        return account.name if account else None

    # Upload

    @property
    def can_upload(self) -> bool:
        return self.state == ImportState.IDLE and bool(self.bank_accounts)

    def validate_file(self, file_name: str, size: int) -> Optional[str]:
        """Error message for an unacceptable statement file, None when fine."""
        ext = Path(file_name).suffix.lower().lstrip(".")
        if ext not in config.allowed_statement_ext:
            allowed = ", ".join(config.allowed_statement_ext)
            return f"Unsupported file type '.{ext}'. Allowed: {allowed}."
        if size <= 0:
            return "The selected file is empty."
        if size > config.max_upload_bytes:
            return f"File is {human_size(size)}; the limit is {config.max_upload_mb} MB."
        return None

    def upload(self, file_name: str, content: bytes) -> bool:
        if self.state != ImportState.IDLE:
            log.warning(f"Upload ignored in state {self.state.value}")
            return False
        if not self.selected_account:
            self.notifier.error("Select a bank account first")
            return False

        problem = self.validate_file(file_name, len(content))
        if problem:
            self.notifier.error(problem)
            log.warning(f"Rejected statement {file_name}: {problem}")
            return False

        self.state = ImportState.UPLOADING
        self.file_name = file_name
        log.info(f"Uploading statement {file_name} ({human_size(len(content))}) for account {self.selected_account}")
        rows: Optional[List[StagedTransaction]] = None
        try:
            rows = self.ledger.upload.bank_statement(self.selected_account, file_name, content)
        except LedgerError as e:
            self.notifier.report(e, "Upload failed")
            return False
        finally:
            if rows is None:
                self.state = ImportState.IDLE
                self.file_name = None

        self.rows = rows
        self.selected_ids = []
        self.state = ImportState.STAGED if rows else ImportState.IDLE
        self.notifier.success(f"Parsed {len(rows)} transactions")
        log.info(f"Staged {len(rows)} row(s) from {file_name}")
        return True

    # Selection

    def toggle_select(self, row_id: str) -> None:
        if row_id in self.selected_ids:
            self.selected_ids = [i for i in self.selected_ids if i != row_id]
        else:
            self.selected_ids = self.selected_ids + [row_id]

    def toggle_select_all(self) -> None:
        if self.rows and len(self.selected_ids) == len(self.rows):
            self.selected_ids = []
        else:
            self.selected_ids = [r.id for r in self.rows]

    def row(self, row_id: str) -> Optional[StagedTransaction]:
        return next((r for r in self.rows if r.id == row_id), None)

    # Tag dialog

    def open_tag_dialog(self, row_id: str) -> TagDraft:
        row = self.row(row_id)
        if row is None:
            raise KeyError(f"No staged row {row_id}")
        parent, child = self.find_category(row.category_id)
        if parent is None and row.category_id:
            # Category no longer in the tree; keep the reference as-is
            return TagDraft(row_id=row.id, category_id=row.category_id, linked_loan_id=row.linked_loan_id)
        return TagDraft(
            row_id=row.id,
            category_id=parent.id if parent else None,
            sub_category_id=child.id if child else None,
            payee_id=row.payee_id,
            linked_loan_id=row.linked_loan_id,
        )

    def open_bulk_tag_dialog(self) -> Optional[TagDraft]:
        """Dialog for the current selection, seeded from its first row."""
        if not self.selected_ids:
            return None
        return self.open_tag_dialog(self.selected_ids[0])

    def shows_loan_link(self, draft: TagDraft) -> bool:
        """Loan choice is offered only for loan-interest categories."""
        parent, child = self.find_category(draft.effective_category_id)
        if parent is None:
            return False
        return parent.links_to_loan_interest or bool(child and child.links_to_loan_interest)

    def apply_tag(self, draft: TagDraft) -> int:
        """
        Apply the dialog to its row, or to the whole selection when the row
        is part of it. Returns the number of rows changed.
        """
        linked_loan_id = draft.linked_loan_id if self.shows_loan_link(draft) else None
        tag = make_tag(
            category_id=draft.effective_category_id,
            payee_id=draft.payee_id,
            linked_loan_id=linked_loan_id,
        )

        if self.selected_ids and draft.row_id in self.selected_ids:
            targets = set(self.selected_ids)
            self.selected_ids = []
        else:
            targets = {draft.row_id}

        self.rows = [r.with_tag(tag) if r.id in targets else r for r in self.rows]
        count = len(targets & {r.id for r in self.rows})
        if count > 1:
            self.notifier.success(f"Tagged {count} transactions")
        else:
            self.notifier.success("Transaction tagged")
        log.debug(f"Applied {tag.kind} tag to {count} row(s)")
        return count

    def create_category(self, draft: TagDraft, name: str) -> TagDraft:
        """
        Create a category from inside the dialog.

        It becomes a child of the dialog's selected category when there is
        one, a new top-level category otherwise, and is then selected.
        """
        name = (name or "").strip()
        if not name:
            return draft
        parent_id = draft.category_id
        try:
            created = self.ledger.categories.create({"name": name, "parent_id": parent_id, "type": "expense"})
        except LedgerError as e:
            self.notifier.report(e, "Failed to create category")
            return draft

        self.notifier.success("Category created")
        self._refresh_categories()
        if created is None:
            return draft
        if parent_id:
            return draft.choose_sub_category(created.id)
        return draft.choose_category(created.id)

    # Removal

    def delete_row(self, row_id: str) -> None:
        self.rows = [r for r in self.rows if r.id != row_id]
        self.selected_ids = [i for i in self.selected_ids if i != row_id]
        self.notifier.success("Transaction removed")
        self._settle()

    def delete_selected(self) -> int:
        if not self.selected_ids:
            return 0
        doomed = set(self.selected_ids)
        before = len(self.rows)
        self.rows = [r for r in self.rows if r.id not in doomed]
        removed = before - len(self.rows)
        self.selected_ids = []
        self.notifier.success(f"Removed {removed} transactions")
        self._settle()
        return removed

    def clear_all(self, confirmed: bool) -> bool:
        if not confirmed:
            return False
        self._reset()
        self.notifier.success("All transactions removed")
        return True

    def _settle(self) -> None:
        if not self.rows and self.state == ImportState.STAGED:
            self._reset()

    def _reset(self) -> None:
        self.rows = []
        self.selected_ids = []
        self.file_name = None
        self.state = ImportState.IDLE

    # Save

    def payload(self) -> List[Dict]:
        return [row.to_payload(self.selected_account) for row in self.rows]

    def save(self) -> bool:
        if not self.rows:
            return False
        if not self.selected_account:
            self.notifier.error("Select a bank account first")
            return False

        count = len(self.rows)
        previous = self.state
        self.state = ImportState.SAVING
        saved = False
        try:
            self.ledger.upload.save_transactions(self.payload())
            saved = True
        except LedgerError as e:
            self.notifier.report(e, "Save failed")
            return False
        finally:
            if not saved:
                self.state = previous

        self._reset()
        self.notifier.success(f"Saved {count} transactions")
        log.info(f"Saved {count} staged row(s)")
        return True
