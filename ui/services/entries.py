"""Manual entries and the transactions list: add, edit, filter, bulk tag."""
from __future__ import annotations
import datetime as dt
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from api.resources import LedgerApi
from core.errors import LedgerError, ValidationFailure
from core.logger import get_logger
from core.utils import coerce_number
from models.schema import Transaction
from ui.services.crud import FetchGuard
from ui.services.notifier import Notifier

log = get_logger("ui/services/entries")

ENTRY_KINDS = ("expense", "income", "transfer")


@dataclass
class EntryDraft:
    """Add Entry form values; the amount is kept as typed."""

    kind: str = "expense"
    date: dt.date = field(default_factory=dt.date.today)
    amount: str = ""
    description: str = ""
    account_id: Optional[str] = None
    category_id: Optional[str] = None
    to_account_id: Optional[str] = None
    linked_loan_id: Optional[str] = None
    notes: str = ""


def entry_payload(draft: EntryDraft) -> Dict[str, Any]:
    """
    Validate an Add Entry form and build the transaction body.

    Raises:
        ValidationFailure: On a missing or non-positive amount, a missing
            account, or a transfer whose two sides are the same account
    """
    if draft.kind not in ENTRY_KINDS:
        raise ValidationFailure(f"Unknown entry type '{draft.kind}'")
    amount = coerce_number(draft.amount)
    if amount is None or amount <= 0:
        raise ValidationFailure("Enter an amount greater than zero")
    if not draft.account_id:
        raise ValidationFailure("Select an account")

    payload: Dict[str, Any] = {
        "date": draft.date.isoformat(),
        "description": draft.description.strip(),
        "amount": amount,
        "account_id": draft.account_id,
        "transaction_type": draft.kind,
        "notes": draft.notes.strip() or None,
    }
    if draft.kind == "transfer":
        if not draft.to_account_id:
            raise ValidationFailure("Select the account to transfer to")
        if draft.to_account_id == draft.account_id:
            raise ValidationFailure("Cannot transfer to the same account")
        payload["payee_id"] = draft.to_account_id
        payload["category_id"] = None
    else:
        payload["category_id"] = draft.category_id or None
        payload["linked_loan_id"] = draft.linked_loan_id or None
    return payload


def record_entry(ledger: LedgerApi, notifier: Notifier, draft: EntryDraft) -> bool:
    try:
        payload = entry_payload(draft)
        ledger.transactions.create(payload)
    except LedgerError as e:
        notifier.report(e, "Failed to save entry")
        return False
    notifier.success(f"{draft.kind.capitalize()} recorded")
    log.info(f"Recorded {draft.kind} of {payload['amount']}")
    return True


@dataclass
class TransactionFilters:
    account_id: Optional[str] = None
    category_id: Optional[str] = None
    transaction_type: Optional[str] = None
    untagged: bool = False
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None

    def as_params(self) -> Dict[str, Any]:
        return {
            "account_id": self.account_id or None,
            "category_id": self.category_id or None,
            "transaction_type": None if self.transaction_type in (None, "", "all") else self.transaction_type,
            "untagged": self.untagged,
            "start_date": self.start_date,
            "end_date": self.end_date,
        }


class TransactionBook:
    """Transactions page: filtered list, selection and bulk tagging."""

    def __init__(self, ledger: LedgerApi, notifier: Notifier):
        self.ledger = ledger
        self.notifier = notifier
        self.filters = TransactionFilters()
        self.items: List[Transaction] = []
        self.selected_ids: List[str] = []
        self.loaded = False
        self._guard = FetchGuard()

    def refresh(self) -> bool:
        ticket = self._guard.issue()
        try:
            items = self.ledger.transactions.list(**self.filters.as_params())
        except LedgerError as e:
            self.notifier.report(e, "Failed to load transactions")
            return False
        if not self._guard.is_current(ticket):
            log.debug(f"Dropping stale transactions fetch #{ticket}")
            return False
        self.items = items
        self.loaded = True
        known = {t.id for t in items}
        self.selected_ids = [i for i in self.selected_ids if i in known]
        return True

    def leave(self) -> None:
        self._guard.invalidate()

    def set_filters(self, filters: TransactionFilters) -> None:
        self.filters = filters
        self.refresh()

    def toggle_select(self, transaction_id: str) -> None:
        if transaction_id in self.selected_ids:
            self.selected_ids = [i for i in self.selected_ids if i != transaction_id]
        else:
            self.selected_ids = self.selected_ids + [transaction_id]

    def bulk_tag(
        self,
        category_id: Optional[str],
        payee_id: Optional[str] = None,
        linked_loan_id: Optional[str] = None,
    ) -> bool:
        """Tag exactly the selected transactions, then refetch."""
        if not self.selected_ids:
            self.notifier.warning("Select transactions to tag")
            return False
        ids = list(self.selected_ids)
        try:
            self.ledger.transactions.bulk_tag(ids, category_id, payee_id=payee_id, linked_loan_id=linked_loan_id)
        except LedgerError as e:
            self.notifier.report(e, "Bulk tagging failed")
            return False
        self.selected_ids = []
        self.notifier.success(f"Tagged {len(ids)} transactions")
        self.refresh()
        return True

    def update(self, transaction: Transaction, changes: Dict[str, Any]) -> bool:
        data = transaction.model_dump(mode="json", exclude={"id"})
        data.update(changes)
        if data.get("payee_id") and data.get("payee_id") == data.get("account_id"):
            self.notifier.error("Cannot transfer to the same account")
            return False
        try:
            self.ledger.transactions.update(transaction.id, data)
        except LedgerError as e:
            self.notifier.report(e, "Failed to update transaction")
            return False
        self.notifier.success("Transaction updated")
        self.refresh()
        return True

    def delete(self, transaction_id: str, confirmed: bool) -> bool:
        if not confirmed:
            return False
        try:
            self.ledger.transactions.delete(transaction_id)
        except LedgerError as e:
            self.notifier.report(e, "Failed to delete transaction")
            return False
        self.notifier.success("Transaction deleted")
        self.refresh()
        return True
