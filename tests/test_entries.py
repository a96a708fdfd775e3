from __future__ import annotations

import datetime as dt

import pytest

from api.resources import LedgerApi
from core.errors import ValidationFailure
from models.schema import Transaction
from tests.conftest import FakeBackend, texts
from ui.services.entries import EntryDraft, TransactionBook, TransactionFilters, entry_payload, record_entry
from ui.services.notifier import Notifier

TRANSACTIONS = [
    {"id": "t1", "date": "2024-05-01", "amount": 120, "account_id": "a1", "transaction_type": "expense"},
    {"id": "t2", "date": "2024-05-02", "amount": 80, "account_id": "a1", "transaction_type": "expense"},
    {"id": "t3", "date": "2024-05-03", "amount": 5000, "account_id": "a1", "transaction_type": "income"},
]


def test_transfer_to_the_same_account_is_rejected() -> None:
    draft = EntryDraft(kind="transfer", amount="500", account_id="a1", to_account_id="a1")
    with pytest.raises(ValidationFailure, match="same account"):
        entry_payload(draft)


def test_amount_must_parse_and_be_positive() -> None:
    for amount in ("", "-", "0", "-20"):
        with pytest.raises(ValidationFailure):
            entry_payload(EntryDraft(amount=amount, account_id="a1"))


def test_expense_payload() -> None:
    payload = entry_payload(
        EntryDraft(kind="expense", date=dt.date(2024, 5, 4), amount="1,250", description=" Rent ", account_id="a1", category_id="c1")
    )
    assert payload == {
        "date": "2024-05-04",
        "description": "Rent",
        "amount": 1250.0,
        "account_id": "a1",
        "transaction_type": "expense",
        "notes": None,
        "category_id": "c1",
        "linked_loan_id": None,
    }


def test_transfer_payload_uses_payee() -> None:
    payload = entry_payload(EntryDraft(kind="transfer", amount="300", account_id="a1", to_account_id="a2"))
    assert payload["payee_id"] == "a2"
    assert payload["category_id"] is None
    assert payload["transaction_type"] == "transfer"


def test_record_entry_reports_validation_without_request(ledger: LedgerApi, backend: FakeBackend, notifier: Notifier) -> None:
    assert record_entry(ledger, notifier, EntryDraft(amount="abc", account_id="a1")) is False
    assert backend.requests == []
    assert texts(notifier, "error") == ["Enter an amount greater than zero"]


def test_record_entry_posts_transaction(ledger: LedgerApi, backend: FakeBackend, notifier: Notifier) -> None:
    backend.route("POST", "/transactions", body={"id": "t9", "date": "2024-05-04", "amount": 10})
    assert record_entry(ledger, notifier, EntryDraft(kind="income", amount="10", account_id="a1")) is True
    assert backend.body(backend.calls("POST", "/transactions")[-1])["transaction_type"] == "income"
    assert texts(notifier, "success") == ["Income recorded"]


@pytest.fixture
def book(ledger: LedgerApi, backend: FakeBackend, notifier: Notifier) -> TransactionBook:
    backend.route("GET", "/transactions", body=TRANSACTIONS)
    book = TransactionBook(ledger, notifier)
    book.refresh()
    return book


def test_filters_become_query_parameters(book: TransactionBook, backend: FakeBackend) -> None:
    book.set_filters(TransactionFilters(account_id="a1", transaction_type="all", untagged=True, start_date=dt.date(2024, 4, 1)))
    params = backend.calls("GET", "/transactions")[-1].url.params
    assert params["account_id"] == "a1"
    assert params["untagged"] == "true"
    assert params["start_date"] == "2024-04-01"
    assert "transaction_type" not in params
    assert "end_date" not in params


def test_bulk_tag_sends_exactly_the_selection(book: TransactionBook, backend: FakeBackend) -> None:
    backend.route("POST", "/transactions/bulk-tag", body={"updated": 2})
    book.toggle_select("t1")
    book.toggle_select("t3")

    assert book.bulk_tag("groceries") is True
    body = backend.body(backend.calls("POST", "/transactions/bulk-tag")[-1])
    assert body == {"transaction_ids": ["t1", "t3"], "category_id": "groceries", "payee_id": None}
    assert book.selected_ids == []


def test_bulk_untag_sends_explicit_null(book: TransactionBook, backend: FakeBackend) -> None:
    backend.route("POST", "/transactions/bulk-tag", body={"updated": 1})
    book.toggle_select("t2")
    book.bulk_tag(None)
    body = backend.body(backend.calls("POST", "/transactions/bulk-tag")[-1])
    assert "category_id" in body and body["category_id"] is None


def test_categorizing_a_transfer_clears_its_payee(book: TransactionBook, backend: FakeBackend) -> None:
    backend.route("POST", "/transactions/bulk-tag", body={"updated": 1})
    book.toggle_select("t2")
    book.bulk_tag("groceries")
    body = backend.body(backend.calls("POST", "/transactions/bulk-tag")[-1])
    assert "payee_id" in body and body["payee_id"] is None
    assert body["category_id"] == "groceries"


def test_transfer_tag_clears_the_category(book: TransactionBook, backend: FakeBackend) -> None:
    backend.route("POST", "/transactions/bulk-tag", body={"updated": 1})
    book.toggle_select("t2")
    book.bulk_tag("groceries", payee_id="a2")
    body = backend.body(backend.calls("POST", "/transactions/bulk-tag")[-1])
    assert body["payee_id"] == "a2"
    assert body["category_id"] is None


def test_bulk_tag_without_selection_is_a_warning(book: TransactionBook, backend: FakeBackend, notifier: Notifier) -> None:
    assert book.bulk_tag("groceries") is False
    assert backend.calls("POST", "/transactions/bulk-tag") == []
    assert texts(notifier, "warning") == ["Select transactions to tag"]


def test_edit_cannot_turn_into_self_transfer(book: TransactionBook, backend: FakeBackend, notifier: Notifier) -> None:
    txn: Transaction = book.items[0]
    assert book.update(txn, {"payee_id": "a1"}) is False
    assert backend.calls("PUT", "/transactions/t1") == []


def test_delete_requires_confirmation(book: TransactionBook, backend: FakeBackend) -> None:
    backend.route("DELETE", "/transactions/t1", body={"message": "deleted"})
    assert book.delete("t1", confirmed=False) is False
    assert backend.calls("DELETE", "/transactions/t1") == []
    assert book.delete("t1", confirmed=True) is True
    assert len(backend.calls("GET", "/transactions")) == 2
