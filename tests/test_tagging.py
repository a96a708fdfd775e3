from __future__ import annotations

from models.tagging import (
    UNTAGGED,
    Categorized,
    StagedTransaction,
    Transfer,
    make_tag,
    tag_fields,
)


def _row(**overrides) -> StagedTransaction:
    data = {"date": "2024-06-01", "description": "  UPI/ZOMATO  ", "amount": 450.0, "transaction_type": "expense"}
    data.update(overrides)
    return StagedTransaction.model_validate(data)


def test_payee_wins_over_category() -> None:
    tag = make_tag(category_id="c1", payee_id="a2", linked_loan_id="l1")
    assert tag == Transfer(payee_id="a2")


def test_blank_values_are_untagged() -> None:
    assert make_tag("", "", "") is UNTAGGED
    assert make_tag(None, None, "l1") is UNTAGGED


def test_tag_fields_always_carry_all_three_keys() -> None:
    assert tag_fields(UNTAGGED) == {"category_id": None, "payee_id": None, "linked_loan_id": None}
    assert tag_fields(Categorized(category_id="c", linked_loan_id="l")) == {
        "category_id": "c",
        "payee_id": None,
        "linked_loan_id": "l",
    }


def test_parsed_rows_are_normalized() -> None:
    row = _row(amount=-1200, transaction_type="income", category_id="c1", id="")
    assert row.amount == 1200
    assert row.transaction_type == "expense"
    assert row.category_id == "c1"
    assert row.description == "UPI/ZOMATO"
    assert row.id

    credit = _row(amount="15,000.00", transaction_type="income")
    assert credit.amount == 15000.0
    assert credit.transaction_type == "income"
    assert not credit.is_tagged


def test_payee_and_category_never_coexist() -> None:
    both = _row(category_id="c1", payee_id="a2")
    assert both.payee_id == "a2"
    assert both.category_id is None

    categorized = _row().with_category("c1", linked_loan_id="l1")
    transfer = categorized.with_payee("a2")
    assert transfer.category_id is None
    assert transfer.linked_loan_id is None

    back = transfer.with_category("c9")
    assert back.payee_id is None
    assert back.category_id == "c9"


def test_clearing_the_category_sends_explicit_null() -> None:
    row = _row(category_id="c1").with_category(None)
    payload = row.to_payload("acc-1")
    assert "category_id" in payload
    assert payload["category_id"] is None
    assert payload["account_id"] == "acc-1"
    assert payload["date"] == "2024-06-01"


def test_edits_return_new_rows() -> None:
    original = _row()
    tagged = original.with_category("c1")
    assert original.category_id is None
    assert tagged.id == original.id
    assert tagged.untagged().is_tagged is False
