from __future__ import annotations

import datetime as dt

import pytest
from pydantic import ValidationError

from models.schema import Account, Category, InvestmentHolding, Loan, Transaction


def test_ids_are_opaque_strings_and_blanks_use_defaults() -> None:
    account = Account.model_validate(
        {"id": 12, "name": "HDFC", "account_type": "bank", "opening_balance": None, "description": "", "extra": 1}
    )
    assert account.id == "12"
    assert account.opening_balance == 0.0
    assert account.description is None
    assert not hasattr(account, "extra")


def test_loan_account_label_includes_person() -> None:
    account = Account(id="1", name="Loan to Ravi", account_type="loan_receivable", person_name="Ravi")
    assert account.is_loan_account
    assert account.label == "Loan to Ravi (Ravi)"


def test_legacy_interest_category_names_set_the_flag() -> None:
    paid = Category.model_validate({"id": 1, "name": "Interest Paid", "type": "expense"})
    food = Category.model_validate({"id": 2, "name": "Food", "type": "expense"})
    explicit = Category.model_validate({"id": 3, "name": "EMI interest", "type": "expense", "links_to_loan_interest": True})
    renamed = Category.model_validate({"id": 4, "name": "Interest Paid", "type": "expense", "links_to_loan_interest": False})

    assert paid.links_to_loan_interest is True
    assert food.links_to_loan_interest is False
    assert explicit.links_to_loan_interest is True
    assert renamed.links_to_loan_interest is False


def test_category_tree_is_two_levels_deep() -> None:
    with pytest.raises(ValidationError):
        Category.model_validate(
            {
                "id": "a",
                "name": "Home",
                "children": [{"id": "b", "name": "Rent", "children": [{"id": "c", "name": "Deposit"}]}],
            }
        )


def test_sub_category_type_matches_parent() -> None:
    with pytest.raises(ValidationError):
        Category.model_validate(
            {"id": "a", "name": "Salary", "type": "income", "children": [{"id": "b", "name": "Bonus", "type": "expense"}]}
        )

    tree = Category.model_validate(
        {"id": "a", "name": "Food", "children": [{"id": "b", "name": "Groceries", "parent_id": "a"}]}
    )
    assert tree.find("b").name == "Groceries"
    assert tree.find("zzz") is None


def test_transaction_amounts_are_unsigned() -> None:
    with pytest.raises(ValidationError):
        Transaction(id="1", date=dt.date(2024, 4, 1), amount=-5)

    txn = Transaction.model_validate({"id": 1, "date": "2024-04-01", "amount": 250, "transaction_type": "expense", "category_id": 9})
    assert txn.category_id == "9"
    assert txn.signed_amount == -250
    assert txn.is_tagged


def test_holding_values_are_derived() -> None:
    holding = InvestmentHolding(id="1", name="Infosys", quantity=10, avg_buy_price=1400, current_price=1500)
    assert holding.invested == 14000
    assert holding.current_value == 15000
    assert holding.pnl == 1000
    dumped = holding.model_dump()
    assert dumped["invested"] == 14000
    assert dumped["current_value"] == 15000


def test_loan_outstanding() -> None:
    loan = Loan(id="1", person_name="Ravi", principal=50000, total_repaid=12000)
    assert loan.outstanding == 38000
