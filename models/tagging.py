"""Tagging of staged statement rows.

A row is exactly one of: categorized (optionally linked to a loan),
a transfer to a payee account, or untagged. Category and payee can never
both be set.
"""
from __future__ import annotations
import uuid
import datetime as dt
from typing import Annotated, Any, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Categorized(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["categorized"] = "categorized"
    category_id: str
    linked_loan_id: Optional[str] = None


class Transfer(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["transfer"] = "transfer"
    payee_id: str


class Uncategorized(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["uncategorized"] = "uncategorized"


Tag = Annotated[Union[Categorized, Transfer, Uncategorized], Field(discriminator="kind")]

UNTAGGED = Uncategorized()


def make_tag(
    category_id: Optional[str] = None,
    payee_id: Optional[str] = None,
    linked_loan_id: Optional[str] = None,
) -> Tag:
    """
    Build a tag from loose form values.

    Blank strings count as unset. A payee wins over a category, matching the
    tag dialog where picking a payee clears the category.
    """
    category_id = category_id or None
    payee_id = payee_id or None
    if payee_id:
        return Transfer(payee_id=payee_id)
    if category_id:
        return Categorized(category_id=category_id, linked_loan_id=linked_loan_id or None)
    return UNTAGGED


def tag_fields(tag: Tag) -> dict[str, Optional[str]]:
    """All three reference fields, explicit None where unset."""
    return {
        "category_id": tag.category_id if isinstance(tag, Categorized) else None,
        "payee_id": tag.payee_id if isinstance(tag, Transfer) else None,
        "linked_loan_id": tag.linked_loan_id if isinstance(tag, Categorized) else None,
    }


class StagedTransaction(BaseModel):
    """
    A parsed statement line held in memory until the batch save.

    ``id`` is a row handle for selection and editing; it is not a persisted
    server id.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    date: dt.date
    description: str = ""
    amount: float = Field(ge=0)
    transaction_type: Literal["income", "expense"] = "expense"
    tag: Tag = UNTAGGED

    @field_validator("description", mode="before")
    @classmethod
    def _strip_description(cls, value: Any) -> str:
        return value.strip() if isinstance(value, str) else ""

    @model_validator(mode="before")
    @classmethod
    def _from_parsed_row(cls, data: Any) -> Any:
        """Accept the parse endpoint's flat rows (signed amounts, loose refs)."""
        if not isinstance(data, dict):
            return data
        data = dict(data)

        if not data.get("id"):
            data.pop("id", None)
        else:
            data["id"] = str(data["id"])

        amount = data.get("amount")
        if isinstance(amount, str):
            amount = float(amount.replace(",", "")) if amount.strip() else 0.0
        if amount is not None and amount < 0:
            data["transaction_type"] = "expense"
            amount = abs(amount)
        if amount is not None:
            data["amount"] = amount

        if data.get("transaction_type") not in ("income", "expense"):
            data["transaction_type"] = "expense"

        if "tag" not in data:
            data["tag"] = make_tag(
                data.get("category_id"),
                data.get("payee_id"),
                data.get("linked_loan_id"),
            )
        for key in ("category_id", "payee_id", "linked_loan_id"):
            data.pop(key, None)
        return data

    @property
    def category_id(self) -> Optional[str]:
        return tag_fields(self.tag)["category_id"]

    @property
    def payee_id(self) -> Optional[str]:
        return tag_fields(self.tag)["payee_id"]

    @property
    def linked_loan_id(self) -> Optional[str]:
        return tag_fields(self.tag)["linked_loan_id"]

    @property
    def is_tagged(self) -> bool:
        return not isinstance(self.tag, Uncategorized)

    def with_tag(self, tag: Tag) -> "StagedTransaction":
        return self.model_copy(update={"tag": tag})

    def with_category(self, category_id: Optional[str], linked_loan_id: Optional[str] = None) -> "StagedTransaction":
        """Categorize the row; any payee is dropped. ``None`` removes the category."""
        return self.with_tag(make_tag(category_id=category_id, linked_loan_id=linked_loan_id))

    def with_payee(self, payee_id: Optional[str]) -> "StagedTransaction":
        """Mark the row as a transfer; any category and loan link are dropped."""
        return self.with_tag(make_tag(payee_id=payee_id))

    def untagged(self) -> "StagedTransaction":
        return self.with_tag(UNTAGGED)

    def to_payload(self, account_id: str) -> dict[str, Any]:
        """Row as posted to the batch save, bound to ``account_id``."""
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "description": self.description,
            "amount": self.amount,
            "transaction_type": self.transaction_type,
            "account_id": account_id,
            **tag_fields(self.tag),
        }
