from __future__ import annotations
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator
import datetime as dt

AccountType = Literal["bank", "cash", "credit_card", "investment", "loan_receivable", "loan_payable"]
CategoryType = Literal["income", "expense"]
TransactionType = Literal["income", "expense", "transfer"]

ACCOUNT_TYPE_LABELS: dict[str, str] = {
    "bank": "Bank Account",
    "cash": "Cash",
    "credit_card": "Credit Card",
    "investment": "Investment",
    "loan_receivable": "Loan Receivable",
    "loan_payable": "Loan Payable",
}

LOAN_ACCOUNT_TYPES = ("loan_receivable", "loan_payable")

# Category names that carried the loan-interest meaning before the backend
# exposed an explicit flag
LEGACY_INTEREST_CATEGORY_NAMES = frozenset({"Interest Paid", "Interest Received"})


class Record(BaseModel):
    """Server-owned entity. Unknown fields are dropped, ids are opaque strings."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, value):
        if value is None:
            raise ValueError("id is required")
        return str(value)

    @model_validator(mode="before")
    @classmethod
    def _blank_values_use_defaults(cls, data):
        # The server sends null or "" for unset optional fields
        if not isinstance(data, dict):
            return data
        return {
            key: value
            for key, value in data.items()
            if not (value in ("", None) and key in cls.model_fields and not cls.model_fields[key].is_required())
        }


class Account(Record):
    name: str
    account_type: AccountType = "bank"
    description: Optional[str] = None
    opening_balance: float = 0.0
    # Server-computed; the client never sends it back
    current_balance: float = 0.0
    person_name: Optional[str] = None

    @property
    def is_loan_account(self) -> bool:
        return self.account_type in LOAN_ACCOUNT_TYPES

    @property
    def label(self) -> str:
        return f"{self.name} ({self.person_name})" if self.person_name else self.name


class Category(Record):
    name: str
    type: CategoryType = "expense"
    parent_id: Optional[str] = None
    children: list["Category"] = Field(default_factory=list)
    links_to_loan_interest: bool = False

    @field_validator("children", mode="before")
    @classmethod
    def _ensure_list(cls, value):
        if value is None:
            return []
        return value

    @model_validator(mode="before")
    @classmethod
    def _derive_interest_flag(cls, data):
        if isinstance(data, dict) and "links_to_loan_interest" not in data:
            data = dict(data)
            data["links_to_loan_interest"] = data.get("name") in LEGACY_INTEREST_CATEGORY_NAMES
        return data

    @model_validator(mode="after")
    def _validate_tree(self) -> "Category":
        for child in self.children:
            if child.children:
                raise ValueError("category tree is limited to two levels")
            if child.type != self.type:
                raise ValueError(
                    f"sub-category '{child.name}' must have type '{self.type}' like its parent"
                )
        return self

    def find(self, category_id: str) -> Optional["Category"]:
        if self.id == category_id:
            return self
        return next((c for c in self.children if c.id == category_id), None)


class Transaction(Record):
    date: dt.date
    description: str = ""
    amount: float = Field(ge=0)
    account_id: Optional[str] = None
    category_id: Optional[str] = None
    payee_id: Optional[str] = None
    transaction_type: TransactionType = "expense"
    linked_loan_id: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("category_id", "payee_id", "linked_loan_id", "account_id", mode="before")
    @classmethod
    def _ref_as_str(cls, value):
        return None if value is None else str(value)

    @property
    def is_tagged(self) -> bool:
        return bool(self.category_id or self.payee_id)

    @property
    def signed_amount(self) -> float:
        """Display-only sign; amounts are stored unsigned."""
        return self.amount if self.transaction_type == "income" else -self.amount


class Loan(Record):
    person_name: str
    loan_type: Literal["given", "taken"] = "given"
    principal: float = 0.0
    interest_rate: float = 0.0
    interest_type: Literal["simple", "compound"] = "simple"
    start_date: Optional[dt.date] = None
    total_repaid: float = 0.0
    interest_paid: float = 0.0
    notes: Optional[str] = None

    @property
    def outstanding(self) -> float:
        """Display only; interest accrual uses the server's numbers."""
        return self.principal - self.total_repaid


class LoanInterest(BaseModel):
    """Interest figures computed by the server for one loan."""

    model_config = ConfigDict(extra="allow")

    loan_id: Optional[str] = None
    principal: float = 0.0
    outstanding: Optional[float] = None
    interest_rate: float = 0.0
    interest_type: str = "simple"
    days: Optional[int] = None
    accrued_interest: float = 0.0
    interest_paid: float = 0.0
    interest_due: Optional[float] = None
    total_due: Optional[float] = None


class BankAccount(Record):
    bank_name: str
    account_type: str = "savings"
    account_number: Optional[str] = None
    ifsc: Optional[str] = None
    branch: Optional[str] = None
    current_balance: float = 0.0


class CreditCard(Record):
    bank_name: str
    card_name: Optional[str] = None
    card_number_last4: Optional[str] = None
    credit_limit: float = 0.0
    current_outstanding: float = 0.0
    billing_date: Optional[int] = None
    due_date: Optional[int] = None

    @property
    def utilization(self) -> float:
        if self.credit_limit <= 0:
            return 0.0
        return self.current_outstanding / self.credit_limit * 100


class FixedDeposit(Record):
    bank_name: str
    fd_number: Optional[str] = None
    principal: float = 0.0
    interest_rate: float = 0.0
    start_date: Optional[dt.date] = None
    maturity_date: Optional[dt.date] = None
    maturity_amount: Optional[float] = None
    interest_payout: str = "maturity"
    is_tax_saver: bool = False
    tds_deducted: float = 0.0


class GoldHolding(Record):
    gold_type: str = "physical"
    description: Optional[str] = None
    quantity_grams: float = 0.0
    purity: str = "24K"
    purchase_price_per_gram: float = 0.0
    current_price_per_gram: float = 0.0
    purchase_date: Optional[dt.date] = None
    purchase_value: float = 0.0
    current_value: float = 0.0


class GovScheme(Record):
    scheme_type: str = "ppf"
    account_number: Optional[str] = None
    institution: Optional[str] = None
    current_balance: float = 0.0
    interest_rate: float = 0.0
    start_date: Optional[dt.date] = None
    maturity_date: Optional[dt.date] = None
    yearly_contribution: float = 0.0


class RealEstate(Record):
    property_type: str = "residential"
    property_name: str
    address: Optional[str] = None
    purchase_date: Optional[dt.date] = None
    purchase_value: float = 0.0
    current_value: float = 0.0
    rental_income: float = 0.0

    @property
    def appreciation(self) -> float:
        return self.current_value - self.purchase_value


class Profile(Record):
    name: str
    entity_type: str = "individual"
    pan: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    date_of_birth: Optional[dt.date] = None
    tax_regime: str = "new"
    relationship: str = "self"


class InvestmentHolding(Record):
    holding_type: Literal["stock", "mutual_fund", "etf"] = "stock"
    symbol: Optional[str] = None
    name: str
    quantity: float = 0.0
    avg_buy_price: float = 0.0
    current_price: float = 0.0
    broker: Optional[str] = None

    @computed_field
    @property
    def invested(self) -> float:
        return self.quantity * self.avg_buy_price

    @computed_field
    @property
    def current_value(self) -> float:
        return self.quantity * self.current_price

    @property
    def pnl(self) -> float:
        return self.current_value - self.invested


class TaxDeduction(Record):
    financial_year: str
    section: str = "80C"
    description: Optional[str] = None
    amount: float = 0.0
    proof_available: bool = False

