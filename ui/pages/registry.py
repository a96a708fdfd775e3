"""Declarations for the CRUD pages: resource, form fields, columns, totals."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from core.config import config
from core.utils import format_currency
from models import reports
from models.schema import ACCOUNT_TYPE_LABELS
from ui.services.crud import FieldSpec


@dataclass(frozen=True)
class PageSpec:
    key: str
    title: str
    icon: str
    resource: str
    entity_label: str
    fields: Sequence[FieldSpec]
    columns: Sequence[str]
    group_by: Optional[str] = None
    drill_in_filter: Optional[str] = None
    to_payload: Optional[Callable[[Dict[str, Any]], Dict[str, Any]]] = None
    totals: Optional[Callable[[List[Any]], Dict[str, float]]] = None
    money_columns: Sequence[str] = field(default_factory=tuple)


def _gold_payload(data: Dict[str, Any]) -> Dict[str, Any]:
    grams = data.get("quantity_grams") or 0.0
    data["purchase_value"] = grams * (data.get("purchase_price_per_gram") or 0.0)
    data["current_value"] = grams * (data.get("current_price_per_gram") or 0.0)
    return data


def _account_payload(data: Dict[str, Any]) -> Dict[str, Any]:
    if data.get("account_type") not in ("loan_receivable", "loan_payable"):
        data["person_name"] = None
    return data


def _account_totals(items: List[Any]) -> Dict[str, float]:
    return {"total balance": reports.sum_field(items, "current_balance")}


def _holding_totals(items: List[Any]) -> Dict[str, float]:
    summary = reports.portfolio_summary(items)
    return {"invested": summary.invested, "current value": summary.current, "P&L": summary.pnl}


PAGES: Dict[str, PageSpec] = {
    "accounts": PageSpec(
        key="accounts",
        title="Accounts & Ledgers",
        icon="🏦",
        resource="accounts",
        entity_label="account",
        fields=(
            FieldSpec("name", "Name", required=True),
            FieldSpec("account_type", "Type", "select", "bank", tuple(ACCOUNT_TYPE_LABELS)),
            FieldSpec("description", "Description"),
            FieldSpec("opening_balance", "Opening balance", "number", "0"),
            FieldSpec("person_name", "Person (loan accounts)"),
        ),
        columns=("name", "account_type", "opening_balance", "current_balance", "person_name"),
        group_by="account_type",
        drill_in_filter="account_id",
        to_payload=_account_payload,
        totals=_account_totals,
        money_columns=("opening_balance", "current_balance"),
    ),
    "bank_accounts": PageSpec(
        key="bank_accounts",
        title="Bank Accounts",
        icon="🏛️",
        resource="bank_accounts",
        entity_label="bank account",
        fields=(
            FieldSpec("bank_name", "Bank name", required=True),
            FieldSpec("account_type", "Account type", "select", "savings", ("savings", "current", "salary", "nri")),
            FieldSpec("account_number", "Account number"),
            FieldSpec("ifsc", "IFSC"),
            FieldSpec("branch", "Branch"),
            FieldSpec("current_balance", "Current balance", "number"),
        ),
        columns=("bank_name", "account_type", "account_number", "ifsc", "current_balance"),
        totals=lambda items: {"total balance": reports.sum_field(items, "current_balance")},
        money_columns=("current_balance",),
    ),
    "credit_cards": PageSpec(
        key="credit_cards",
        title="Credit Cards",
        icon="💳",
        resource="credit_cards",
        entity_label="credit card",
        fields=(
            FieldSpec("bank_name", "Bank name", required=True),
            FieldSpec("card_name", "Card name"),
            FieldSpec("card_number_last4", "Last 4 digits"),
            FieldSpec("credit_limit", "Credit limit", "number"),
            FieldSpec("current_outstanding", "Current outstanding", "number"),
            FieldSpec("billing_date", "Billing day", "integer"),
            FieldSpec("due_date", "Due day", "integer"),
        ),
        columns=("bank_name", "card_name", "card_number_last4", "credit_limit", "current_outstanding"),
        totals=reports.credit_card_totals,
        money_columns=("credit_limit", "current_outstanding"),
    ),
    "fixed_deposits": PageSpec(
        key="fixed_deposits",
        title="Fixed Deposits",
        icon="🔒",
        resource="fixed_deposits",
        entity_label="fixed deposit",
        fields=(
            FieldSpec("bank_name", "Bank name", required=True),
            FieldSpec("fd_number", "FD number"),
            FieldSpec("principal", "Principal", "number"),
            FieldSpec("interest_rate", "Interest rate (%)", "number"),
            FieldSpec("start_date", "Start date", "date", None),
            FieldSpec("maturity_date", "Maturity date", "date", None),
            FieldSpec("maturity_amount", "Maturity amount", "number"),
            FieldSpec("interest_payout", "Interest payout", "select", "maturity", ("maturity", "monthly", "quarterly", "yearly")),
            FieldSpec("is_tax_saver", "Tax saver FD", "bool", False),
            FieldSpec("tds_deducted", "TDS deducted", "number"),
        ),
        columns=("bank_name", "fd_number", "principal", "interest_rate", "maturity_date", "maturity_amount"),
        totals=reports.fixed_deposit_totals,
        money_columns=("principal", "maturity_amount"),
    ),
    "gold": PageSpec(
        key="gold",
        title="Gold",
        icon="🪙",
        resource="gold_holdings",
        entity_label="gold holding",
        fields=(
            FieldSpec("gold_type", "Type", "select", "physical", ("physical", "sgb", "etf", "digital")),
            FieldSpec("description", "Description"),
            FieldSpec("quantity_grams", "Quantity (grams)", "number"),
            FieldSpec("purity", "Purity", "select", "24K", ("24K", "22K", "18K")),
            FieldSpec("purchase_price_per_gram", "Purchase price / gram", "number"),
            FieldSpec("current_price_per_gram", "Current price / gram", "number"),
            FieldSpec("purchase_date", "Purchase date", "date", None),
        ),
        columns=("gold_type", "description", "quantity_grams", "purity", "purchase_value", "current_value"),
        to_payload=_gold_payload,
        totals=reports.gold_totals,
        money_columns=("purchase_value", "current_value"),
    ),
    "gov_schemes": PageSpec(
        key="gov_schemes",
        title="Government Schemes",
        icon="🛡️",
        resource="gov_schemes",
        entity_label="scheme",
        fields=(
            FieldSpec("scheme_type", "Scheme", "select", "ppf", ("ppf", "nps", "epf", "nsc", "scss", "kvp", "sukanya")),
            FieldSpec("account_number", "Account number"),
            FieldSpec("institution", "Institution"),
            FieldSpec("current_balance", "Current balance", "number"),
            FieldSpec("interest_rate", "Interest rate (%)", "number"),
            FieldSpec("start_date", "Start date", "date", None),
            FieldSpec("maturity_date", "Maturity date", "date", None),
            FieldSpec("yearly_contribution", "Yearly contribution", "number"),
        ),
        columns=("scheme_type", "institution", "current_balance", "interest_rate", "yearly_contribution"),
        totals=reports.gov_scheme_totals,
        money_columns=("current_balance", "yearly_contribution"),
    ),
    "real_estate": PageSpec(
        key="real_estate",
        title="Real Estate",
        icon="🏠",
        resource="real_estate",
        entity_label="property",
        fields=(
            FieldSpec("property_type", "Type", "select", "residential", ("residential", "commercial", "land", "agricultural")),
            FieldSpec("property_name", "Name", required=True),
            FieldSpec("address", "Address", "textarea"),
            FieldSpec("purchase_date", "Purchase date", "date", None),
            FieldSpec("purchase_value", "Purchase value", "number"),
            FieldSpec("current_value", "Current value", "number"),
            FieldSpec("rental_income", "Monthly rental income", "number"),
        ),
        columns=("property_name", "property_type", "purchase_value", "current_value", "rental_income"),
        totals=reports.real_estate_totals,
        money_columns=("purchase_value", "current_value", "rental_income"),
    ),
    "profiles": PageSpec(
        key="profiles",
        title="Profiles",
        icon="👤",
        resource="profiles",
        entity_label="profile",
        fields=(
            FieldSpec("name", "Name", required=True),
            FieldSpec("entity_type", "Entity type", "select", "individual", ("individual", "huf", "company", "firm", "trust")),
            FieldSpec("pan", "PAN"),
            FieldSpec("email", "Email"),
            FieldSpec("phone", "Phone"),
            FieldSpec("date_of_birth", "Date of birth", "date", None),
            FieldSpec("tax_regime", "Tax regime", "select", "new", ("new", "old")),
            FieldSpec("relationship", "Relationship", "select", "self", ("self", "spouse", "parent", "child", "other")),
        ),
        columns=("name", "entity_type", "pan", "tax_regime", "relationship"),
    ),
    "portfolio": PageSpec(
        key="portfolio",
        title="Portfolio",
        icon="📈",
        resource="investment_holdings",
        entity_label="holding",
        fields=(
            FieldSpec("holding_type", "Type", "select", "stock", ("stock", "mutual_fund", "etf")),
            FieldSpec("symbol", "Symbol"),
            FieldSpec("name", "Name", required=True),
            FieldSpec("quantity", "Quantity", "number"),
            FieldSpec("avg_buy_price", "Average buy price", "number"),
            FieldSpec("current_price", "Current price", "number"),
            FieldSpec("broker", "Broker"),
        ),
        columns=("symbol", "name", "holding_type", "quantity", "avg_buy_price", "current_price", "invested", "current_value"),
        group_by="holding_type",
        totals=_holding_totals,
        money_columns=("avg_buy_price", "current_price", "invested", "current_value"),
    ),
    "loans": PageSpec(
        key="loans",
        title="Loans",
        icon="🤝",
        resource="loans",
        entity_label="loan",
        fields=(
            FieldSpec("person_name", "Person", required=True),
            FieldSpec("loan_type", "Type", "select", "given", ("given", "taken")),
            FieldSpec("principal", "Principal", "number"),
            FieldSpec("interest_rate", "Interest rate (% p.a.)", "number"),
            FieldSpec("interest_type", "Interest type", "select", "simple", ("simple", "compound")),
            FieldSpec("start_date", "Start date", "date", None),
            FieldSpec("notes", "Notes", "textarea"),
        ),
        columns=("person_name", "loan_type", "principal", "interest_rate", "interest_type", "total_repaid"),
        group_by="loan_type",
        totals=reports.loan_totals,
        money_columns=("principal", "total_repaid"),
    ),
    "tax_deductions": PageSpec(
        key="tax_deductions",
        title="Tax Deductions",
        icon="🧾",
        resource="tax_deductions",
        entity_label="deduction",
        fields=(
            FieldSpec("financial_year", "Financial year", "select", config.financial_years[0], config.financial_years),
            FieldSpec("section", "Section", "select", "80C", ("80C", "80D", "80E", "24b", "80G", "80TTA", "80CCD")),
            FieldSpec("description", "Description"),
            FieldSpec("amount", "Amount", "number"),
            FieldSpec("proof_available", "Proof available", "bool", False),
        ),
        columns=("financial_year", "section", "description", "amount", "proof_available"),
        money_columns=("amount",),
    ),
}


def format_cell(spec: PageSpec, column: str, value: Any) -> Any:
    if column in spec.money_columns:
        return format_currency(value, decimals=0)
    if column == "account_type" and spec.key == "accounts":
        return ACCOUNT_TYPE_LABELS.get(value, value)
    return value
