"""Report payloads and the small aggregations pages display."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from models.schema import (
    Account,
    CreditCard,
    FixedDeposit,
    GoldHolding,
    GovScheme,
    InvestmentHolding,
    Loan,
    RealEstate,
)


class ReportPayload(BaseModel):
    """Server-computed report. The client renders it and never recomputes it."""

    model_config = ConfigDict(extra="allow")


class DashboardReport(ReportPayload):
    net_worth: float = 0.0
    total_assets: float = 0.0
    total_liabilities: float = 0.0
    monthly_income: float = 0.0
    monthly_expense: float = 0.0
    account_balances: List[Dict[str, Any]] = Field(default_factory=list)
    recent_transactions: List[Dict[str, Any]] = Field(default_factory=list)


class BalanceSheet(ReportPayload):
    assets: List[Dict[str, Any]] = Field(default_factory=list)
    liabilities: List[Dict[str, Any]] = Field(default_factory=list)
    total_assets: float = 0.0
    total_liabilities: float = 0.0
    net_worth: float = 0.0


class IncomeExpenseReport(ReportPayload):
    income: Dict[str, float] = Field(default_factory=dict)
    expense: Dict[str, float] = Field(default_factory=dict)
    total_income: float = 0.0
    total_expense: float = 0.0
    net: float = 0.0


class TaxSection(BaseModel):
    total: float = 0.0
    limit: Optional[float] = None
    items: List[Dict[str, Any]] = Field(default_factory=list)


class TaxSummary(ReportPayload):
    financial_year: Optional[str] = None
    sections: Dict[str, TaxSection] = Field(default_factory=dict)
    total_deductions: float = 0.0


@dataclass(frozen=True)
class TaxSectionInfo:
    code: str
    label: str
    limit: Optional[float]
    description: str


TAX_SECTIONS: List[TaxSectionInfo] = [
    TaxSectionInfo("80C", "Section 80C", 150000, "PPF, ELSS, LIC, FD (5yr), EPF"),
    TaxSectionInfo("80D", "Section 80D", 75000, "Health Insurance Premiums"),
    TaxSectionInfo("80E", "Section 80E", None, "Education Loan Interest"),
    TaxSectionInfo("24b", "Section 24(b)", 200000, "Home Loan Interest"),
    TaxSectionInfo("80G", "Section 80G", None, "Donations to Charitable Trusts"),
    TaxSectionInfo("80TTA", "Section 80TTA", 10000, "Savings Bank Interest"),
    TaxSectionInfo("80CCD", "Section 80CCD(1B)", 50000, "NPS Additional Contribution"),
]


@dataclass(frozen=True)
class SectionUtilization:
    code: str
    total: float
    limit: Optional[float]
    utilized_percent: float
    remaining: Optional[float]

    @property
    def exhausted(self) -> bool:
        return self.limit is not None and self.total >= self.limit


def section_utilization(summary: Optional[TaxSummary], info: TaxSectionInfo) -> SectionUtilization:
    """Claimed amount against the section limit; the server's limit wins when sent."""
    data = summary.sections.get(info.code) if summary else None
    total = data.total if data else 0.0
    limit = (data.limit if data and data.limit else None) or info.limit
    if limit:
        utilized = min(total / limit * 100, 100.0)
        remaining: Optional[float] = max(limit - total, 0.0)
    else:
        utilized = 0.0
        remaining = None
    return SectionUtilization(info.code, total, limit, utilized, remaining)


@dataclass(frozen=True)
class PortfolioSummary:
    invested: float
    current: float

    @property
    def pnl(self) -> float:
        return self.current - self.invested

    @property
    def pnl_percent(self) -> float:
        return self.pnl / self.invested * 100 if self.invested > 0 else 0.0


HOLDING_TYPE_LABELS = {"stock": "Stocks", "mutual_fund": "Mutual Funds", "etf": "ETFs"}


def portfolio_summary(holdings: Iterable[InvestmentHolding]) -> PortfolioSummary:
    holdings = list(holdings)
    return PortfolioSummary(
        invested=sum(h.invested for h in holdings),
        current=sum(h.current_value for h in holdings),
    )


def allocation_by_type(holdings: Iterable[InvestmentHolding]) -> Dict[str, float]:
    """Current value per holding type, empty types omitted."""
    totals: Dict[str, float] = {}
    for holding in holdings:
        label = HOLDING_TYPE_LABELS.get(holding.holding_type, holding.holding_type)
        totals[label] = totals.get(label, 0.0) + holding.current_value
    return {label: value for label, value in totals.items() if value > 0}


def loan_totals(loans: Iterable[Loan]) -> Dict[str, float]:
    """Outstanding receivable (given) and payable (taken) amounts."""
    receivable = payable = 0.0
    for loan in loans:
        if loan.loan_type == "given":
            receivable += loan.outstanding
        else:
            payable += loan.outstanding
    return {"receivable": receivable, "payable": payable}


def group_accounts(accounts: Iterable[Account]) -> Dict[str, List[Account]]:
    """Accounts grouped by type, in first-seen order."""
    groups: Dict[str, List[Account]] = {}
    for account in accounts:
        groups.setdefault(account.account_type, []).append(account)
    return groups


def sum_field(records: Iterable[Any], field: str) -> float:
    return sum(getattr(r, field, 0.0) or 0.0 for r in records)


def fixed_deposit_totals(fds: Iterable[FixedDeposit]) -> Dict[str, float]:
    fds = list(fds)
    return {
        "principal": sum_field(fds, "principal"),
        "maturity": sum(fd.maturity_amount or fd.principal or 0.0 for fd in fds),
        "tds": sum_field(fds, "tds_deducted"),
    }


def gold_totals(holdings: Iterable[GoldHolding]) -> Dict[str, float]:
    holdings = list(holdings)
    return {
        "grams": sum_field(holdings, "quantity_grams"),
        "value": sum_field(holdings, "current_value"),
        "cost": sum_field(holdings, "purchase_value"),
    }


def credit_card_totals(cards: Iterable[CreditCard]) -> Dict[str, float]:
    cards = list(cards)
    return {"limit": sum_field(cards, "credit_limit"), "outstanding": sum_field(cards, "current_outstanding")}


def gov_scheme_totals(schemes: Iterable[GovScheme]) -> Dict[str, float]:
    schemes = list(schemes)
    return {"balance": sum_field(schemes, "current_balance"), "yearly_contribution": sum_field(schemes, "yearly_contribution")}


def real_estate_totals(properties: Iterable[RealEstate]) -> Dict[str, float]:
    properties = list(properties)
    return {
        "value": sum_field(properties, "current_value"),
        "cost": sum_field(properties, "purchase_value"),
        "monthly_rental": sum_field(properties, "rental_income"),
    }
