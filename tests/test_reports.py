from __future__ import annotations

from models.reports import (
    TAX_SECTIONS,
    TaxSummary,
    allocation_by_type,
    fixed_deposit_totals,
    loan_totals,
    portfolio_summary,
    section_utilization,
)
from models.schema import FixedDeposit, InvestmentHolding, Loan


def _section(code: str):
    return next(s for s in TAX_SECTIONS if s.code == code)


def test_section_utilization_caps_at_limit() -> None:
    summary = TaxSummary.model_validate({"sections": {"80C": {"total": 180000}, "80D": {"total": 25000}}})

    full = section_utilization(summary, _section("80C"))
    assert full.utilized_percent == 100.0
    assert full.remaining == 0.0
    assert full.exhausted

    partial = section_utilization(summary, _section("80D"))
    assert partial.remaining == 50000
    assert not partial.exhausted


def test_unlimited_sections_have_no_remaining() -> None:
    usage = section_utilization(None, _section("80G"))
    assert usage.limit is None
    assert usage.remaining is None
    assert usage.total == 0.0


def test_server_limit_wins() -> None:
    summary = TaxSummary.model_validate({"sections": {"80C": {"total": 50000, "limit": 100000}}})
    assert section_utilization(summary, _section("80C")).utilized_percent == 50.0


def test_loan_totals_split_by_direction() -> None:
    loans = [
        Loan(id="1", person_name="Ravi", loan_type="given", principal=10000, total_repaid=2500),
        Loan(id="2", person_name="Bank", loan_type="taken", principal=40000),
    ]
    assert loan_totals(loans) == {"receivable": 7500, "payable": 40000}


def test_portfolio_summary_and_allocation() -> None:
    holdings = [
        InvestmentHolding(id="1", name="TCS", holding_type="stock", quantity=2, avg_buy_price=3000, current_price=3600),
        InvestmentHolding(id="2", name="Index fund", holding_type="mutual_fund", quantity=100, avg_buy_price=50, current_price=55),
        InvestmentHolding(id="3", name="Gold ETF", holding_type="etf", quantity=0, avg_buy_price=0, current_price=60),
    ]
    summary = portfolio_summary(holdings)
    assert summary.invested == 11000
    assert summary.current == 12700
    assert round(summary.pnl_percent, 2) == 15.45
    assert allocation_by_type(holdings) == {"Stocks": 7200, "Mutual Funds": 5500}
    assert portfolio_summary([]).pnl_percent == 0.0


def test_fixed_deposit_maturity_falls_back_to_principal() -> None:
    fds = [
        FixedDeposit(id="1", bank_name="SBI", principal=100000, maturity_amount=112000, tds_deducted=1200),
        FixedDeposit(id="2", bank_name="HDFC", principal=50000),
    ]
    assert fixed_deposit_totals(fds) == {"principal": 150000, "maturity": 162000, "tds": 1200}
