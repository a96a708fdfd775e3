"""Typed accessors for the backend's endpoint groups."""
from __future__ import annotations
import datetime as dt
from dataclasses import dataclass
from typing import Any, Dict, Generic, Iterable, List, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel

from api.auth import AuthApi
from api.client import ApiClient, parse_body, parse_list
from core.errors import ResponseInvalid
from core.logger import get_logger
from models.reports import BalanceSheet, DashboardReport, IncomeExpenseReport, TaxSummary
from models.schema import (
    Account,
    BankAccount,
    Category,
    CreditCard,
    FixedDeposit,
    GoldHolding,
    GovScheme,
    InvestmentHolding,
    Loan,
    LoanInterest,
    Profile,
    RealEstate,
    TaxDeduction,
    Transaction,
)
from models.tagging import StagedTransaction

log = get_logger("api/resources")

M = TypeVar("M", bound=BaseModel)


def _iso(value: Optional[dt.date]) -> Optional[str]:
    return value.isoformat() if value else None


class Resource(Generic[M]):
    """Collection endpoint with the usual list/create/update/delete verbs."""

    def __init__(self, client: ApiClient, path: str, model: Type[M]):
        self.client = client
        self.path = "/" + path.strip("/")
        self.model = model

    def _parse_many(self, body: Any, path: Optional[str] = None) -> List[M]:
        return parse_list(self.model, body, path or self.path)

    def _parse_one(self, body: Any, path: Optional[str] = None) -> Optional[M]:
        if not isinstance(body, dict) or "id" not in body:
            return None
        return parse_body(self.model, body, path or self.path)

    def list(self, **filters: Any) -> List[M]:
        return self._parse_many(self.client.get(self.path, params=filters))

    def create(self, data: Mapping[str, Any]) -> Optional[M]:
        log.info(f"Creating record at {self.path}")
        return self._parse_one(self.client.post(self.path, json=dict(data)))

    def update(self, record_id: str, data: Mapping[str, Any]) -> Optional[M]:
        log.info(f"Updating {self.path}/{record_id}")
        return self._parse_one(self.client.put(f"{self.path}/{record_id}", json=dict(data)))

    def delete(self, record_id: str) -> None:
        log.info(f"Deleting {self.path}/{record_id}")
        self.client.delete(f"{self.path}/{record_id}")


class CategoryResource(Resource[Category]):
    def list(self, type: Optional[str] = None, **filters: Any) -> List[Category]:
        """Category tree (top-level categories with their children)."""
        return super().list(type=type, **filters)

    def flat(self) -> List[Category]:
        """Every category at both levels, as one list."""
        path = f"{self.path}/flat"
        return self._parse_many(self.client.get(path), path)


class LoanResource(Resource[Loan]):
    def interest(self, loan_id: str) -> LoanInterest:
        path = f"{self.path}/{loan_id}/interest"
        body = self.client.get(path) or {}
        if not isinstance(body, dict):
            raise ResponseInvalid(path, "expected an object")
        return parse_body(LoanInterest, {"loan_id": loan_id, **body}, path)

    def repayment(
        self,
        loan_id: str,
        amount: float,
        date: dt.date,
        is_interest: bool = False,
        notes: str = "",
    ) -> Any:
        log.info(f"Recording {'interest' if is_interest else 'principal'} repayment for loan {loan_id}")
        return self.client.post(
            f"{self.path}/repayment",
            json={
                "loan_id": loan_id,
                "amount": amount,
                "date": date.isoformat(),
                "is_interest": is_interest,
                "notes": notes,
            },
        )


class HoldingResource(Resource[InvestmentHolding]):
    def import_csv(self, broker: str, file_name: str, content: bytes) -> int:
        path = f"{self.path}/import-csv"
        body = self.client.upload(
            path,
            file_name,
            content,
            params={"broker": broker},
            content_type="text/csv",
        )
        try:
            count = int(body.get("count", 0)) if isinstance(body, dict) else 0
        except (TypeError, ValueError) as e:
            raise ResponseInvalid(path, f"unreadable count {body.get('count')!r}") from e
        log.info(f"Imported {count} holdings from {file_name} ({broker})")
        return count


class TransactionResource(Resource[Transaction]):
    def list(
        self,
        account_id: Optional[str] = None,
        category_id: Optional[str] = None,
        transaction_type: Optional[str] = None,
        untagged: Optional[bool] = None,
        start_date: Optional[dt.date] = None,
        end_date: Optional[dt.date] = None,
        limit: Optional[int] = None,
    ) -> List[Transaction]:
        return super().list(
            account_id=account_id,
            category_id=category_id,
            transaction_type=transaction_type,
            untagged=untagged or None,
            start_date=_iso(start_date),
            end_date=_iso(end_date),
            limit=limit,
        )

    def bulk_tag(
        self,
        transaction_ids: Iterable[str],
        category_id: Optional[str],
        payee_id: Optional[str] = None,
        linked_loan_id: Optional[str] = None,
    ) -> Any:
        """
        Tag exactly ``transaction_ids``.

        Category and payee exclude each other, so both are always sent: a
        payee clears the category, anything else clears the payee.
        """
        ids = list(transaction_ids)
        payload: Dict[str, Any] = {
            "transaction_ids": ids,
            "category_id": None if payee_id else (category_id or None),
            "payee_id": payee_id or None,
        }
        if linked_loan_id is not None:
            payload["linked_loan_id"] = linked_loan_id or None
        log.info(f"Bulk tagging {len(ids)} transaction(s)")
        return self.client.post("/transactions/bulk-tag", json=payload)


class UploadApi:
    def __init__(self, client: ApiClient):
        self.client = client

    def bank_statement(self, account_id: str, file_name: str, content: bytes) -> List[StagedTransaction]:
        body = self.client.upload(
            "/upload/bank-statement",
            file_name,
            content,
            params={"account_id": account_id},
        )
        rows = body.get("transactions") if isinstance(body, dict) else body
        return parse_list(StagedTransaction, rows, "/upload/bank-statement")

    def save_transactions(self, rows: List[Dict[str, Any]]) -> Any:
        log.info(f"Saving {len(rows)} staged transaction(s)")
        return self.client.post("/upload/save-transactions", json=rows)


class ReportsApi:
    def __init__(self, client: ApiClient):
        self.client = client

    def dashboard(self) -> DashboardReport:
        return parse_body(DashboardReport, self.client.get("/reports/dashboard") or {}, "/reports/dashboard")

    def balance_sheet(self) -> BalanceSheet:
        return parse_body(BalanceSheet, self.client.get("/reports/balance-sheet") or {}, "/reports/balance-sheet")

    def income_expense(
        self,
        start_date: Optional[dt.date] = None,
        end_date: Optional[dt.date] = None,
    ) -> IncomeExpenseReport:
        body = self.client.get(
            "/reports/income-expense",
            params={"start_date": _iso(start_date), "end_date": _iso(end_date)},
        )
        return parse_body(IncomeExpenseReport, body or {}, "/reports/income-expense")

    def tax_summary(self, financial_year: str) -> TaxSummary:
        body = self.client.get("/reports/tax-summary", params={"financial_year": financial_year})
        return parse_body(TaxSummary, body or {}, "/reports/tax-summary")


@dataclass(frozen=True)
class ExportFile:
    file_name: str
    content: bytes

    mime = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class ExportApi:
    def __init__(self, client: ApiClient):
        self.client = client

    def ca_report(self, financial_year: str) -> ExportFile:
        content = self.client.download("/export/ca-report", params={"financial_year": financial_year})
        return ExportFile(f"ledgeros_ca_report_{financial_year}.xlsx", content)

    def balance_sheet(self) -> ExportFile:
        return ExportFile("ledgeros_balance-sheet.xlsx", self.client.download("/export/balance-sheet"))

    def transactions(
        self,
        start_date: Optional[dt.date] = None,
        end_date: Optional[dt.date] = None,
    ) -> ExportFile:
        content = self.client.download(
            "/export/transactions",
            params={"start_date": _iso(start_date), "end_date": _iso(end_date)},
        )
        return ExportFile("ledgeros_transactions.xlsx", content)


class LedgerApi:
    """Every endpoint group, bound to one client."""

    def __init__(self, client: ApiClient):
        self.client = client
        self.auth = AuthApi(client)
        self.accounts: Resource[Account] = Resource(client, "accounts", Account)
        self.categories = CategoryResource(client, "categories", Category)
        self.loans = LoanResource(client, "loans", Loan)
        self.investment_holdings = HoldingResource(client, "investment-holdings", InvestmentHolding)
        self.bank_accounts: Resource[BankAccount] = Resource(client, "bank-accounts", BankAccount)
        self.credit_cards: Resource[CreditCard] = Resource(client, "credit-cards", CreditCard)
        self.fixed_deposits: Resource[FixedDeposit] = Resource(client, "fixed-deposits", FixedDeposit)
        self.gold_holdings: Resource[GoldHolding] = Resource(client, "gold-holdings", GoldHolding)
        self.gov_schemes: Resource[GovScheme] = Resource(client, "gov-schemes", GovScheme)
        self.real_estate: Resource[RealEstate] = Resource(client, "real-estate", RealEstate)
        self.profiles: Resource[Profile] = Resource(client, "profiles", Profile)
        self.tax_deductions: Resource[TaxDeduction] = Resource(client, "tax-deductions", TaxDeduction)
        self.transactions = TransactionResource(client, "transactions", Transaction)
        self.upload = UploadApi(client)
        self.reports = ReportsApi(client)
        self.export = ExportApi(client)
