"""UI pages module."""
from __future__ import annotations
from functools import partial
from typing import Callable, Dict

from . import (
    add_entry_page,
    bank_upload_page,
    ca_export_page,
    categories_page,
    crud_page,
    dashboard_page,
    loans_page,
    login_page,
    portfolio_page,
    reports_page,
    settings_page,
    tax_planning_page,
    transactions_page,
)

ROUTES: Dict[str, Callable[[], None]] = {
    "login": login_page.render,
    "dashboard": dashboard_page.render,
    "add_entry": add_entry_page.render,
    "transactions": transactions_page.render,
    "bank_upload": bank_upload_page.render,
    "categories": categories_page.render,
    "loans": loans_page.render,
    "portfolio": portfolio_page.render,
    "tax_planning": tax_planning_page.render,
    "reports": reports_page.render,
    "ca_export": ca_export_page.render,
    "settings": settings_page.render,
}

for _key in ("accounts", "bank_accounts", "credit_cards", "fixed_deposits", "gold", "gov_schemes", "real_estate", "profiles", "tax_deductions"):
    ROUTES[_key] = partial(crud_page.render, _key)

__all__ = ["ROUTES"]
