"""Sidebar component."""
from __future__ import annotations
from typing import Dict, List, Tuple
import streamlit as st

from ui.services.session_manager import SessionManager

# (key, label) per navigation section
NAVIGATION: Dict[str, List[Tuple[str, str]]] = {
    "Overview": [
        ("dashboard", "📊 Dashboard"),
        ("add_entry", "➕ Add Entry"),
        ("transactions", "📒 Transactions"),
        ("bank_upload", "📥 Bank Upload"),
    ],
    "Ledgers": [
        ("accounts", "🏦 Accounts & Ledgers"),
        ("categories", "🏷️ Categories"),
        ("loans", "🤝 Loans"),
    ],
    "Assets": [
        ("bank_accounts", "🏛️ Bank Accounts"),
        ("credit_cards", "💳 Credit Cards"),
        ("fixed_deposits", "🔒 Fixed Deposits"),
        ("gold", "🪙 Gold"),
        ("gov_schemes", "🛡️ Government Schemes"),
        ("real_estate", "🏠 Real Estate"),
        ("portfolio", "📈 Portfolio"),
    ],
    "Tax & Reports": [
        ("tax_planning", "🧮 Tax Planning"),
        ("tax_deductions", "🧾 Tax Deductions"),
        ("reports", "📑 Reports"),
        ("ca_export", "📤 CA Export"),
    ],
    "Account": [
        ("profiles", "👤 Profiles"),
        ("settings", "⚙️ Settings"),
    ],
}


def render_sidebar() -> None:
    """Render section navigation and the logout button."""
    current = SessionManager.get_page()
    with st.sidebar:
        st.caption("**LedgerOS** · Personal Finance Ledger")
        for section, entries in NAVIGATION.items():
            st.markdown(f"**{section}**")
            for key, label in entries:
                if st.button(label, key=f"nav_{key}", use_container_width=True, disabled=key == current):
                    SessionManager.set_page(key)
                    st.rerun()

        st.divider()
        if st.button("🚪 Logout", use_container_width=True):
            SessionManager.end_session()
            st.rerun()
