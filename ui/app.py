"""LedgerOS - Main Streamlit application entry point."""
from __future__ import annotations
from pathlib import Path
import sys
import streamlit as st

# Ensure project root is on sys.path for absolute imports
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from api.auth import bootstrap
from core.logger import get_logger
from ui.components import render_notifications, render_sidebar
from ui.config import setup_page
from ui.pages import ROUTES
from ui.services.session_manager import HOME_PAGE, LOGIN_PAGE, SessionManager

log = get_logger("ui")

# Configure page
setup_page()

session = SessionManager.get_session()
if not SessionManager.is_bootstrapped():
    with st.spinner("Connecting to LedgerOS…"):
        bootstrap(SessionManager.get_ledger().auth)
    SessionManager.mark_bootstrapped()

# Session gate: nothing but setup/login until a token is held
if session.setup_required or not session.is_authenticated:
    if SessionManager.get_page() != LOGIN_PAGE:
        SessionManager.set_page(LOGIN_PAGE)
    ROUTES[LOGIN_PAGE]()
else:
    page = SessionManager.get_page()
    if page == LOGIN_PAGE or page not in ROUTES:
        SessionManager.set_page(HOME_PAGE)
        page = HOME_PAGE
    render_sidebar()
    ROUTES[page]()

render_notifications(SessionManager.get_notifier())
