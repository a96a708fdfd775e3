"""Two-step confirmation prompt."""
from __future__ import annotations
from typing import Optional
import streamlit as st

from ui.services.session_manager import SessionManager


def render_confirm(key: str, prompt: str) -> Optional[bool]:
    """
    Show a pending confirmation.

    Returns:
        True or False once answered, None while nothing is pending or unanswered
    """
    if SessionManager.pending_confirm(key) is None:
        return None
    st.warning(prompt)
    col1, col2 = st.columns(2)
    with col1:
        yes = st.button("Yes, continue", key=f"{key}_yes", type="primary")
    with col2:
        no = st.button("Cancel", key=f"{key}_no")
    if yes or no:
        SessionManager.clear_confirm(key)
        return bool(yes)
    return None
