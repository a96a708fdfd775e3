"""Render queued notifications as toasts."""
from __future__ import annotations
import streamlit as st

from ui.services.notifier import Notifier

_ICONS = {"success": "✅", "info": "ℹ️", "warning": "⚠️", "error": "❌"}


def render_notifications(notifier: Notifier) -> None:
    for note in notifier.drain():
        st.toast(note.text, icon=_ICONS.get(note.level))
