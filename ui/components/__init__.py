"""UI components module."""
from .confirm import render_confirm
from .filter_bar import render_filter_bar
from .notifications import render_notifications
from .record_form import render_record_form
from .sidebar import render_sidebar
from .tag_dialog import render_tag_dialog
from .upload_form import render_upload_form

__all__ = [
    "render_confirm",
    "render_filter_bar",
    "render_notifications",
    "render_record_form",
    "render_sidebar",
    "render_tag_dialog",
    "render_upload_form",
]
