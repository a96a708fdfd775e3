"""UI services module."""
from .crud import CrudController, FetchGuard, FieldSpec, FormState
from .entries import EntryDraft, TransactionBook, TransactionFilters, record_entry
from .import_workflow import ImportState, StatementImport, TagDraft
from .notifier import Notification, Notifier

__all__ = [
    "CrudController",
    "FetchGuard",
    "FieldSpec",
    "FormState",
    "EntryDraft",
    "TransactionBook",
    "TransactionFilters",
    "record_entry",
    "ImportState",
    "StatementImport",
    "TagDraft",
    "Notification",
    "Notifier",
]
