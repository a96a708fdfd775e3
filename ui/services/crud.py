"""Generic controller behind every list-and-dialog page."""
from __future__ import annotations
import itertools
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, List, Literal, Mapping, Optional, Sequence, TypeVar

from api.resources import Resource
from core.errors import LedgerError
from core.logger import get_logger
from core.utils import coerce_number, number_or_zero, number_text
from models.schema import Transaction
from ui.services.notifier import Notifier

log = get_logger("ui/services/crud")

R = TypeVar("R")

FieldKind = Literal["text", "number", "integer", "select", "date", "bool", "textarea"]


@dataclass(frozen=True)
class FieldSpec:
    name: str
    label: str
    kind: FieldKind = "text"
    default: Any = ""
    options: Sequence[str] = ()
    required: bool = False


class FetchGuard:
    """
    Sequence numbers for fetches of one collection.

    Only the response to the most recently issued fetch may be applied, so
    a slow early response cannot overwrite a newer one.
    """

    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self._latest = 0
        self._lock = threading.Lock()

    def issue(self) -> int:
        with self._lock:
            self._latest = next(self._counter)
            return self._latest

    def is_current(self, ticket: int) -> bool:
        return ticket == self._latest

    def invalidate(self) -> None:
        """Make every outstanding ticket stale (page left)."""
        self.issue()


@dataclass
class FormState:
    """An open create/edit dialog. Values are kept as typed, numbers as text."""

    values: Dict[str, Any]
    editing_id: Optional[str] = None
    errors: List[str] = field(default_factory=list)

    @property
    def is_edit(self) -> bool:
        return self.editing_id is not None

    def set(self, name: str, value: Any) -> None:
        self.values[name] = value


class CrudController(Generic[R]):
    """
    Fetch, render, mutate, refetch.

    No optimistic updates: every successful mutation is followed by a full
    refetch, and the last applied fetch is what the page shows.
    """

    def __init__(
        self,
        resource: Resource,
        notifier: Notifier,
        fields: Sequence[FieldSpec],
        entity_label: str,
        to_payload: Optional[Callable[[Dict[str, Any]], Dict[str, Any]]] = None,
        drill_in_filter: Optional[str] = None,
        recent_limit: int = 100,
    ):
        self.resource = resource
        self.notifier = notifier
        self.fields = list(fields)
        self.entity_label = entity_label
        self._to_payload = to_payload
        self.drill_in_filter = drill_in_filter
        self.recent_limit = recent_limit
        self.items: List[R] = []
        self.loaded = False
        self.form: Optional[FormState] = None
        self.detail_id: Optional[str] = None
        self.detail_transactions: List[Transaction] = []
        self._guard = FetchGuard()

    # Reads

    def refresh(self) -> bool:
        ticket = self._guard.issue()
        try:
            items = self.resource.list()
        except LedgerError as e:
            self.notifier.report(e, f"Failed to load {self.entity_label}s")
            return False
        return self.apply_fetch(ticket, items)

    def apply_fetch(self, ticket: int, items: List[R]) -> bool:
        if not self._guard.is_current(ticket):
            log.debug(f"Dropping stale {self.entity_label} fetch #{ticket}")
            return False
        self.items = list(items)
        self.loaded = True
        return True

    def leave(self) -> None:
        """Forget in-flight fetches when the page is navigated away from."""
        self._guard.invalidate()

    def get(self, record_id: str) -> Optional[R]:
        return next((r for r in self.items if getattr(r, "id", None) == record_id), None)

    def filtered(self, **equals: Any) -> List[R]:
        """Items whose attributes equal the given values; "all" and None match anything."""
        active = {k: v for k, v in equals.items() if v not in (None, "all")}
        return [r for r in self.items if all(getattr(r, k, None) == v for k, v in active.items())]

    def grouped(self, key: str, items: Optional[List[R]] = None) -> Dict[Any, List[R]]:
        groups: Dict[Any, List[R]] = {}
        for item in self.items if items is None else items:
            groups.setdefault(getattr(item, key, None), []).append(item)
        return groups

    # Dialog

    def open_create(self, **overrides: Any) -> FormState:
        values = {f.name: f.default for f in self.fields}
        values.update(overrides)
        self.form = FormState(values=values)
        return self.form

    def open_edit(self, record: R) -> FormState:
        values: Dict[str, Any] = {}
        for spec in self.fields:
            value = getattr(record, spec.name, spec.default)
            if spec.kind in ("number", "integer"):
                value = number_text(value)
            elif value is None:
                value = spec.default
            values[spec.name] = value
        self.form = FormState(values=values, editing_id=getattr(record, "id"))
        return self.form

    def close_form(self) -> None:
        self.form = None

    def payload(self, form: FormState) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for spec in self.fields:
            value = form.values.get(spec.name, spec.default)
            if spec.kind == "number":
                value = number_or_zero(value)
            elif spec.kind == "integer":
                number = coerce_number(value)
                value = int(number) if number is not None else None
            elif spec.kind == "date":
                value = value.isoformat() if hasattr(value, "isoformat") else (value or None)
            elif spec.kind == "bool":
                value = bool(value)
            data[spec.name] = value
        if self._to_payload:
            data = self._to_payload(data)
        return data

    def validate(self, form: FormState) -> List[str]:
        missing = []
        for spec in self.fields:
            value = form.values.get(spec.name)
            if spec.required and (value is None or (isinstance(value, str) and not value.strip())):
                missing.append(f"{spec.label} is required")
        return missing

    def submit(self, form: Optional[FormState] = None) -> bool:
        """
        Create or update from the dialog.

        On failure the dialog stays open with the user's values untouched.
        """
        form = form or self.form
        if form is None:
            return False

        form.errors = self.validate(form)
        if form.errors:
            self.notifier.error(form.errors[0])
            return False

        data = self.payload(form)
        label = self.entity_label.capitalize()
        try:
            if form.is_edit:
                self.resource.update(form.editing_id, data)
                self.notifier.success(f"{label} updated")
            else:
                self.resource.create(data)
                self.notifier.success(f"{label} created")
        except LedgerError as e:
            self.notifier.report(e, f"Failed to save {self.entity_label}")
            return False

        self.form = None
        self.refresh()
        return True

    def delete(self, record_id: str, confirmed: bool) -> bool:
        """Delete after explicit confirmation; a declined prompt issues no call."""
        if not confirmed:
            log.debug(f"Delete of {self.entity_label} {record_id} cancelled")
            return False
        try:
            self.resource.delete(record_id)
        except LedgerError as e:
            self.notifier.report(e, f"Failed to delete {self.entity_label}")
            return False
        self.notifier.success(f"{self.entity_label.capitalize()} deleted")
        if self.detail_id == record_id:
            self.close_detail()
        self.refresh()
        return True

    # Drill-in

    def open_detail(self, record_id: str, transactions: Any) -> List[Transaction]:
        """
        Fetch the latest transactions for one record, on demand.

        Args:
            record_id: Entity whose transactions to show
            transactions: The transactions resource to query
        """
        if not self.drill_in_filter:
            raise ValueError(f"{self.entity_label} pages have no transaction drill-in")
        self.detail_id = record_id
        self.detail_transactions = []
        filters: Mapping[str, Any] = {self.drill_in_filter: record_id, "limit": self.recent_limit}
        try:
            self.detail_transactions = transactions.list(**filters)
        except LedgerError as e:
            self.notifier.report(e, "Failed to load transactions")
        return self.detail_transactions

    def close_detail(self) -> None:
        self.detail_id = None
        self.detail_transactions = []
