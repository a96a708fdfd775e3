"""
Utility functions for common operations.

Provides helper functions for:
- File size formatting
- Currency formatting (Indian digit grouping)
- Free-text numeric field coercion
- Token masking and date arithmetic for display
"""
from __future__ import annotations
import math
from datetime import date, datetime
from typing import Any, Optional, Union

from core.logger import get_logger

log = get_logger("core/utils")

CURRENCY_SYMBOLS = {
    "INR": "₹",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
}

# Partial inputs a user passes through while typing a number
_INTERMEDIATE_NUMERIC = {"", "-", "+", ".", "-.", "+."}


def human_size(num_bytes: Union[int, float]) -> str:
    """
    Convert bytes to human-readable size format.

    Examples:
        >>> human_size(1024)
        "1.0 KB"
        >>> human_size(0)
        "0.0 B"
    """
    if not isinstance(num_bytes, (int, float)):
        log.warning(f"Invalid input type for human_size: {type(num_bytes)}")
        return "0.0 B"

    if num_bytes < 0:
        log.warning(f"Negative byte value: {num_bytes}")
        return "0.0 B"

    units = ["B", "KB", "MB", "GB", "TB", "PB"]
    size = float(num_bytes)
    idx = 0

    while size >= 1024 and idx < len(units) - 1:
        size /= 1024
        idx += 1

    return f"{size:.1f} {units[idx]}"


def _group_indian(integer_part: str) -> str:
    # Last three digits, then groups of two: 12,34,567
    if len(integer_part) <= 3:
        return integer_part
    head, tail = integer_part[:-3], integer_part[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_currency(
    amount: Union[int, float, None],
    currency: str = "INR",
    decimals: int = 2,
) -> str:
    """
    Format an amount for display.

    ``None`` is shown as zero. INR uses lakh/crore grouping, every other
    currency uses groups of three.

    Examples:
        >>> format_currency(123456.5)
        "₹1,23,456.50"
        >>> format_currency(-2000, decimals=0)
        "-₹2,000"
        >>> format_currency(1234.5, "USD")
        "$1,234.50"
    """
    value = float(amount or 0)
    code = (currency or "INR").upper().strip()
    symbol = CURRENCY_SYMBOLS.get(code, code)

    sign = "-" if value < 0 else ""
    formatted = f"{abs(value):.{decimals}f}"
    integer_part, _, fraction = formatted.partition(".")

    if code == "INR":
        grouped = _group_indian(integer_part)
    else:
        grouped = f"{int(integer_part):,}"

    return f"{sign}{symbol}{grouped}{'.' + fraction if fraction else ''}"


def coerce_number(text: Any) -> Optional[float]:
    """
    Parse a numeric form field without fighting the user's keystrokes.

    Returns the number once the text parses, otherwise None. Partial states
    such as ``"-"`` or ``"."`` are legal while typing and are not errors.

    Examples:
        >>> coerce_number("-2000")
        -2000.0
        >>> coerce_number("-") is None
        True
        >>> coerce_number("1,500.25")
        1500.25
    """
    if text is None:
        return None
    if isinstance(text, bool):
        return None
    if isinstance(text, (int, float)):
        value = float(text)
        return value if math.isfinite(value) else None

    cleaned = str(text).strip().replace(",", "")
    if cleaned in _INTERMEDIATE_NUMERIC:
        return None
    try:
        value = float(cleaned)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def number_or_zero(text: Any) -> float:
    """Submit-time coercion: anything that does not parse becomes 0."""
    value = coerce_number(text)
    return value if value is not None else 0.0


def number_text(value: Any) -> str:
    """Render a stored number as editable text ("" for missing values)."""
    if value is None or value == "":
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def mask_token(token: Optional[str]) -> str:
    """Short, log-safe representation of a session token."""
    if not token:
        return "<none>"
    return f"{token[:4]}…" if len(token) > 4 else "…"


def parse_date(value: Any) -> Optional[date]:
    """Accept ``date``, ``datetime`` or ISO strings; anything else is None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        log.debug(f"Unparseable date value: {value!r}")
        return None


def days_until(target: Any, today: Optional[date] = None) -> Optional[int]:
    """
    Whole days from ``today`` until ``target``; negative once it has passed.

    Examples:
        >>> days_until("2025-01-11", today=date(2025, 1, 1))
        10
    """
    target_date = parse_date(target)
    if target_date is None:
        return None
    return (target_date - (today or date.today())).days


def percent(part: float, whole: float) -> float:
    """``part`` as a percentage of ``whole``; 0 when ``whole`` is not positive."""
    if not whole or whole <= 0:
        return 0.0
    return part / whole * 100
