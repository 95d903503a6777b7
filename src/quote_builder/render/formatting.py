"""Formatting helpers for quotation output."""

from __future__ import annotations

import re
import unicodedata
from datetime import date, datetime
from typing import Any

from quote_builder.domain_models import number_or_zero

_CONTROL_CHAR_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_ANSI_ESCAPE_RE = re.compile(r"\x1B\[[0-?]*[ -/]*[@-~]")


def sanitize_text(value: Any) -> str:
    """Return ``value`` as printable single-line-safe text."""

    if value is None:
        return ""
    text = str(value)
    if not text:
        return ""
    text = text.replace("\t", " ").replace("\r", "")
    text = _ANSI_ESCAPE_RE.sub("", text)
    text = unicodedata.normalize("NFC", text)
    return _CONTROL_CHAR_RE.sub("", text)


def _group_indian(digits: str) -> str:
    """Group integer digits as lakhs and crores: ``1500000`` -> ``15,00,000``."""

    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def fmt_money(value: Any, currency: str) -> str:
    """Return *value* as a two-decimal amount with Indian digit grouping."""

    amount = number_or_zero(value)
    text = f"{abs(amount):.2f}"
    whole, fraction = text.split(".")
    sign = "-" if amount < 0 and text != "0.00" else ""
    prefix = f"{currency} " if currency else ""
    return f"{prefix}{sign}{_group_indian(whole)}.{fraction}"


def fmt_quantity(value: Any) -> str:
    numeric = number_or_zero(value)
    text = f"{numeric:.3f}".rstrip("0").rstrip(".")
    return text or "0"


def fmt_percent(value: Any) -> str:
    """Render a whole-number percent setting such as ``18`` as ``18%``."""

    numeric = number_or_zero(value)
    text = f"{numeric:.2f}".rstrip("0").rstrip(".")
    return f"{text or '0'}%"


def _parse_day(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def describe_age(value: Any, today: date | None = None) -> str:
    """Return ``"Today"``, ``"1 day ago"`` or ``"N days ago"`` for a stored date."""

    day = _parse_day(value)
    if day is None:
        return "N/A"
    reference = today or date.today()
    days = abs((reference - day).days)
    if days == 0:
        return "Today"
    if days == 1:
        return "1 day ago"
    return f"{days} days ago"


__all__ = [
    "describe_age",
    "fmt_money",
    "fmt_percent",
    "fmt_quantity",
    "sanitize_text",
]
