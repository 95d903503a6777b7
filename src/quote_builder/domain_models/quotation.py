"""Quotation record containers shared by the builder, store and renderers."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Any, Callable

from .values import text_or_empty

DEFAULT_SECTION = "General"
DEFAULT_DISCOUNT_PCT = 0
DEFAULT_HANDLING_PCT = 10
DEFAULT_TAX_PCT = 18
DEFAULT_TERMS = (
    "1. 30% advance upon order confirmation.\n"
    "2. Balance as per progress milestones.\n"
    "3. Delivery and installation as per schedule.\n"
    "4. All materials are of approved quality."
)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso_timestamp(moment: datetime) -> str:
    """Return ``moment`` as an ISO-8601 UTC timestamp with millisecond precision."""

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def iso_date(moment: datetime) -> str:
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.date().isoformat()


def item_field(item: Any, name: str, default: Any = None) -> Any:
    """Read ``name`` from a :class:`LineItem` or a mapping-shaped item."""

    if item is None:
        return default
    getter = getattr(item, "get", None)
    if callable(getter):
        return getter(name, default)
    return getattr(item, name, default)


# Keys used on the wire and in the document store.
_ITEM_KEYS = {
    "section": "section",
    "name": "name",
    "description": "description",
    "unit": "unit",
    "qty": "qty",
    "rate_client": "rateClient",
    "rate_actual": "rateActual",
    "remark": "remark",
}

_RECORD_KEYS = {
    "doc_no": "docNo",
    "date": "date",
    "client_name": "clientName",
    "location": "location",
    "project_title": "projectTitle",
    "discount": "discount",
    "handling": "handling",
    "tax": "tax",
    "terms": "terms",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
}


@dataclass
class LineItem:
    """One priced row of a quotation.

    Numeric fields hold whatever the editing surface supplied; totals and
    copies coerce them through :func:`~quote_builder.domain_models.values.number_or_zero`.
    """

    section: str | None = ""
    name: str = ""
    description: str = ""
    unit: str = ""
    qty: Any = 0
    rate_client: Any = 0
    rate_actual: Any = 0
    remark: str = ""

    # Mapping-style access so items can flow through code written against
    # stored documents.
    def get(self, key: str, default: Any = None) -> Any:
        for attr, wire in _ITEM_KEYS.items():
            if key in (attr, wire):
                return getattr(self, attr)
        return default

    def to_dict(self) -> dict[str, Any]:
        return {wire: copy.deepcopy(getattr(self, attr)) for attr, wire in _ITEM_KEYS.items()}

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any] | "LineItem" | None) -> "LineItem":
        if raw is None:
            return cls()
        if isinstance(raw, LineItem):
            return copy.deepcopy(raw)
        if not isinstance(raw, Mapping):
            raise TypeError("LineItem.from_dict expects a mapping of field values")
        kwargs: dict[str, Any] = {}
        for attr, wire in _ITEM_KEYS.items():
            if wire in raw:
                kwargs[attr] = copy.deepcopy(raw[wire])
            elif attr in raw:
                kwargs[attr] = copy.deepcopy(raw[attr])
        return cls(**kwargs)


@dataclass
class QuotationRecord:
    """A client quotation: header details, pricing settings and line items."""

    doc_no: str = ""
    date: str = ""
    client_name: str = ""
    location: str = ""
    project_title: str = ""
    discount: Any = DEFAULT_DISCOUNT_PCT
    handling: Any = DEFAULT_HANDLING_PCT
    tax: Any = DEFAULT_TAX_PCT
    terms: str = DEFAULT_TERMS
    rows: list[LineItem] = field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""

    def get(self, key: str, default: Any = None) -> Any:
        if key == "rows":
            return self.rows
        for attr, wire in _RECORD_KEYS.items():
            if key in (attr, wire):
                return getattr(self, attr)
        return default

    def to_dict(self) -> dict[str, Any]:
        """Serialise the record to the camelCase document shape."""

        data: dict[str, Any] = {}
        for entry in fields(self):
            if entry.name == "rows":
                data["rows"] = [
                    item.to_dict() if isinstance(item, LineItem) else LineItem.from_dict(item).to_dict()
                    for item in self.rows
                ]
                continue
            data[_RECORD_KEYS[entry.name]] = copy.deepcopy(getattr(self, entry.name))
        return data

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any] | "QuotationRecord" | None) -> "QuotationRecord":
        """Construct a record from a stored document; unknown keys are ignored."""

        if raw is None:
            return cls()
        if isinstance(raw, QuotationRecord):
            return copy.deepcopy(raw)
        if not isinstance(raw, Mapping):
            raise TypeError("QuotationRecord.from_dict expects a mapping of field values")

        kwargs: dict[str, Any] = {}
        for attr, wire in _RECORD_KEYS.items():
            if wire in raw:
                value = raw[wire]
            elif attr in raw:
                value = raw[attr]
            else:
                continue
            if attr in ("discount", "handling", "tax"):
                kwargs[attr] = copy.deepcopy(value)
            else:
                kwargs[attr] = text_or_empty(value)

        rows = raw.get("rows")
        if isinstance(rows, (list, tuple)):
            kwargs["rows"] = [LineItem.from_dict(item) for item in rows]
        return cls(**kwargs)


def new_quotation(doc_no: str, *, clock: Clock = utc_now) -> QuotationRecord:
    """Return a blank builder record carrying the default pricing settings."""

    moment = clock()
    stamp = iso_timestamp(moment)
    return QuotationRecord(
        doc_no=doc_no,
        date=iso_date(moment),
        created_at=stamp,
        updated_at=stamp,
    )


__all__ = [
    "Clock",
    "DEFAULT_DISCOUNT_PCT",
    "DEFAULT_HANDLING_PCT",
    "DEFAULT_SECTION",
    "DEFAULT_TAX_PCT",
    "DEFAULT_TERMS",
    "LineItem",
    "QuotationRecord",
    "item_field",
    "iso_date",
    "iso_timestamp",
    "new_quotation",
    "utc_now",
]
