"""Section subtotals and the layered discount/handling/tax ladder."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from quote_builder.config import get_logger
from quote_builder.domain_models import item_field, number_or_zero
from quote_builder.sections import group_by_section

logger = get_logger("pricing")

CLIENT_RATE = "rateClient"
ACTUAL_RATE = "rateActual"


def line_amount(item: Any, rate_field: str = CLIENT_RATE) -> float:
    """Return ``qty * rate`` for one item with missing numbers read as zero."""

    qty = number_or_zero(item_field(item, "qty"))
    rate = number_or_zero(item_field(item, rate_field))
    return qty * rate


def _subtotal(items: Sequence[Any] | None, rate_field: str) -> float:
    if not isinstance(items, Sequence) or isinstance(items, (str, bytes)):
        return 0.0
    return sum((line_amount(item, rate_field) for item in items), 0.0)


def section_total(items: Sequence[Any] | None) -> float:
    """Client-track subtotal for ``items`` (any slice, not only one section)."""

    return _subtotal(items, CLIENT_RATE)


def all_section_totals(items: Sequence[Any] | None) -> dict[str, float]:
    """Map each canonical section to its client-track subtotal."""

    return {label: section_total(group) for label, group in group_by_section(items).items()}


@dataclass(frozen=True)
class PricingLadder:
    """Cumulative amounts for one price track."""

    subtotal: float
    discount: float
    after_discount: float
    handling: float
    pretax: float
    tax: float
    grand: float


def compute_pricing_ladder(
    subtotal: Any,
    *,
    discount_pct: Any = 0.0,
    handling_pct: Any = 0.0,
    tax_pct: Any = 0.0,
) -> PricingLadder:
    """Apply discount, then handling surcharge, then tax to ``subtotal``.

    Percentages are whole-number percents (``18`` means 18%).
    """

    base = number_or_zero(subtotal)
    discount = base * number_or_zero(discount_pct) / 100
    after_discount = base - discount
    handling = after_discount * number_or_zero(handling_pct) / 100
    pretax = after_discount + handling
    tax = pretax * number_or_zero(tax_pct) / 100
    return PricingLadder(
        subtotal=base,
        discount=discount,
        after_discount=after_discount,
        handling=handling,
        pretax=pretax,
        tax=tax,
        grand=pretax + tax,
    )


@dataclass(frozen=True)
class QuoteTotals:
    """Client and actual (internal cost) totals for a quotation."""

    client: PricingLadder
    actual: PricingLadder

    @property
    def client_subtotal(self) -> float:
        return self.client.subtotal

    @property
    def actual_subtotal(self) -> float:
        return self.actual.subtotal

    @property
    def client_discount(self) -> float:
        return self.client.discount

    @property
    def actual_discount(self) -> float:
        return self.actual.discount

    @property
    def client_handling(self) -> float:
        return self.client.handling

    @property
    def actual_handling(self) -> float:
        return self.actual.handling

    @property
    def client_pretax(self) -> float:
        return self.client.pretax

    @property
    def actual_pretax(self) -> float:
        return self.actual.pretax

    @property
    def client_tax(self) -> float:
        return self.client.tax

    @property
    def actual_tax(self) -> float:
        return self.actual.tax

    @property
    def client_grand(self) -> float:
        return self.client.grand

    @property
    def actual_grand(self) -> float:
        return self.actual.grand

    @property
    def profit(self) -> float:
        return self.client.grand - self.actual.grand

    def as_dict(self) -> dict[str, float]:
        return {
            "clientSubtotal": self.client_subtotal,
            "actualSubtotal": self.actual_subtotal,
            "clientPretax": self.client_pretax,
            "actualPretax": self.actual_pretax,
            "clientTax": self.client_tax,
            "actualTax": self.actual_tax,
            "clientGrand": self.client_grand,
            "actualGrand": self.actual_grand,
            "profit": self.profit,
        }


def grand_totals(
    items: Sequence[Any] | None,
    discount_pct: Any = 0.0,
    handling_pct: Any = 0.0,
    tax_pct: Any = 0.0,
) -> QuoteTotals:
    """Run the client and actual price tracks over the same items."""

    percents = {
        "discount_pct": discount_pct,
        "handling_pct": handling_pct,
        "tax_pct": tax_pct,
    }
    totals = QuoteTotals(
        client=compute_pricing_ladder(_subtotal(items, CLIENT_RATE), **percents),
        actual=compute_pricing_ladder(_subtotal(items, ACTUAL_RATE), **percents),
    )
    logger.debug(
        "Totals: client %.2f actual %.2f profit %.2f",
        totals.client_grand,
        totals.actual_grand,
        totals.profit,
    )
    return totals


def totals_for_record(record: Any) -> QuoteTotals:
    """Compute :func:`grand_totals` from a record's rows and percent settings."""

    return grand_totals(
        item_field(record, "rows"),
        item_field(record, "discount"),
        item_field(record, "handling"),
        item_field(record, "tax"),
    )


def roughly_equal(a: Any, b: Any, *, eps: float = 0.01) -> bool:
    """Return True when *a* and *b* agree within ``eps`` currency units."""

    return abs(number_or_zero(a) - number_or_zero(b)) <= eps


__all__ = [
    "ACTUAL_RATE",
    "CLIENT_RATE",
    "PricingLadder",
    "QuoteTotals",
    "all_section_totals",
    "compute_pricing_ladder",
    "grand_totals",
    "line_amount",
    "roughly_equal",
    "section_total",
    "totals_for_record",
]
