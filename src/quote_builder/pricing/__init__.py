"""Pricing helpers for quotation totals."""

from .totals import (
    PricingLadder,
    QuoteTotals,
    all_section_totals,
    compute_pricing_ladder,
    grand_totals,
    line_amount,
    roughly_equal,
    section_total,
    totals_for_record,
)

__all__ = [
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
