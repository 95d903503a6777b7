"""Domain model containers and value utilities."""

from .quotation import (
    Clock,
    DEFAULT_DISCOUNT_PCT,
    DEFAULT_HANDLING_PCT,
    DEFAULT_SECTION,
    DEFAULT_TAX_PCT,
    DEFAULT_TERMS,
    LineItem,
    QuotationRecord,
    item_field,
    iso_date,
    iso_timestamp,
    new_quotation,
    utc_now,
)
from .values import (
    coerce_float_or_none,
    is_blank,
    number_or_zero,
    text_or_empty,
    to_int,
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
    "coerce_float_or_none",
    "is_blank",
    "item_field",
    "iso_date",
    "iso_timestamp",
    "new_quotation",
    "number_or_zero",
    "text_or_empty",
    "to_int",
    "utc_now",
]
