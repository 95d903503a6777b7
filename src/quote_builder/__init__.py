"""Quotation builder: section consolidation, totals and quotation copies."""

from __future__ import annotations

from quote_builder.copying import copy_to_builder
from quote_builder.domain_models import LineItem, QuotationRecord
from quote_builder.errors import (
    CopyError,
    QuotationNotFoundError,
    QuotationValidationError,
    QuoteBuilderError,
    StoreError,
)
from quote_builder.numbering import next_doc_no
from quote_builder.pricing import all_section_totals, grand_totals, section_total
from quote_builder.sections import consolidate, group_by_section
from quote_builder.validation import ValidationResult, validate_for_copy

__version__ = "0.1.0"

__all__ = [
    "CopyError",
    "LineItem",
    "QuotationNotFoundError",
    "QuotationRecord",
    "QuotationValidationError",
    "QuoteBuilderError",
    "StoreError",
    "ValidationResult",
    "all_section_totals",
    "consolidate",
    "copy_to_builder",
    "grand_totals",
    "group_by_section",
    "next_doc_no",
    "section_total",
    "validate_for_copy",
]
