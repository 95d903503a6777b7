"""Rendering and export of quotation documents."""

from __future__ import annotations

from .document import (
    QuoteDocument,
    build_document,
    duplicate_sections,
    paginate,
    render_quotation,
)
from .export import export_csv, export_text, items_frame, quotations_frame
from .formatting import describe_age, fmt_money, fmt_percent, fmt_quantity
from .writer import Column, QuoteWriter

__all__ = [
    "Column",
    "QuoteDocument",
    "QuoteWriter",
    "build_document",
    "describe_age",
    "duplicate_sections",
    "export_csv",
    "export_text",
    "fmt_money",
    "fmt_percent",
    "fmt_quantity",
    "items_frame",
    "paginate",
    "quotations_frame",
    "render_quotation",
]
