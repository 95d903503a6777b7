"""Quotation document layout and pagination.

The body always lists items in consolidated order, one header per section,
so previews and exported files group items identically.  ``staff_mode``
adds the internal cost columns, the actual-cost totals and the profit line.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from quote_builder.config import get_logger, load_section
from quote_builder.domain_models import QuotationRecord, item_field, text_or_empty
from quote_builder.pricing import line_amount, section_total, totals_for_record
from quote_builder.pricing.totals import ACTUAL_RATE
from quote_builder.sections import section_runs

from .formatting import fmt_money, fmt_percent, fmt_quantity
from .writer import Column, QuoteWriter

logger = get_logger("render")

DEFAULT_PAGE_WIDTH = 96
DEFAULT_LINES_PER_PAGE = 56
FOOTER_LINES = 2
MIN_DESCRIPTION_WIDTH = 8


@dataclass
class QuoteDocument:
    """A paginated text rendition of one quotation."""

    doc_no: str
    pages: list[list[str]] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def to_text(self) -> str:
        """Join pages with form feeds, one trailing newline per page."""

        return "\f".join("\n".join(page) + "\n" for page in self.pages)

    @property
    def filename_stem(self) -> str:
        return self.doc_no or "Quotation"


def _record_dict(record: Mapping[str, Any] | QuotationRecord) -> dict[str, Any]:
    if isinstance(record, QuotationRecord):
        return record.to_dict()
    return dict(record)


def _item_columns(page_width: int, *, staff_mode: bool) -> list[Column]:
    fixed = [
        Column("#", 3, "right"),
        Column("Item", 18),
        Column("Unit", 6),
        Column("Qty", 8, "right"),
        Column("Rate", 12, "right"),
        Column("Amount", 14, "right"),
    ]
    if staff_mode:
        fixed += [Column("Actual Rate", 12, "right"), Column("Actual Amt", 14, "right")]
    used = sum(column.width for column in fixed) + len(fixed)
    description = Column("Description", max(MIN_DESCRIPTION_WIDTH, page_width - used))
    return fixed[:2] + [description] + fixed[2:]


def _render_body(
    record: Mapping[str, Any],
    *,
    staff_mode: bool,
    currency: str,
    page_width: int,
) -> tuple[list[str], list[str]]:
    writer = QuoteWriter(divider="=" * page_width, page_width=page_width, currency=currency)
    raw_rows = record.get("rows")
    rows = list(raw_rows) if isinstance(raw_rows, (list, tuple)) else []

    writer.kv("QUOTATION", f"No: {text_or_empty(record.get('docNo'))}")
    writer.kv("Date:", text_or_empty(record.get("date")))
    writer.line(f"Client: {text_or_empty(record.get('clientName'))}")
    writer.line(f"Location: {text_or_empty(record.get('location'))}")
    writer.line(f"Project: {text_or_empty(record.get('projectTitle'))}")
    writer.rule()

    columns = _item_columns(page_width, staff_mode=staff_mode)
    writer.table_header(columns)

    section_headers: list[str] = []
    number = 0
    for label, items in section_runs(rows):
        section_headers.append(label)
        writer.blank()
        writer.line(label)
        for item in items:
            number += 1
            values: list[Any] = [
                number,
                item_field(item, "name"),
                item_field(item, "description"),
                item_field(item, "unit"),
                fmt_quantity(item_field(item, "qty")),
                fmt_money(item_field(item, "rateClient"), ""),
                fmt_money(line_amount(item), ""),
            ]
            if staff_mode:
                values += [
                    fmt_money(item_field(item, "rateActual"), ""),
                    fmt_money(line_amount(item, ACTUAL_RATE), ""),
                ]
            writer.table_row(columns, values)
            remark = text_or_empty(item_field(item, "remark")).strip()
            if remark:
                writer.line(f"Remark: {remark}", indent="      ")
        writer.kv(f"Section total ({label}):", fmt_money(section_total(items), currency))

    totals = totals_for_record(record)
    writer.blank()
    writer.rule()
    writer.line("Totals")
    writer.row("Client Subtotal:", totals.client_subtotal)
    if staff_mode:
        writer.row("Actual Subtotal:", totals.actual_subtotal)
    writer.kv("Discount:", fmt_percent(record.get("discount")))
    writer.kv("Handling:", fmt_percent(record.get("handling")))
    writer.row("Pre-Tax (Client):", totals.client_pretax)
    if staff_mode:
        writer.row("Pre-Tax (Actual):", totals.actual_pretax)
    writer.row(f"GST {fmt_percent(record.get('tax'))} (Client):", totals.client_tax)
    if staff_mode:
        writer.row("GST (Actual):", totals.actual_tax)
    writer.row("Client Total:", totals.client_grand)
    if staff_mode:
        writer.row("Actual Total:", totals.actual_grand)
        writer.row("Profit:", totals.profit)

    terms = text_or_empty(record.get("terms")).strip()
    if terms:
        writer.blank()
        writer.line("Terms & Conditions")
        writer.wrapped(terms)

    return writer.lines, section_headers


def render_quotation(
    record: Mapping[str, Any] | QuotationRecord,
    *,
    staff_mode: bool = False,
    currency: str = "",
    page_width: int = DEFAULT_PAGE_WIDTH,
) -> list[str]:
    """Return the unpaginated body lines for ``record``."""

    lines, _ = _render_body(
        _record_dict(record), staff_mode=staff_mode, currency=currency, page_width=page_width
    )
    return lines


def duplicate_sections(headers: Sequence[str]) -> list[str]:
    return [label for label, count in Counter(headers).items() if count > 1]


def paginate(lines: Sequence[str], lines_per_page: int) -> list[list[str]]:
    """Split ``lines`` into pages of at most ``lines_per_page`` lines."""

    size = max(1, int(lines_per_page))
    pages = [list(lines[start : start + size]) for start in range(0, len(lines), size)]
    return pages or [[]]


class _Placeholders(dict):
    def __missing__(self, key: str) -> str:
        return ""


def _static_page(template: Any, record: Mapping[str, Any]) -> list[str]:
    if isinstance(template, str):
        template = [template]
    if not isinstance(template, Sequence):
        return []
    values = _Placeholders({key: text_or_empty(value) for key, value in record.items() if key != "rows"})
    return [str(line).format_map(values) for line in template]


def build_document(
    record: Mapping[str, Any] | QuotationRecord,
    *,
    staff_mode: bool = False,
    currency: str = "",
    page_width: int | None = None,
    lines_per_page: int | None = None,
    include_static_pages: bool = True,
) -> QuoteDocument:
    """Lay out ``record`` as cover pages, paginated body and a closing page."""

    settings = load_section("export")
    width = int(page_width or settings.get("page_width") or DEFAULT_PAGE_WIDTH)
    per_page = int(lines_per_page or settings.get("lines_per_page") or DEFAULT_LINES_PER_PAGE)
    data = _record_dict(record)

    body, headers = _render_body(data, staff_mode=staff_mode, currency=currency, page_width=width)
    for label in duplicate_sections(headers):
        logger.warning("Duplicate section header found in export: %s", label)

    pages: list[list[str]] = []
    if include_static_pages:
        for template in settings.get("cover_pages") or []:
            pages.append(_static_page(template, data))
    pages.extend(paginate(body, per_page - FOOTER_LINES))
    if include_static_pages and settings.get("closing_page"):
        pages.append(_static_page(settings["closing_page"], data))

    total = len(pages)
    for index, page in enumerate(pages, start=1):
        page.append("")
        page.append(f"Page {index} of {total}".rjust(width))

    doc_no = text_or_empty(data.get("docNo"))
    logger.debug("Built %d page document for %s", total, doc_no or "<unsaved>")
    return QuoteDocument(doc_no=doc_no, pages=pages)


__all__ = [
    "DEFAULT_LINES_PER_PAGE",
    "DEFAULT_PAGE_WIDTH",
    "QuoteDocument",
    "build_document",
    "duplicate_sections",
    "paginate",
    "render_quotation",
]
