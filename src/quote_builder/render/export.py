"""File exports for quotations: paginated text and item spreadsheets."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pandas as pd

from quote_builder.config import get_logger
from quote_builder.domain_models import QuotationRecord, item_field, number_or_zero, text_or_empty
from quote_builder.errors import QuoteBuilderError
from quote_builder.pricing import line_amount, totals_for_record
from quote_builder.pricing.totals import ACTUAL_RATE
from quote_builder.sections import consolidate, section_of

from .document import QuoteDocument, build_document

logger = get_logger("export")

CLIENT_COLUMNS = [
    "section",
    "name",
    "description",
    "unit",
    "qty",
    "rateClient",
    "amount",
    "remark",
]
STAFF_COLUMNS = CLIENT_COLUMNS[:7] + ["rateActual", "actualAmount"] + CLIENT_COLUMNS[7:]


def _rows_of(record: Mapping[str, Any] | QuotationRecord) -> list[Any]:
    rows = item_field(record, "rows")
    return list(rows) if isinstance(rows, (list, tuple)) else []


def items_frame(record: Mapping[str, Any] | QuotationRecord, *, staff_mode: bool = False) -> pd.DataFrame:
    """Return the consolidated line items of ``record`` as a DataFrame.

    The ``section`` column holds the canonical label, so blank sections read
    ``"General"`` as they do in the rendered document.
    """

    records = []
    for item in consolidate(_rows_of(record)):
        records.append(
            {
                "section": section_of(item),
                "name": text_or_empty(item_field(item, "name")),
                "description": text_or_empty(item_field(item, "description")),
                "unit": text_or_empty(item_field(item, "unit")),
                "qty": number_or_zero(item_field(item, "qty")),
                "rateClient": number_or_zero(item_field(item, "rateClient")),
                "amount": line_amount(item),
                "rateActual": number_or_zero(item_field(item, "rateActual")),
                "actualAmount": line_amount(item, ACTUAL_RATE),
                "remark": text_or_empty(item_field(item, "remark")),
            }
        )
    columns = STAFF_COLUMNS if staff_mode else CLIENT_COLUMNS
    return pd.DataFrame(records, columns=columns)


def _destination(directory: str | Path, stem: str, suffix: str) -> Path:
    target = Path(directory)
    try:
        target.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise QuoteBuilderError(f"Unable to create export directory {target}", exc) from exc
    return target / f"{stem}{suffix}"


def export_csv(
    record: Mapping[str, Any] | QuotationRecord,
    directory: str | Path,
    *,
    staff_mode: bool = False,
) -> Path:
    frame = items_frame(record, staff_mode=staff_mode)
    stem = text_or_empty(item_field(record, "docNo")) or "Quotation"
    path = _destination(directory, stem, ".csv")
    frame.to_csv(path, index=False)
    logger.info("Exported %d items to %s", len(frame), path)
    return path


def export_text(
    record: Mapping[str, Any] | QuotationRecord,
    directory: str | Path,
    *,
    staff_mode: bool = False,
    currency: str = "",
) -> Path:
    document: QuoteDocument = build_document(record, staff_mode=staff_mode, currency=currency)
    path = _destination(directory, document.filename_stem, ".txt")
    try:
        path.write_text(document.to_text(), encoding="utf-8")
    except OSError as exc:
        raise QuoteBuilderError(f"Unable to write {path}", exc) from exc
    logger.info("Exported %d pages to %s", document.page_count, path)
    return path


def quotations_frame(documents: list[Mapping[str, Any]]) -> pd.DataFrame:
    """Summarise stored quotations (number, client, project, total, last update)."""

    summary = [
        {
            "docNo": text_or_empty(doc.get("docNo") or doc.get("id")),
            "date": text_or_empty(doc.get("date")),
            "clientName": text_or_empty(doc.get("clientName")),
            "projectTitle": text_or_empty(doc.get("projectTitle")),
            "items": len(_rows_of(doc)),
            "clientGrand": round(totals_for_record(doc).client_grand, 2),
            "updatedAt": text_or_empty(doc.get("updatedAt")),
        }
        for doc in documents
    ]
    return pd.DataFrame(
        summary,
        columns=["docNo", "date", "clientName", "projectTitle", "items", "clientGrand", "updatedAt"],
    )


__all__ = [
    "CLIENT_COLUMNS",
    "STAFF_COLUMNS",
    "export_csv",
    "export_text",
    "items_frame",
    "quotations_frame",
]
