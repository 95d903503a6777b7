"""Copy an existing quotation into a fresh builder record."""

from __future__ import annotations

from typing import Any, Callable

from quote_builder.config import get_logger
from quote_builder.domain_models import (
    DEFAULT_DISCOUNT_PCT,
    DEFAULT_HANDLING_PCT,
    DEFAULT_TAX_PCT,
    DEFAULT_TERMS,
    Clock,
    LineItem,
    QuotationRecord,
    item_field,
    iso_date,
    iso_timestamp,
    number_or_zero,
    text_or_empty,
    utc_now,
)
from quote_builder.errors import CopyError, QuotationValidationError
from quote_builder.numbering import next_doc_no
from quote_builder.validation import validate_for_copy

logger = get_logger("copying")

_MAX_NUMBER_ATTEMPTS = 3


def _defined_or(value: Any, default: Any) -> Any:
    return default if value is None else value


def copy_line_item(item: Any) -> LineItem:
    """Rebuild ``item`` field by field as a new :class:`LineItem`."""

    return LineItem(
        section=text_or_empty(item_field(item, "section")),
        name=text_or_empty(item_field(item, "name")),
        description=text_or_empty(item_field(item, "description")),
        unit=text_or_empty(item_field(item, "unit")),
        qty=number_or_zero(item_field(item, "qty")),
        rate_client=number_or_zero(item_field(item, "rateClient")),
        rate_actual=number_or_zero(item_field(item, "rateActual")),
        remark=text_or_empty(item_field(item, "remark")),
    )


def _fresh_doc_no(source_doc_no: str, next_number: Callable[[], str]) -> str:
    doc_no = next_number()
    attempts = 1
    while doc_no == source_doc_no and attempts < _MAX_NUMBER_ATTEMPTS:
        logger.warning("Counter returned the source number %s; advancing", doc_no)
        doc_no = next_number()
        attempts += 1
    return doc_no


def copy_to_builder(
    source: Any,
    *,
    next_number: Callable[[], str] | None = None,
    clock: Clock = utc_now,
) -> QuotationRecord:
    """Return an independent copy of ``source`` with a new number, date and timestamps.

    Raises :class:`QuotationValidationError` with the validation reason when
    ``source`` cannot be copied, and :class:`CopyError` when building the copy
    fails for any other reason.  Nothing is returned on failure.
    """

    validation = validate_for_copy(source)
    if not validation.valid:
        raise QuotationValidationError(validation.message)

    try:
        source_doc_no = text_or_empty(item_field(source, "docNo"))
        doc_no = _fresh_doc_no(source_doc_no, next_number or next_doc_no)
        moment = clock()
        stamp = iso_timestamp(moment)
        copied = QuotationRecord(
            doc_no=doc_no,
            date=iso_date(moment),
            client_name=text_or_empty(item_field(source, "clientName")),
            location=text_or_empty(item_field(source, "location")),
            project_title=text_or_empty(item_field(source, "projectTitle")),
            discount=_defined_or(item_field(source, "discount"), DEFAULT_DISCOUNT_PCT),
            handling=_defined_or(item_field(source, "handling"), DEFAULT_HANDLING_PCT),
            tax=_defined_or(item_field(source, "tax"), DEFAULT_TAX_PCT),
            terms=_defined_or(item_field(source, "terms"), DEFAULT_TERMS),
            rows=[copy_line_item(item) for item in item_field(source, "rows")],
            created_at=stamp,
            updated_at=stamp,
        )
    except Exception as exc:
        logger.error("Copying quotation %s failed: %s", item_field(source, "docNo"), exc)
        raise CopyError(exc) from exc

    logger.info("Copied quotation %s to %s", source_doc_no or "<unsaved>", copied.doc_no)
    return copied


__all__ = ["copy_line_item", "copy_to_builder"]
