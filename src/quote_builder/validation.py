"""Minimum-shape checks applied before a quotation is copied or saved."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from quote_builder.config import get_logger
from quote_builder.domain_models import is_blank, item_field

logger = get_logger("validation")

VALID_MESSAGE = "Quotation is valid for copying"


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    message: str

    @property
    def reason(self) -> str | None:
        """The failure reason, or ``None`` when the record is valid."""

        return None if self.valid else self.message

    def __bool__(self) -> bool:
        return self.valid


def _invalid(message: str) -> ValidationResult:
    return ValidationResult(valid=False, message=message)


def _check(record: Any) -> ValidationResult:
    if record is None:
        return _invalid("No quotation data provided")

    if is_blank(item_field(record, "clientName")):
        return _invalid("Client name is required")

    rows = item_field(record, "rows")
    if not isinstance(rows, (list, tuple)):
        return _invalid("Quotation must have items")

    if not rows:
        return _invalid("Quotation must have at least one item")

    for index, item in enumerate(rows, start=1):
        if is_blank(item_field(item, "name")):
            return _invalid(f"Item {index} is missing a name")

    return ValidationResult(valid=True, message=VALID_MESSAGE)


def validate_for_copy(record: Any) -> ValidationResult:
    """Check ``record`` against the copy/save rules; the first failing rule wins.

    Never raises: unexpected failures come back as an invalid result whose
    message embeds the underlying error.
    """

    try:
        result = _check(record)
    except Exception as exc:
        logger.debug("Validation raised unexpectedly", exc_info=True)
        return _invalid(f"Validation error: {exc}")
    if not result.valid:
        logger.debug("Quotation rejected: %s", result.message)
    return result


__all__ = ["VALID_MESSAGE", "ValidationResult", "validate_for_copy"]
