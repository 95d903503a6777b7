"""Error types raised by the quotation builder."""
from __future__ import annotations


class QuoteBuilderError(Exception):
    """Base class for quotation builder errors."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        return self.message


class QuotationValidationError(QuoteBuilderError, ValueError):
    """A quotation does not have the minimum shape needed to copy or save it."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class CopyError(QuoteBuilderError):
    """Building the copied quotation failed after validation passed."""

    def __init__(self, cause: Exception) -> None:
        super().__init__(str(cause), cause)


class StoreError(QuoteBuilderError):
    """The quotation store could not complete a read or write."""


class QuotationNotFoundError(StoreError, LookupError):
    """No stored quotation exists for the requested document number."""

    def __init__(self, doc_no: str) -> None:
        super().__init__("Quotation not found")
        self.doc_no = doc_no


__all__ = [
    "CopyError",
    "QuotationNotFoundError",
    "QuotationValidationError",
    "QuoteBuilderError",
    "StoreError",
]
