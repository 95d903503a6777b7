"""Application service tying the store, numbering and copy transform together."""

from __future__ import annotations

import builtins
from collections.abc import Mapping
from typing import Any

from quote_builder.config import get_logger, load_section
from quote_builder.copying import copy_to_builder
from quote_builder.domain_models import (
    Clock,
    QuotationRecord,
    new_quotation,
    utc_now,
)
from quote_builder.errors import QuotationNotFoundError, QuotationValidationError
from quote_builder.navigation import parse_navigation_params
from quote_builder.numbering import (
    COUNTER_KEY,
    DOC_NO_PREFIX,
    DOC_NO_WIDTH,
    CounterStore,
    DocNumberGenerator,
)
from quote_builder.storage import QuotationStore
from quote_builder.validation import validate_for_copy

logger = get_logger("service")


def numbering_from_settings(store: CounterStore) -> DocNumberGenerator:
    settings = load_section("numbering")
    return DocNumberGenerator(
        store,
        key=str(settings.get("counter_key") or COUNTER_KEY),
        prefix=str(settings.get("prefix") or DOC_NO_PREFIX),
        width=int(settings.get("width") or DOC_NO_WIDTH),
    )


class QuoteService:
    """Builder-facing operations over a :class:`QuotationStore`."""

    def __init__(
        self,
        store: QuotationStore,
        counter: CounterStore,
        *,
        clock: Clock = utc_now,
    ) -> None:
        self.store = store
        self.numbers = numbering_from_settings(counter)
        self._clock = clock

    def next_number(self) -> str:
        """Issue the next number that no stored quotation already uses."""

        doc_no = self.numbers.next()
        while self.store.load(doc_no) is not None:
            logger.warning("Quotation number %s is already stored; advancing", doc_no)
            doc_no = self.numbers.next()
        return doc_no

    def create(self) -> QuotationRecord:
        """Return a blank record with a new number and the configured defaults."""

        record = new_quotation(self.next_number(), clock=self._clock)
        defaults = load_section("quotation_defaults")
        for attr in ("discount", "handling", "tax", "terms"):
            if defaults.get(attr) is not None:
                setattr(record, attr, defaults[attr])
        return record

    def save(self, record: Mapping[str, Any] | QuotationRecord, *, require_valid: bool = True) -> dict[str, Any]:
        if require_valid:
            result = validate_for_copy(record)
            if not result.valid:
                raise QuotationValidationError(result.message)
        return self.store.save(record)

    def load(self, doc_no: str) -> QuotationRecord:
        document = self.store.load(doc_no)
        if document is None:
            raise QuotationNotFoundError(doc_no)
        return QuotationRecord.from_dict(document)

    def copy(self, doc_no: str, *, save: bool = True) -> QuotationRecord:
        """Copy the stored quotation ``doc_no`` under a fresh number."""

        document = self.store.load(doc_no)
        if document is None:
            raise QuotationNotFoundError(doc_no)
        copied = copy_to_builder(document, next_number=self.next_number, clock=self._clock)
        if save:
            self.store.save(copied)
        return copied

    def list(self) -> builtins.list[dict[str, Any]]:
        return self.store.list_all()

    def search(self, term: str | None) -> builtins.list[dict[str, Any]]:
        return self.store.search(term)

    def delete(self, doc_no: str) -> bool:
        return self.store.delete(doc_no)

    def open_from_params(self, query: str | None) -> QuotationRecord | None:
        """Resolve a ``copy=`` or ``load=`` query string to a builder record.

        Copies opened this way are not saved until the caller saves them.
        """

        request = parse_navigation_params(query)
        if request is None:
            return None
        logger.debug("Opening %s request for %s", request.action, request.doc_no)
        if request.action == "copy":
            return self.copy(request.doc_no, save=False)
        return self.load(request.doc_no)


__all__ = ["QuoteService", "numbering_from_settings"]
