"""JSON-file document store for quotations keyed by document number."""

from __future__ import annotations

import copy
import json
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Callable

from quote_builder.config import get_logger
from quote_builder.domain_models import (
    LineItem,
    QuotationRecord,
    is_blank,
    iso_timestamp,
    text_or_empty,
    utc_now,
)
from quote_builder.errors import StoreError

logger = get_logger("storage")

_SAFE_KEY_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")
SEARCH_FIELDS = ("docNo", "clientName", "projectTitle", "location")


def _as_document(record: Mapping[str, Any] | QuotationRecord) -> dict[str, Any]:
    if isinstance(record, QuotationRecord):
        return record.to_dict()
    if not isinstance(record, Mapping):
        raise StoreError("Quotation data must be a mapping or QuotationRecord")
    document = copy.deepcopy(dict(record))
    document.pop("id", None)
    rows = document.get("rows")
    if isinstance(rows, (list, tuple)):
        document["rows"] = [item.to_dict() if isinstance(item, LineItem) else item for item in rows]
    return document


class QuotationStore:
    """One ``<docNo>.json`` document per quotation under ``root``.

    Saves merge onto the existing document and stamp ``updatedAt``; the
    first ``createdAt`` recorded for a document is kept.
    """

    def __init__(self, root: str | Path, *, clock: Callable[[], Any] = utc_now) -> None:
        self.root = Path(root)
        self._clock = clock

    def _path_for(self, doc_no: Any) -> Path:
        key = text_or_empty(doc_no).strip()
        if not _SAFE_KEY_RE.match(key):
            raise StoreError(f"Invalid quotation number: {key!r}")
        return self.root / f"{key}.json"

    def _read(self, path: Path) -> dict[str, Any]:
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreError(f"Unable to read quotation file {path.name}", exc) from exc
        if not isinstance(raw, dict):
            raise StoreError(f"Quotation file {path.name} must hold a JSON object")
        return raw

    def save(self, record: Mapping[str, Any] | QuotationRecord) -> dict[str, Any]:
        """Merge ``record`` into the store and return the stored document."""

        incoming = _as_document(record)
        if is_blank(incoming.get("docNo")):
            raise StoreError("Quotation number is required")
        path = self._path_for(incoming["docNo"])

        existing = self._read(path) if path.exists() else {}
        merged = {**existing, **incoming}
        now = iso_timestamp(self._clock())
        merged["updatedAt"] = now
        merged["createdAt"] = existing.get("createdAt") or incoming.get("createdAt") or now

        try:
            self.root.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(merged, indent=2, ensure_ascii=False, default=str), encoding="utf-8")
        except OSError as exc:
            raise StoreError(f"Unable to write quotation {incoming['docNo']}", exc) from exc

        logger.info("Saved quotation %s", merged["docNo"])
        return merged

    def load(self, doc_no: str) -> dict[str, Any] | None:
        """Return the stored document or ``None`` when there is none."""

        path = self._path_for(doc_no)
        if not path.exists():
            logger.debug("Quotation %s not found", doc_no)
            return None
        return self._read(path)

    def list_all(self) -> list[dict[str, Any]]:
        """Return every stored quotation, most recently updated first."""

        if not self.root.exists():
            return []
        documents: list[dict[str, Any]] = []
        for path in sorted(self.root.glob("*.json")):
            document = self._read(path)
            documents.append({"id": path.stem, **document})
        documents.sort(key=lambda doc: text_or_empty(doc.get("updatedAt")), reverse=True)
        return documents

    def delete(self, doc_no: str) -> bool:
        path = self._path_for(doc_no)
        if not path.exists():
            return False
        try:
            path.unlink()
        except OSError as exc:
            raise StoreError(f"Unable to delete quotation {doc_no}", exc) from exc
        logger.info("Deleted quotation %s", doc_no)
        return True

    def search(self, term: str | None) -> list[dict[str, Any]]:
        """Case-insensitive substring search over number, client, project and location."""

        documents = self.list_all()
        needle = text_or_empty(term).strip().lower()
        if not needle:
            return documents
        return [
            doc
            for doc in documents
            if any(needle in text_or_empty(doc.get(key)).lower() for key in SEARCH_FIELDS)
        ]


__all__ = ["QuotationStore", "SEARCH_FIELDS"]
