"""Quotation number generation backed by a persisted counter.

The generator performs a plain read-increment-write against a
:class:`CounterStore`.  Uniqueness holds only within one store: two processes
sharing a :class:`JsonFileCounterStore` can race and hand out the same number.
Swap in a store with an atomic increment where that matters.
"""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Any, Protocol

from quote_builder.config import get_logger
from quote_builder.domain_models import to_int
from quote_builder.errors import StoreError

logger = get_logger("numbering")

COUNTER_KEY = "qb_last_no"
DOC_NO_PREFIX = "LI-"
DOC_NO_WIDTH = 4


class CounterStore(Protocol):
    """Key/value storage holding the last issued sequence number."""

    def get(self, key: str) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...


class InMemoryCounterStore:
    """Process-local store; each operation is guarded by a mutex."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Any:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._values[key] = value


class JsonFileCounterStore:
    """Counter values kept in a small JSON object file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read_all(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreError(f"Unable to read counter state from {self.path}", exc) from exc
        if not isinstance(raw, dict):
            raise StoreError(f"Counter state in {self.path} must be a JSON object")
        return raw

    def get(self, key: str) -> Any:
        return self._read_all().get(key)

    def set(self, key: str, value: Any) -> None:
        values = self._read_all()
        values[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(values, indent=2, sort_keys=True), encoding="utf-8")
        except OSError as exc:
            raise StoreError(f"Unable to write counter state to {self.path}", exc) from exc


def format_doc_no(number: int, *, prefix: str = DOC_NO_PREFIX, width: int = DOC_NO_WIDTH) -> str:
    return f"{prefix}{number:0{width}d}"


class DocNumberGenerator:
    """Issue ``LI-####`` document numbers from a persisted counter."""

    def __init__(
        self,
        store: CounterStore,
        *,
        key: str = COUNTER_KEY,
        prefix: str = DOC_NO_PREFIX,
        width: int = DOC_NO_WIDTH,
    ) -> None:
        self.store = store
        self.key = key
        self.prefix = prefix
        self.width = width

    def last_issued(self) -> int:
        """Return the stored counter; absent or unparsable values read as 0."""

        last = to_int(self.store.get(self.key))
        if last is None or last < 0:
            return 0
        return last

    def next(self) -> str:
        number = self.last_issued() + 1
        self.store.set(self.key, number)
        doc_no = format_doc_no(number, prefix=self.prefix, width=self.width)
        logger.debug("Issued quotation number %s", doc_no)
        return doc_no


_DEFAULT_STORE = InMemoryCounterStore()


def next_doc_no(store: CounterStore | None = None) -> str:
    """Return the next document number, advancing ``store``'s counter."""

    return DocNumberGenerator(store if store is not None else _DEFAULT_STORE).next()


__all__ = [
    "COUNTER_KEY",
    "CounterStore",
    "DOC_NO_PREFIX",
    "DOC_NO_WIDTH",
    "DocNumberGenerator",
    "InMemoryCounterStore",
    "JsonFileCounterStore",
    "format_doc_no",
    "next_doc_no",
]
