from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Callable

import pytest

from quote_builder import config
from quote_builder.errors import QuotationNotFoundError, QuotationValidationError
from quote_builder.navigation import create_copy_params, create_load_params
from quote_builder.numbering import COUNTER_KEY, InMemoryCounterStore
from quote_builder.service import QuoteService
from quote_builder.storage import QuotationStore


@pytest.fixture
def service(store: QuotationStore, counter: InMemoryCounterStore, clock: Callable[[], datetime]) -> QuoteService:
    return QuoteService(store, counter, clock=clock)


def test_create_issues_number_and_defaults(service: QuoteService, counter: InMemoryCounterStore) -> None:
    record = service.create()

    assert record.doc_no == "LI-0001"
    assert (record.discount, record.handling, record.tax) == (0, 10, 18)
    assert record.date == "2026-10-19"
    assert counter.get(COUNTER_KEY) == 1


def test_numbering_follows_settings(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, store: QuotationStore
) -> None:
    override = tmp_path / "settings.json"
    override.write_text(json.dumps({"numbering": {"prefix": "QT-", "width": 5}}), encoding="utf-8")
    monkeypatch.setenv(config.APP_SETTINGS_ENV_VAR, str(override))
    config.load_app_settings(reload=True)

    service = QuoteService(store, InMemoryCounterStore())

    assert service.create().doc_no == "QT-00001"


def test_save_validates_by_default(service: QuoteService) -> None:
    with pytest.raises(QuotationValidationError, match="Client name is required"):
        service.save({"docNo": "LI-0001", "rows": [{"name": "Tile"}]})

    saved = service.save({"docNo": "LI-0001", "rows": []}, require_valid=False)
    assert saved["docNo"] == "LI-0001"


def test_load_missing_raises(service: QuoteService) -> None:
    with pytest.raises(QuotationNotFoundError) as excinfo:
        service.load("LI-0404")

    assert str(excinfo.value) == "Quotation not found"
    assert excinfo.value.doc_no == "LI-0404"


def test_copy_saves_under_new_number(service: QuoteService, valid_record: dict[str, Any]) -> None:
    service.save(valid_record)

    copied = service.copy("LI-0042")

    assert copied.doc_no == "LI-0001"
    assert copied.client_name == "Asha Interiors"
    assert service.load("LI-0001").rows == copied.rows
    assert service.load("LI-0042").created_at == "2026-01-15T08:00:00.000Z"


def test_copy_of_missing_quotation(service: QuoteService) -> None:
    with pytest.raises(QuotationNotFoundError):
        service.copy("LI-0404")


def test_open_from_params(service: QuoteService, valid_record: dict[str, Any]) -> None:
    service.save(valid_record)

    loaded = service.open_from_params("?" + create_load_params("LI-0042"))
    copied = service.open_from_params(create_copy_params("LI-0042"))

    assert loaded is not None and loaded.doc_no == "LI-0042"
    assert copied is not None and copied.doc_no == "LI-0001"
    assert service.store.load(copied.doc_no) is None
    assert service.open_from_params("") is None


def test_list_search_and_delete(service: QuoteService, valid_record: dict[str, Any]) -> None:
    service.save(valid_record)
    service.save({"docNo": "LI-0050", "clientName": "Ravi", "rows": [{"name": "Tile"}]})

    assert [doc["docNo"] for doc in service.list()] == ["LI-0050", "LI-0042"]
    assert [doc["docNo"] for doc in service.search("asha")] == ["LI-0042"]
    assert service.delete("LI-0050") is True
    assert [doc["docNo"] for doc in service.list()] == ["LI-0042"]


def test_copy_never_overwrites_another_quotation(service: QuoteService, store: QuotationStore) -> None:
    service.save({"docNo": "LI-0001", "clientName": "Asha", "rows": [{"name": "Tile"}]})
    service.save({"docNo": "LI-0002", "clientName": "Bharat", "rows": [{"name": "Sink"}]})

    copied = service.copy("LI-0001")

    assert copied.doc_no == "LI-0003"
    assert store.load("LI-0002")["clientName"] == "Bharat"
    assert store.load("LI-0003")["clientName"] == "Asha"


def test_new_numbers_skip_stored_quotations(service: QuoteService, counter: InMemoryCounterStore) -> None:
    service.save({"docNo": "LI-0001", "clientName": "Asha", "rows": [{"name": "Tile"}]})

    assert service.create().doc_no == "LI-0002"
    assert counter.get(COUNTER_KEY) == 2
