from __future__ import annotations

import copy
import random
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable

import pytest

from quote_builder import config
from quote_builder.numbering import InMemoryCounterStore
from quote_builder.storage import QuotationStore

SECTION_POOL = ["KITCHEN", "WASHROOM", "Bedroom", "LIVING", "", None, "Balcony", "kitchen"]


class FakeClock:
    """Deterministic clock that advances one second per call."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2026, 10, 19, 9, 30, 0, 123000, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        moment = self.current
        self.current = moment + timedelta(seconds=1)
        return moment


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test against the bundled settings, ignoring developer overrides."""

    monkeypatch.delenv(config.APP_SETTINGS_ENV_VAR, raising=False)
    config.load_app_settings(reload=True)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def counter() -> InMemoryCounterStore:
    return InMemoryCounterStore()


@pytest.fixture
def store(tmp_path: Path, clock: FakeClock) -> QuotationStore:
    return QuotationStore(tmp_path / "quotations", clock=clock)


@pytest.fixture
def kitchen_items() -> list[dict[str, Any]]:
    return [
        {"section": "KITCHEN", "name": "A", "qty": 20, "rateClient": 1200, "rateActual": 900},
        {"section": "WASHROOM", "name": "B", "qty": 30, "rateClient": 800, "rateActual": 500},
        {"section": "KITCHEN", "name": "C", "qty": 15, "rateClient": 2000, "rateActual": 1500},
    ]


@pytest.fixture
def valid_record(kitchen_items: list[dict[str, Any]]) -> dict[str, Any]:
    return {
        "docNo": "LI-0042",
        "date": "2026-01-15",
        "clientName": "Asha Interiors",
        "location": "Pune",
        "projectTitle": "Villa 12 fit-out",
        "discount": 5,
        "handling": 8,
        "tax": 18,
        "terms": "50% advance.",
        "rows": copy.deepcopy(kitchen_items),
        "createdAt": "2026-01-15T08:00:00.000Z",
        "updatedAt": "2026-01-16T08:00:00.000Z",
    }


def _random_number(rng: random.Random) -> Any:
    roll = rng.random()
    if roll < 0.1:
        return None
    if roll < 0.2:
        return ""
    if roll < 0.3:
        return "abc"
    if roll < 0.5:
        return f"{rng.uniform(0, 500):.2f}"
    return round(rng.uniform(0, 5000), 2)


def make_random_items(seed: int, count: int | None = None) -> list[dict[str, Any]]:
    rng = random.Random(seed)
    total = rng.randint(0, 25) if count is None else count
    items: list[dict[str, Any]] = []
    for index in range(total):
        item: dict[str, Any] = {
            "name": f"item-{index}",
            "qty": _random_number(rng),
            "rateClient": _random_number(rng),
            "rateActual": _random_number(rng),
        }
        section = rng.choice(SECTION_POOL)
        if section is not None or rng.random() < 0.5:
            item["section"] = section
        items.append(item)
    return items


@pytest.fixture
def random_items() -> Callable[[int], list[dict[str, Any]]]:
    return make_random_items
