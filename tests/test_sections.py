from __future__ import annotations

from typing import Any, Callable

import pytest

from quote_builder.domain_models import LineItem
from quote_builder.sections import (
    canonical_section,
    consolidate,
    group_by_section,
    needs_consolidation,
    section_of,
    section_order,
    section_runs,
)

SEEDS = range(40)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("KITCHEN", "KITCHEN"),
        (None, "General"),
        ("", "General"),
        ("   ", "General"),
        (" Kitchen ", " Kitchen "),
    ],
)
def test_canonical_section(raw: Any, expected: str) -> None:
    assert canonical_section(raw) == expected


def test_consolidate_groups_kitchen_before_washroom(kitchen_items: list[dict[str, Any]]) -> None:
    result = consolidate(kitchen_items)

    assert [item["name"] for item in result] == ["A", "C", "B"]


def test_consolidate_returns_the_callers_items_unchanged(kitchen_items: list[dict[str, Any]]) -> None:
    snapshot = [dict(item) for item in kitchen_items]

    result = consolidate(kitchen_items)

    assert kitchen_items == snapshot
    assert all(any(out is src for src in kitchen_items) for out in result)
    assert all("originalIndex" not in item for item in result)


@pytest.mark.parametrize("items", [[], None, "KITCHEN", {"section": "A"}, 42])
def test_consolidate_empty_or_non_sequence_input(items: Any) -> None:
    assert consolidate(items) == []
    assert group_by_section(items) == {}


def test_blank_sections_keep_their_raw_value() -> None:
    items = [
        {"name": "x", "section": None},
        {"name": "y", "section": ""},
        {"name": "z"},
        {"name": "w", "section": "Balcony"},
    ]

    result = consolidate(items)

    assert [item["name"] for item in result] == ["w", "x", "y", "z"]
    assert [item.get("section") for item in result] == ["Balcony", None, "", None]
    assert list(group_by_section(items)) == ["General", "Balcony"]


def test_single_section_keeps_order() -> None:
    items = [{"section": "S", "name": str(n)} for n in range(6)]

    assert consolidate(items) == items


def test_line_items_and_mappings_share_grouping() -> None:
    items = [
        LineItem(section="WASHROOM", name="tap"),
        {"section": "KITCHEN", "name": "sink"},
        LineItem(section="", name="labour"),
    ]

    assert [section_of(item) for item in consolidate(items)] == ["General", "KITCHEN", "WASHROOM"]


def test_ascii_order_places_uppercase_first() -> None:
    items = [{"section": "kitchen"}, {"section": "KITCHEN"}, {"section": "Bedroom"}]

    assert section_order(items) == ["Bedroom", "KITCHEN", "kitchen"]


@pytest.mark.parametrize("seed", SEEDS)
def test_consolidated_sections_never_reappear(seed: int, random_items: Callable[[int], list[dict[str, Any]]]) -> None:
    result = consolidate(random_items(seed))

    left: set[str] = set()
    current: str | None = None
    for item in result:
        label = section_of(item)
        if label != current:
            assert label not in left
            if current is not None:
                left.add(current)
            current = label


@pytest.mark.parametrize("seed", SEEDS)
def test_consolidate_preserves_content_and_order(
    seed: int, random_items: Callable[[int], list[dict[str, Any]]]
) -> None:
    items = random_items(seed)
    result = consolidate(items)

    assert len(result) == len(items)
    labels = [section_of(item) for item in result]
    distinct = list(dict.fromkeys(labels))
    assert distinct == sorted(distinct)

    for label, group in group_by_section(items).items():
        in_output = [item for item in result if section_of(item) == label]
        assert in_output == group
        assert [id(item) for item in in_output] == [id(item) for item in group]


@pytest.mark.parametrize("seed", SEEDS)
def test_consolidate_is_idempotent(seed: int, random_items: Callable[[int], list[dict[str, Any]]]) -> None:
    once = consolidate(random_items(seed))

    assert consolidate(once) == once
    assert not needs_consolidation(once)


def test_section_runs_pairs_labels_with_items(kitchen_items: list[dict[str, Any]]) -> None:
    runs = section_runs(kitchen_items)

    assert [label for label, _ in runs] == ["KITCHEN", "WASHROOM"]
    assert [item["name"] for item in runs[0][1]] == ["A", "C"]


def test_needs_consolidation_detects_reentrant_sections(kitchen_items: list[dict[str, Any]]) -> None:
    assert needs_consolidation(kitchen_items)
    assert not needs_consolidation(kitchen_items[:2])
    assert not needs_consolidation([])
    assert not needs_consolidation(None)
