"""Section grouping and consolidation for quotation line items.

Items are entered in any order, but previews and exports show each section
exactly once.  :func:`consolidate` regroups an item sequence into
section-contiguous runs: sections sorted by label, items within a section in
the order they were entered.  The returned items are the caller's own objects;
only their order changes.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

from quote_builder.config import get_logger
from quote_builder.domain_models import DEFAULT_SECTION, is_blank, item_field, text_or_empty

logger = get_logger("sections")

T = TypeVar("T")


def canonical_section(value: Any) -> str:
    """Return the grouping key for a raw section label.

    Absent or blank labels fall into ``"General"``; anything else is used
    verbatim.
    """

    if is_blank(value):
        return DEFAULT_SECTION
    return text_or_empty(value)


def _as_items(items: Any) -> list[Any]:
    if items is None or isinstance(items, (str, bytes, Mapping)):
        return []
    if not isinstance(items, Sequence):
        return []
    return list(items)


def section_of(item: Any) -> str:
    return canonical_section(item_field(item, "section"))


def group_by_section(items: Sequence[T] | None) -> dict[str, list[T]]:
    """Map each canonical section to its items, keyed in first-seen order."""

    groups: dict[str, list[T]] = {}
    for item in _as_items(items):
        groups.setdefault(section_of(item), []).append(item)
    return groups


def section_order(items: Sequence[Any] | None) -> list[str]:
    """Return the distinct canonical sections in display order."""

    return sorted(group_by_section(items))


def consolidate(items: Sequence[T] | None) -> list[T]:
    """Return ``items`` regrouped into sorted, section-contiguous runs.

    Within a section the input order is kept, so consolidating an already
    consolidated sequence returns it unchanged.
    """

    groups = group_by_section(items)
    consolidated: list[T] = []
    for label in sorted(groups):
        consolidated.extend(groups[label])
    if len(groups) > 1:
        logger.debug("Consolidated %d items into %d sections", len(consolidated), len(groups))
    return consolidated


def section_runs(items: Sequence[T] | None) -> list[tuple[str, list[T]]]:
    """Return ``(section, items)`` pairs in consolidated order."""

    groups = group_by_section(items)
    return [(label, list(groups[label])) for label in sorted(groups)]


def needs_consolidation(items: Sequence[Any] | None) -> bool:
    """True when a section re-appears after another one has started."""

    entries = _as_items(items)
    if len(entries) <= 1:
        return False

    seen: set[str] = set()
    last: str | None = None
    for item in entries:
        label = section_of(item)
        if label in seen and label != last:
            return True
        seen.add(label)
        last = label
    return False


__all__ = [
    "canonical_section",
    "consolidate",
    "group_by_section",
    "needs_consolidation",
    "section_of",
    "section_order",
    "section_runs",
]
