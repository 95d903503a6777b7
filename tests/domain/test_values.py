"""Tests for value coercion helpers."""
from __future__ import annotations

import math
from decimal import Decimal
from typing import Any

import pytest

from quote_builder.domain_models.values import (
    coerce_float_or_none,
    is_blank,
    number_or_zero,
    text_or_empty,
    to_int,
)


@pytest.mark.parametrize(
    "raw,expected",
    [
        (12, 12.0),
        (2.5, 2.5),
        ("  7.25 ", 7.25),
        ("12.", 12.0),
        (".5", 0.5),
        ("-3e2", -300.0),
        ("12abc", 12.0),
        ("1,200", 1.0),
        ("2.5 sqft", 2.5),
        (Decimal("3.10"), 3.1),
    ],
)
def test_coerce_float_or_none_accepts_numbers_and_numeric_text(raw: Any, expected: float) -> None:
    result = coerce_float_or_none(raw)
    assert result is not None
    assert math.isclose(result, expected)


@pytest.mark.parametrize(
    "raw",
    [None, "", "   ", "abc", "$45", "₹ 1,50,000", True, [], {}, float("nan"), float("inf"), "inf", "1e999"],
)
def test_coerce_float_or_none_rejects_non_numbers(raw: Any) -> None:
    assert coerce_float_or_none(raw) is None


@pytest.mark.parametrize("raw", [None, "", "twelve", float("nan"), object()])
def test_number_or_zero_substitutes_zero(raw: Any) -> None:
    assert number_or_zero(raw) == 0.0


def test_number_or_zero_keeps_valid_values() -> None:
    assert number_or_zero("18") == 18.0
    assert number_or_zero(0.5) == 0.5


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("5", 5),
        (5, 5),
        ("5.9", 5),
        (5.9, 5),
        ("5abc", 5),
        (" 42 ", 42),
        ("-4", -4),
        ("1e3", 1),
        ("", None),
        ("x", None),
        (None, None),
    ],
)
def test_to_int_truncates(raw: Any, expected: int | None) -> None:
    assert to_int(raw) == expected


def test_text_helpers() -> None:
    assert text_or_empty(None) == ""
    assert text_or_empty(12) == "12"
    assert text_or_empty("kept ") == "kept "
    assert is_blank(None)
    assert is_blank("  \t")
    assert not is_blank(" x ")


def test_text_is_read_by_its_leading_number() -> None:
    assert number_or_zero("12abc") == 12.0
    assert number_or_zero("1.2.3") == 1.2
    assert number_or_zero("abc12") == 0.0
