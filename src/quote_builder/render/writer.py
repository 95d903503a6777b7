"""Line-oriented writer used to lay out quotation documents."""

from __future__ import annotations

import textwrap
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Literal

from .formatting import fmt_money, sanitize_text


@dataclass(frozen=True)
class Column:
    """Fixed-width table column."""

    title: str
    width: int
    align: Literal["left", "right"] = "left"

    def cell(self, value: Any) -> str:
        text = sanitize_text(value).replace("\n", " ")
        if len(text) > self.width:
            text = text[: max(self.width - 1, 0)] + "~" if self.width > 1 else text[: self.width]
        if self.align == "right":
            return text.rjust(self.width)
        return text.ljust(self.width)


class QuoteWriter:
    """Helper that wraps line emission for fixed-width quotation text."""

    def __init__(self, *, divider: str, page_width: int, currency: str) -> None:
        self.divider = divider
        self.page_width = max(10, int(page_width or 0))
        self.currency = currency
        self._lines: list[str] = []

    @property
    def lines(self) -> list[str]:
        return self._lines

    def __len__(self) -> int:  # pragma: no cover - simple proxy
        return len(self._lines)

    def line(self, text: Any = "", *, indent: str = "") -> int:
        """Append ``text`` as a single line and return its index."""

        self._lines.append(f"{indent}{sanitize_text(text)}".rstrip())
        return len(self._lines) - 1

    def blank(self) -> int:
        return self.line("")

    def rule(self) -> int:
        return self.line(self.divider)

    def extend(self, values: Iterable[Any]) -> None:
        for value in values:
            self.line(value)

    def wrapped(self, text: Any, *, indent: str = "") -> None:
        """Append ``text`` wrapped to the page width, keeping explicit line breaks."""

        width = max(10, self.page_width - len(indent))
        wrapper = textwrap.TextWrapper(width=width)
        for paragraph in sanitize_text(text).split("\n"):
            chunks = wrapper.wrap(paragraph) or [""]
            for chunk in chunks:
                self.line(chunk, indent=indent)

    def kv(self, label: str, value: Any, *, indent: str = "") -> int:
        """Emit ``label`` left and ``value`` right-aligned to the page width."""

        left = f"{indent}{label}"
        right = sanitize_text(value)
        pad = max(1, self.page_width - len(left) - len(right))
        return self.line(f"{left}{' ' * pad}{right}")

    def row(self, label: str, value: Any, *, indent: str = "") -> int:
        """Emit a currency row; total rows get a short rule above them."""

        formatted = fmt_money(value, self.currency)
        if label.strip().lower().startswith(("total", "client total", "actual total")):
            rule = " " * max(0, self.page_width - len(formatted)) + "-" * len(formatted)
            if not self._lines or self._lines[-1] != rule:
                self.line(rule)
        return self.kv(label, formatted, indent=indent)

    def table_header(self, columns: Sequence[Column]) -> None:
        self.line(" ".join(column.cell(column.title) for column in columns))
        self.line(" ".join("-" * column.width for column in columns))

    def table_row(self, columns: Sequence[Column], values: Sequence[Any]) -> int:
        cells = [column.cell(value) for column, value in zip(columns, values)]
        return self.line(" ".join(cells))


__all__ = ["Column", "QuoteWriter"]
