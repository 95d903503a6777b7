"""Query-string helpers for handing a copy/load request to the builder."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal
from urllib.parse import parse_qs, urlencode

COPY_PARAM = "copy"
LOAD_PARAM = "load"

Action = Literal["copy", "load"]


@dataclass(frozen=True)
class NavigationRequest:
    action: Action
    doc_no: str


def create_copy_params(doc_no: str) -> str:
    return urlencode({COPY_PARAM: doc_no})


def create_load_params(doc_no: str) -> str:
    return urlencode({LOAD_PARAM: doc_no})


def parse_navigation_params(query: str | None) -> NavigationRequest | None:
    """Return the copy or load request carried by ``query``, if any.

    ``copy`` takes precedence over ``load``; blank values are ignored.
    """

    if not query:
        return None
    params = parse_qs(query.lstrip("?"), keep_blank_values=False)
    for action in (COPY_PARAM, LOAD_PARAM):
        for value in params.get(action, []):
            doc_no = value.strip()
            if doc_no:
                return NavigationRequest(action=action, doc_no=doc_no)  # type: ignore[arg-type]
    return None


__all__ = [
    "COPY_PARAM",
    "LOAD_PARAM",
    "NavigationRequest",
    "create_copy_params",
    "create_load_params",
    "parse_navigation_params",
]
