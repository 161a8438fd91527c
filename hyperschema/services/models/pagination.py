"""Pagination records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class PaginationInfo:
    """One loaded page together with the collection totals it reported."""

    items: list[Any] = field(default_factory=list)
    count: int = 0
    total_pages: int = 0


@dataclass(frozen=True)
class PageMapItem:
    """Parent cursor slice that produced one streaming cursor page.

    The slice starts at ``from_index`` of parent page ``from_page`` and ends
    before ``to_index`` of parent page ``to_page`` (pages are 1-indexed,
    offsets are raw positions before filtering). The next client page starts
    where this one ends.
    """

    from_page: int
    from_index: int
    to_page: int
    to_index: int
