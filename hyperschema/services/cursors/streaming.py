"""Cursor re-paginating another cursor.

Architecture:
    A StreamingCursor presents pages of its own size over a parent cursor
    whose page boundaries do not line up, filtering client-side when the
    parent cannot filter. Each client page is described by a PageMapItem
    recording the parent slice that produced it:

        client page 1: parent (1, 0) .. (3, 1)
        client page 2: parent (3, 1) .. (5, 2)
        client page 3: parent (5, 2) .. (5, 3)

    Entry ``i`` starts where entry ``i - 1`` ends, so the map is extended
    strictly in order: reaching client page ``k`` first maps every earlier
    page. Extension scans parent pages one after another until ``limit``
    matching items are found or the parent runs out. A mapped page is
    replayed by re-selecting its parent slice.

Design Decisions:
    - Filters and sorters are handed to a parent that declares the
      capability. Otherwise filters run client-side and sorting falls back
      to a buffer of at most ``max_buffered_items`` parent items.
    - Changing the limit, filters or sorters discards the page map.
    - Without a filtering parent the number of pages is an estimate from
      the map's reach and the parent's remaining raw items, capped at
      ``max_buffered_items // limit`` pages. A page past the real end of
      the stream loads as an empty page carrying the exact totals, so
      ``has_next`` turns False instead of the cursor entering ERROR.
    - Page-map extension holds a lock: the parent cursor is shared state
      and entry order matters.

See Also:
    - PageMapItem: Parent slice of one client page
    - BaseCursor: Page state machine
"""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Callable
from typing import Any

from ..core.config import CursorSettings
from ..core.enums import CursorCapability
from ..core.exceptions import CursorStateError
from ..models.pagination import PageMapItem, PaginationInfo
from .base import BaseCursor, T
from .capabilities import FilterableCursorMixin, SortableCursorMixin, supports
from .collection import filter_predicate, sort_collection_by
from .telemetry import log_page_map_extended

logger = logging.getLogger(__name__)


def _match_all(item: Any) -> bool:
    return True


class StreamingCursor(FilterableCursorMixin, SortableCursorMixin, BaseCursor[T]):
    """Re-paginates and filters a parent cursor.

    Args:
        parent: Cursor supplying the items; the streaming cursor moves it
            between pages
        limit: Page size
        settings: Cursor settings
    """

    capabilities = CursorCapability.FILTERABLE | CursorCapability.SORTABLE
    replace_filters_by_default = False

    def __init__(
        self,
        parent: BaseCursor[T],
        limit: int | None = None,
        settings: CursorSettings | None = None,
    ) -> None:
        super().__init__(limit=limit, settings=settings)
        self.parent = parent
        self.is_parent_filterable = supports(parent, CursorCapability.FILTERABLE)
        self.is_parent_sortable = supports(parent, CursorCapability.SORTABLE)
        self._lock = asyncio.Lock()
        self._page_map: list[PageMapItem] = []
        self._page_sizes: list[int] = []
        self._exhausted = False
        self._buffer: list[T] | None = None

    @property
    def page_map(self) -> list[PageMapItem]:
        return list(self._page_map)

    @property
    def schema(self) -> Any:
        """Navigator of the parent, when it has one."""
        return getattr(self.parent, "schema", None) or getattr(self.parent, "navigator", None)

    def _estimate_count(self) -> int:
        """Item count of the parent, exact once a filtered stream is exhausted."""
        if self._filters_client_side() and self._exhausted:
            return sum(self._page_sizes)
        return self.parent.count

    def _estimate_total_pages(self) -> int:
        if not self._filters_client_side():
            return math.ceil(self.parent.count / self._limit)

        mapped = len(self._page_map)
        if self._exhausted:
            return mapped
        consumed = 0
        if self._page_map:
            last = self._page_map[-1]
            consumed = (last.to_page - 1) * self.parent.limit + last.to_index
        remaining = max(self.parent.count - consumed, 0)
        estimate = mapped + math.ceil(remaining / self._limit)
        return min(estimate, max(mapped, self.settings.max_buffered_items // self._limit))

    def _filters_client_side(self) -> bool:
        return bool(self._filters) and not self.is_parent_filterable

    def _sorts_client_side(self) -> bool:
        return bool(self._sorters) and not self.is_parent_sortable

    def _predicate(self) -> Callable[[Any], bool]:
        if not self._filters_client_side():
            return _match_all
        return filter_predicate(self._filters, self.schema, self.settings.unknown_operator_policy)

    def _reset(self) -> None:
        self._page_map = []
        self._page_sizes = []
        self._exhausted = False
        self._buffer = None

    def _on_limit_changed(self) -> None:
        self._reset()

    def _sync_parent(self) -> None:
        if self.are_filters_applied and self.are_sorters_applied:
            return
        self._reset()
        if self.is_parent_filterable:
            self.parent.filter_by(self.filters, replace=True)
        if self.is_parent_sortable:
            self.parent.sort_by(self.sorters, replace=True)

    # Loading

    async def _fetch_page(self, page: int) -> PaginationInfo:
        async with self._lock:
            self._sync_parent()
            if self._sorts_client_side():
                return await self._fetch_buffered_page(page)

            predicate = self._predicate()
            loaded: list[T] | None = None
            while len(self._page_map) < page and not self._exhausted:
                loaded = await self._extend(predicate)

            if page > len(self._page_map):
                # Stream ended before page; publish the exact totals.
                return PaginationInfo([], self._estimate_count(), len(self._page_map))
            if loaded is None or page != len(self._page_map):
                loaded = await self._replay(self._page_map[page - 1], predicate)
            return PaginationInfo(loaded, self._estimate_count(), self._estimate_total_pages())

    async def _extend(self, predicate: Callable[[Any], bool]) -> list[T]:
        """Map the next client page; returns its items."""
        index = len(self._page_map)
        if self._page_map:
            previous = self._page_map[-1]
            from_page, from_index = previous.to_page, previous.to_index
        else:
            from_page, from_index = 1, 0

        collected: list[T] = []
        page, offset = from_page, from_index
        to_page, to_index = from_page, from_index
        while True:
            source = await self.parent.select(page)
            full = False
            for position in range(offset, len(source)):
                if not predicate(source[position]):
                    continue
                collected.append(source[position])
                if len(collected) == self._limit:
                    to_page, to_index = page, position + 1
                    full = True
                    break
            if full:
                break
            to_page, to_index = page, max(offset, len(source))
            if not source or page >= self.parent.total_pages:
                self._exhausted = True
                break
            page, offset = page + 1, 0

        if collected or index == 0:
            self._page_map.append(PageMapItem(from_page, from_index, to_page, to_index))
            self._page_sizes.append(len(collected))
            log_page_map_extended(
                page=index + 1,
                from_page=from_page,
                from_index=from_index,
                to_page=to_page,
                to_index=to_index,
                items=len(collected),
            )
        return collected

    async def _replay(self, entry: PageMapItem, predicate: Callable[[Any], bool]) -> list[T]:
        items: list[T] = []
        for page in range(entry.from_page, entry.to_page + 1):
            source = await self.parent.select(page)
            start = entry.from_index if page == entry.from_page else 0
            end = entry.to_index if page == entry.to_page else len(source)
            items.extend(item for item in source[start:end] if predicate(item))
        return items

    async def _fetch_buffered_page(self, page: int) -> PaginationInfo:
        if self._buffer is None:
            self._buffer = await self._buffered_items()
            logger.debug(
                "streaming_cursor_buffered",
                extra={"items": len(self._buffer), "max_buffered_items": self.settings.max_buffered_items},
            )
        count = len(self._buffer)
        if count == 0:
            return PaginationInfo([], 0, 0)
        total_pages = math.ceil(count / self._limit)
        if page > total_pages:
            raise CursorStateError(f"Page {page} is beyond the last page ({total_pages})", page=page)
        start = (page - 1) * self._limit
        return PaginationInfo(self._buffer[start : start + self._limit], count, total_pages)

    async def _buffered_items(self, limit: int | None = None) -> list[T]:
        cap = self.settings.max_buffered_items
        if limit is not None and not self._filters_client_side() and not self._sorts_client_side():
            cap = min(limit, cap)
        items = await self.parent.all(cap)
        predicate = self._predicate()
        items = [item for item in items if predicate(item)]
        if self._sorts_client_side():
            items = sort_collection_by(items, self._sorters)
        return items

    async def all(self, limit: int | None = None) -> list[T]:
        """Every matching item, at most ``max_buffered_items`` of them."""
        async with self._lock:
            self._sync_parent()
            items = await self._buffered_items(limit)
        return items[:limit] if limit is not None else items
