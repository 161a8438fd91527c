"""Base cursor abstract class.

Architecture:
    A cursor presents one page window over a collection. BaseCursor owns the
    page state machine shared by every cursor:

        UNINITIALIZED -> LOADING -> READY | EMPTY | ERROR

    READY, EMPTY and ERROR go back to LOADING on the next select, next,
    previous or refresh call. Subclasses only implement ``_fetch_page``,
    which returns the page items together with the collection totals; the
    base class validates the request, notifies listeners, and commits the
    result atomically so a failed load keeps the previous page visible.

Design Decisions:
    - Optional behaviour (filtering, sorting, ...) comes from capability
      mixins, declared explicitly through ``capabilities``.
    - Capability mixins mark their state dirty until a load commits it; a
      select while changes are pending always reloads.
    - Concurrent selects on one cursor are not serialized: the last load to
      finish wins.

See Also:
    - capabilities: Filter, sort, search, mask and column mixins
    - ValueCursor, EndpointCursor, StreamingCursor: Implementations
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from time import perf_counter
from typing import Any, ClassVar, Generic, TypeVar

from ..core.config import DEFAULT_CURSOR_SETTINGS, CursorSettings
from ..core.enums import CursorCapability, CursorEvent, CursorLoadingState
from ..core.exceptions import CursorStateError
from ..models.events import PageChangeEvent
from ..models.pagination import PaginationInfo
from .telemetry import log_page_error, log_page_loaded, log_page_requested

T = TypeVar("T")

CursorListener = Callable[[PageChangeEvent], None]


class BaseCursor(ABC, Generic[T]):
    """Abstract base class for all cursors.

    Args:
        limit: Page size; defaults to the settings limit
        settings: Tunable behaviour shared with capability mixins
    """

    capabilities: ClassVar[CursorCapability] = CursorCapability.NONE

    def __init__(self, limit: int | None = None, settings: CursorSettings | None = None) -> None:
        self.settings = settings or DEFAULT_CURSOR_SETTINGS
        self._limit = _validate_limit(limit if limit is not None else self.settings.limit)
        self._limit_applied = True
        self._current = 1
        self._count = 0
        self._total_pages = 0
        self._items: list[T] = []
        self.loading_state = CursorLoadingState.UNINITIALIZED
        self._listeners: dict[CursorEvent, list[CursorListener]] = {}

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(current={self._current}, limit={self._limit}, "
            f"total_pages={self._total_pages}, state={self.loading_state.value})"
        )

    @property
    def current(self) -> int:
        """Current page, 1-indexed."""
        return self._current

    @property
    def limit(self) -> int:
        """Page size."""
        return self._limit

    @limit.setter
    def limit(self, value: int) -> None:
        value = _validate_limit(value)
        if value != self._limit:
            self._limit = value
            self._limit_applied = False
            self._on_limit_changed()

    @property
    def count(self) -> int:
        """Number of items in the collection (may be approximate)."""
        return self._count

    @property
    def total_pages(self) -> int:
        return self._total_pages

    @property
    def items(self) -> list[T]:
        """Items of the current page."""
        return list(self._items)

    @property
    def is_initialized(self) -> bool:
        return self.loading_state is not CursorLoadingState.UNINITIALIZED

    def supports(self, capability: CursorCapability) -> bool:
        """Whether this cursor implements capability."""
        return capability in self.capabilities

    # Observers

    def add_listener(self, event: CursorEvent, listener: CursorListener) -> None:
        self._listeners.setdefault(CursorEvent(event), []).append(listener)

    def remove_listener(self, event: CursorEvent, listener: CursorListener) -> None:
        listeners = self._listeners.get(CursorEvent(event), [])
        if listener in listeners:
            listeners.remove(listener)

    def _emit(self, event: PageChangeEvent) -> None:
        for listener in list(self._listeners.get(event.event, [])):
            listener(event)

    # Navigation

    def has_previous(self) -> bool:
        return self._current > 1

    def has_next(self) -> bool:
        return self._current < self._total_pages

    async def next(self) -> list[T]:
        """Load the page after the current one.

        Raises:
            CursorStateError: When the current page is the last one
        """
        if not self.has_next():
            raise CursorStateError("There is no next page", page=self._current + 1)
        return await self.select(self._current + 1)

    async def previous(self) -> list[T]:
        """Load the page before the current one.

        Raises:
            CursorStateError: When the current page is the first one
        """
        if not self.has_previous():
            raise CursorStateError("There is no previous page", page=self._current - 1)
        return await self.select(self._current - 1)

    async def refresh(self) -> list[T]:
        """Reload the current page."""
        return await self.select(self._current, force_reload=True)

    async def select(self, page: int, force_reload: bool = False) -> list[T]:
        """Load page.

        Resolves immediately with the current items when page is already
        loaded, nothing is pending and force_reload is False.

        Args:
            page: Page to load, 1-indexed
            force_reload: Reload even if page is the current page

        Returns:
            Items of the loaded page

        Raises:
            CursorStateError: When page is not a positive integer or lies
                beyond the known number of pages
        """
        if not isinstance(page, int) or isinstance(page, bool) or page < 1:
            raise CursorStateError(f"Invalid page number {page!r}", page=page if isinstance(page, int) else None)

        pending = self._has_pending_changes()
        settled = self.loading_state in (CursorLoadingState.READY, CursorLoadingState.EMPTY)
        if page == self._current and settled and not force_reload and not pending:
            return self.items
        if self.is_initialized and not pending and 0 < self._total_pages < page:
            raise CursorStateError(
                f"Page {page} is beyond the last page ({self._total_pages})",
                page=page,
            )

        name = type(self).__name__
        log_page_requested(cursor=name, page=page, limit=self._limit, force_reload=force_reload)
        self._emit(PageChangeEvent(CursorEvent.BEFORE_PAGE_CHANGE, page))
        self.loading_state = CursorLoadingState.LOADING
        started = perf_counter()

        try:
            info = await self._fetch_page(page)
        except Exception as e:
            self.loading_state = CursorLoadingState.ERROR
            log_page_error(cursor=name, page=page, error_type=type(e).__name__, error_message=str(e))
            self._emit(PageChangeEvent(CursorEvent.ERROR, page, error=e))
            raise

        self._commit(page, info)
        log_page_loaded(
            cursor=name,
            page=page,
            items=len(self._items),
            count=self._count,
            total_pages=self._total_pages,
            latency_ms=(perf_counter() - started) * 1000.0,
        )
        self._emit(PageChangeEvent(CursorEvent.AFTER_PAGE_CHANGE, page, self.items))
        return self.items

    async def all(self, limit: int | None = None) -> list[T]:
        """Items of every page, at most limit when given."""
        return await get_all_cursor_pages(self, limit)

    def _commit(self, page: int, info: PaginationInfo) -> None:
        self._current = page
        self._items = list(info.items)
        self._count = info.count
        self._total_pages = info.total_pages
        self._limit_applied = True
        self._mark_applied()
        self.loading_state = CursorLoadingState.READY if self._items else CursorLoadingState.EMPTY

    # Hooks

    @abstractmethod
    async def _fetch_page(self, page: int) -> PaginationInfo:
        """Produce page and the collection totals without touching cursor state."""
        ...

    def _has_pending_changes(self) -> bool:
        """Whether settings changed since the last committed load."""
        return not self._limit_applied

    def _mark_applied(self) -> None:
        """Record that pending settings were applied by a committed load."""

    def _on_limit_changed(self) -> None:
        """Called after the page size changed."""


async def get_all_cursor_pages(cursor: BaseCursor[Any], max_items: int | None = None) -> list[Any]:
    """Collect the items of every page of cursor.

    Pages are loaded in order starting from the first; afterwards the cursor
    is moved back to the page it showed before.

    Args:
        cursor: Cursor to drain
        max_items: Stop once this many items are collected

    Returns:
        Items in page order
    """
    restore = cursor.current if cursor.loading_state is CursorLoadingState.READY else None
    collected: list[Any] = []
    page = 1
    while True:
        collected.extend(await cursor.select(page))
        if max_items is not None and len(collected) >= max_items:
            collected = collected[:max_items]
            break
        if not cursor.has_next():
            break
        page += 1

    if restore is not None and restore != cursor.current:
        await cursor.select(restore)
    return collected


def _validate_limit(limit: Any) -> int:
    if not isinstance(limit, int) or isinstance(limit, bool) or limit < 1:
        raise CursorStateError(f"Invalid page size {limit!r}")
    return limit
