"""Unit tests for the BaseCursor page state machine."""

import math

import pytest

from hyperschema.services.core import CursorEvent, CursorLoadingState, CursorStateError
from hyperschema.services.cursors import BaseCursor, get_all_cursor_pages
from hyperschema.services.models import PaginationInfo


class ListCursor(BaseCursor):
    """Cursor over a list that records every load."""

    def __init__(self, source, limit=2):
        super().__init__(limit=limit)
        self.source = source
        self.loads = []
        self.error = None

    async def _fetch_page(self, page):
        self.loads.append(page)
        if self.error is not None:
            raise self.error
        start = (page - 1) * self._limit
        return PaginationInfo(
            self.source[start : start + self._limit],
            len(self.source),
            math.ceil(len(self.source) / self._limit),
        )


@pytest.fixture
def cursor():
    return ListCursor(list(range(5)))


class TestSelect:
    """Test page selection."""

    @pytest.mark.asyncio
    async def test_select_loads_page(self, cursor):
        """Test a select commits items and totals."""
        assert cursor.loading_state is CursorLoadingState.UNINITIALIZED
        assert await cursor.select(2) == [2, 3]
        assert cursor.current == 2
        assert cursor.count == 5
        assert cursor.total_pages == 3
        assert cursor.loading_state is CursorLoadingState.READY

    @pytest.mark.asyncio
    async def test_current_page_is_not_reloaded(self, cursor):
        """Test selecting the loaded page reuses its items."""
        await cursor.select(1)
        await cursor.select(1)
        assert cursor.loads == [1]
        await cursor.refresh()
        assert cursor.loads == [1, 1]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("page", [0, -1, 1.5, True, "1"])
    async def test_invalid_page(self, cursor, page):
        """Test page numbers must be positive integers."""
        with pytest.raises(CursorStateError):
            await cursor.select(page)
        assert cursor.loads == []

    @pytest.mark.asyncio
    async def test_page_beyond_last(self, cursor):
        """Test a known last page bounds selection without loading."""
        await cursor.select(1)
        with pytest.raises(CursorStateError) as exc_info:
            await cursor.select(4)
        assert exc_info.value.page == 4
        assert cursor.loads == [1]

    @pytest.mark.asyncio
    async def test_next_and_previous(self, cursor):
        """Test stepping through pages."""
        await cursor.select(1)
        assert not cursor.has_previous()
        assert await cursor.next() == [2, 3]
        assert await cursor.next() == [4]
        assert not cursor.has_next()
        with pytest.raises(CursorStateError):
            await cursor.next()
        assert await cursor.previous() == [2, 3]

    @pytest.mark.asyncio
    async def test_previous_on_first_page(self, cursor):
        """Test there is nothing before page one."""
        await cursor.select(1)
        with pytest.raises(CursorStateError):
            await cursor.previous()

    @pytest.mark.asyncio
    async def test_empty(self):
        """Test an empty collection settles in the empty state."""
        cursor = ListCursor([])
        assert await cursor.select(1) == []
        assert cursor.loading_state is CursorLoadingState.EMPTY
        assert cursor.total_pages == 0
        assert not cursor.has_next()

    @pytest.mark.asyncio
    async def test_limit_change_reloads(self, cursor):
        """Test a new page size is applied by the next select."""
        await cursor.select(1)
        cursor.limit = 3
        assert await cursor.select(1) == [0, 1, 2]
        assert cursor.total_pages == 2

    def test_invalid_limit(self, cursor):
        """Test the page size must be positive."""
        with pytest.raises(CursorStateError):
            cursor.limit = 0
        with pytest.raises(CursorStateError):
            ListCursor([], limit=-1)


class TestErrors:
    """Test failed loads."""

    @pytest.mark.asyncio
    async def test_failed_load_keeps_previous_page(self, cursor):
        """Test the error state leaves the committed page intact."""
        await cursor.select(1)
        cursor.error = RuntimeError("backend down")
        with pytest.raises(RuntimeError, match="backend down"):
            await cursor.select(2)
        assert cursor.loading_state is CursorLoadingState.ERROR
        assert cursor.current == 1
        assert cursor.items == [0, 1]

    @pytest.mark.asyncio
    async def test_recovers_after_error(self, cursor):
        """Test a later select leaves the error state."""
        cursor.error = RuntimeError("flaky")
        with pytest.raises(RuntimeError):
            await cursor.select(1)
        cursor.error = None
        assert await cursor.select(1) == [0, 1]
        assert cursor.loading_state is CursorLoadingState.READY


class TestListeners:
    """Test page change notifications."""

    @pytest.mark.asyncio
    async def test_before_and_after(self, cursor):
        """Test listeners see the page before and its items after loading."""
        events = []
        cursor.add_listener(CursorEvent.BEFORE_PAGE_CHANGE, events.append)
        cursor.add_listener(CursorEvent.AFTER_PAGE_CHANGE, events.append)
        await cursor.select(2)

        assert [(e.event, e.page, e.items) for e in events] == [
            (CursorEvent.BEFORE_PAGE_CHANGE, 2, None),
            (CursorEvent.AFTER_PAGE_CHANGE, 2, [2, 3]),
        ]

    @pytest.mark.asyncio
    async def test_error_event(self, cursor):
        """Test the error listener receives the exception."""
        errors = []
        cursor.add_listener("error", errors.append)
        cursor.error = ValueError("bad page")
        with pytest.raises(ValueError):
            await cursor.select(1)
        assert errors[0].error is cursor.error

    @pytest.mark.asyncio
    async def test_remove_listener(self, cursor):
        """Test removed listeners are not called."""
        events = []
        cursor.add_listener(CursorEvent.AFTER_PAGE_CHANGE, events.append)
        cursor.remove_listener(CursorEvent.AFTER_PAGE_CHANGE, events.append)
        await cursor.select(1)
        assert events == []


class TestAllPages:
    """Test get_all_cursor_pages."""

    @pytest.mark.asyncio
    async def test_collects_and_restores(self, cursor):
        """Test every page is read and the cursor returns to its page."""
        await cursor.select(2)
        assert await get_all_cursor_pages(cursor) == [0, 1, 2, 3, 4]
        assert cursor.current == 2

    @pytest.mark.asyncio
    async def test_max_items(self, cursor):
        """Test collection stops at the item cap."""
        assert await cursor.all(3) == [0, 1, 2]
        assert cursor.loads == [1, 2]
