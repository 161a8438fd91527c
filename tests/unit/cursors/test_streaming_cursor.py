"""Unit tests for StreamingCursor."""

import math

import pytest

from hyperschema.services.core import CursorLoadingState, CursorSettings
from hyperschema.services.cursors import BaseCursor, StreamingCursor, ValueCursor
from hyperschema.services.models import PageMapItem, PaginationInfo


class PlainCursor(BaseCursor):
    """Cursor without optional capabilities."""

    def __init__(self, source, limit):
        super().__init__(limit=limit)
        self.source = source
        self.loads = []

    async def _fetch_page(self, page):
        self.loads.append(page)
        start = (page - 1) * self._limit
        return PaginationInfo(
            self.source[start : start + self._limit],
            len(self.source),
            math.ceil(len(self.source) / self._limit),
        )


def rows(count):
    return [{"n": i, "even": i % 2 == 0} for i in range(count)]


def numbers(items):
    return [item["n"] for item in items]


class TestRepagination:
    """Test page boundaries that differ from the parent's."""

    @pytest.mark.asyncio
    async def test_page_map(self):
        """Test client pages of seven over parent pages of three."""
        cursor = StreamingCursor(PlainCursor(rows(15), limit=3), limit=7)

        assert numbers(await cursor.select(1)) == list(range(7))
        assert numbers(await cursor.select(2)) == list(range(7, 14))
        assert numbers(await cursor.select(3)) == [14]
        assert cursor.page_map == [
            PageMapItem(1, 0, 3, 1),
            PageMapItem(3, 1, 5, 2),
            PageMapItem(5, 2, 5, 3),
        ]
        assert (cursor.count, cursor.total_pages) == (15, 3)
        assert not cursor.has_next()

    @pytest.mark.asyncio
    async def test_jump_maps_earlier_pages(self):
        """Test selecting a later page maps every page before it."""
        cursor = StreamingCursor(PlainCursor(rows(15), limit=3), limit=7)
        assert numbers(await cursor.select(2)) == list(range(7, 14))
        assert len(cursor.page_map) == 2

    @pytest.mark.asyncio
    async def test_replay(self):
        """Test going back re-reads the mapped parent slice."""
        cursor = StreamingCursor(PlainCursor(rows(15), limit=3), limit=7)
        await cursor.select(2)
        assert numbers(await cursor.select(1)) == list(range(7))
        assert len(cursor.page_map) == 2

    @pytest.mark.asyncio
    async def test_limit_change_resets_map(self):
        """Test a new page size discards the page map."""
        cursor = StreamingCursor(PlainCursor(rows(15), limit=3), limit=7)
        await cursor.select(1)
        cursor.limit = 5
        assert cursor.page_map == []
        assert numbers(await cursor.select(1)) == list(range(5))

    @pytest.mark.asyncio
    async def test_empty_parent(self):
        """Test an empty parent yields an empty first page."""
        cursor = StreamingCursor(PlainCursor([], limit=3), limit=7)
        assert await cursor.select(1) == []
        assert cursor.loading_state is CursorLoadingState.EMPTY
        assert cursor.total_pages == 0


class TestClientSideFiltering:
    """Test filters applied by the streaming cursor itself."""

    @pytest.mark.asyncio
    async def test_filtered_pages(self):
        """Test pages are filled with matching items only."""
        parent = PlainCursor(rows(15), limit=3)
        cursor = StreamingCursor(parent, limit=3)
        cursor.filter_by({"path": "/even", "value": True})

        assert numbers(await cursor.select(1)) == [0, 2, 4]
        assert cursor.has_next()
        assert numbers(await cursor.select(3)) == [12, 14]
        assert numbers(await cursor.select(2)) == [6, 8, 10]
        assert cursor.count == 8
        assert cursor.total_pages == 3

    @pytest.mark.asyncio
    async def test_next_after_last_match(self):
        """Test following has_next past the last match ends on an empty page."""
        parent = PlainCursor(rows(12), limit=3)
        cursor = StreamingCursor(parent, limit=3)
        cursor.filter_by({"path": "/n", "operator": "lt", "value": 3})

        assert numbers(await cursor.select(1)) == [0, 1, 2]
        assert cursor.has_next()

        assert await cursor.next() == []
        assert cursor.loading_state is CursorLoadingState.EMPTY
        assert (cursor.count, cursor.total_pages) == (3, 1)
        assert not cursor.has_next()
        assert numbers(await cursor.previous()) == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_estimate_is_capped(self):
        """Test the page estimate respects the buffer bound."""
        parent = PlainCursor(rows(100), limit=10)
        cursor = StreamingCursor(parent, limit=5, settings=CursorSettings(max_buffered_items=20))
        cursor.filter_by({"path": "/even", "value": True})
        await cursor.select(1)
        assert cursor.total_pages == 4

    @pytest.mark.asyncio
    async def test_filters_accumulate(self):
        """Test filters are added rather than replaced by default."""
        cursor = StreamingCursor(PlainCursor(rows(15), limit=3), limit=10)
        cursor.filter_by({"path": "/even", "value": True})
        cursor.filter_by({"path": "/n", "operator": "gt", "value": 9})
        assert numbers(await cursor.select(1)) == [10, 12, 14]

    @pytest.mark.asyncio
    async def test_filter_change_resets_map(self):
        """Test new filters discard the page map."""
        cursor = StreamingCursor(PlainCursor(rows(15), limit=3), limit=3)
        cursor.filter_by({"path": "/even", "value": True})
        await cursor.select(2)
        cursor.clear_filters()
        assert numbers(await cursor.select(1)) == [0, 1, 2]
        assert len(cursor.page_map) == 1

    @pytest.mark.asyncio
    async def test_all(self):
        """Test all matching items."""
        cursor = StreamingCursor(PlainCursor(rows(15), limit=4), limit=3)
        cursor.filter_by({"path": "/even", "value": False})
        assert numbers(await cursor.all()) == [1, 3, 5, 7, 9, 11, 13]
        assert numbers(await cursor.all(2)) == [1, 3]


class TestClientSideSorting:
    """Test sorting through the item buffer."""

    @pytest.mark.asyncio
    async def test_sorted_pages(self):
        """Test pages come from the sorted buffer."""
        parent = PlainCursor(rows(10), limit=4)
        cursor = StreamingCursor(parent, limit=3)
        cursor.sort_by({"path": "/n", "direction": "desc"})

        assert numbers(await cursor.select(1)) == [9, 8, 7]
        assert numbers(await cursor.select(4)) == [0]
        assert cursor.total_pages == 4
        assert parent.loads == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_buffer_bound(self):
        """Test at most max_buffered_items parent items are buffered."""
        parent = PlainCursor(rows(10), limit=4)
        cursor = StreamingCursor(parent, limit=3, settings=CursorSettings(max_buffered_items=5))
        cursor.sort_by({"path": "/n", "direction": "desc"})
        assert numbers(await cursor.select(1)) == [4, 3, 2]
        assert cursor.count == 5


class TestDelegation:
    """Test filters and sorters handed to a capable parent."""

    @pytest.mark.asyncio
    async def test_parent_filters_and_sorts(self):
        """Test the parent receives the filters and sorters."""
        parent = ValueCursor(rows(15), limit=4)
        cursor = StreamingCursor(parent, limit=3)
        cursor.filter_by({"path": "/even", "value": True})
        cursor.sort_by({"path": "/n", "direction": "desc"})

        assert numbers(await cursor.select(1)) == [14, 12, 10]
        assert [f.path for f in parent.filters] == ["/even"]
        assert [s.path for s in parent.sorters] == ["/n"]
        assert cursor.count == 8
        assert cursor.total_pages == 3
        assert cursor.is_parent_filterable and cursor.is_parent_sortable
