"""Cursor over an in-memory list.

Every load re-runs the whole pipeline from the full source list:

    filter -> search -> sort -> slice -> mask

so changing a filter or the source never leaves stale state behind.
"""

from __future__ import annotations

import copy
import math
from typing import TYPE_CHECKING, Any

from ..core.config import CursorSettings
from ..core.enums import CursorCapability
from ..core.exceptions import CursorStateError
from ..models.pagination import PaginationInfo
from ..models.schema import SchemaColumnDescriptor
from ..pointer import pointer_inclusion_mask
from .base import BaseCursor, T
from .capabilities import (
    ColumnizedCursorMixin,
    FilterableCursorMixin,
    MaskableCursorMixin,
    SearchableCursorMixin,
    SortableCursorMixin,
)
from .collection import filter_collection_by, search_collection_by, sort_collection_by

if TYPE_CHECKING:
    from ..navigator import SchemaNavigator


class ValueCursor(
    FilterableCursorMixin,
    SortableCursorMixin,
    SearchableCursorMixin,
    MaskableCursorMixin,
    ColumnizedCursorMixin,
    BaseCursor[T],
):
    """Pages through a list held in memory.

    Args:
        values: Source items
        navigator: Schema of the items; enables filter value normalization
            and provides the default columns
        limit: Page size
        settings: Cursor settings
        columns: Column definitions, defaults to the navigator columns
        copy_on_select: Hand out shallow copies of the source items
    """

    capabilities = (
        CursorCapability.FILTERABLE
        | CursorCapability.SORTABLE
        | CursorCapability.SEARCHABLE
        | CursorCapability.MASKABLE
        | CursorCapability.COLUMNIZED
    )

    def __init__(
        self,
        values: list[T] | None = None,
        navigator: SchemaNavigator | None = None,
        limit: int | None = None,
        settings: CursorSettings | None = None,
        columns: list[SchemaColumnDescriptor] | None = None,
        copy_on_select: bool = True,
    ) -> None:
        super().__init__(limit=limit, settings=settings)
        self.navigator = navigator
        self.copy_on_select = copy_on_select
        self._values: list[T] = list(values or [])
        self._values_applied = True
        if columns is None and navigator is not None:
            columns = navigator.columns
        self.columns = columns or []
        self.are_columns_applied = True

    @property
    def values(self) -> list[T]:
        """Source items."""
        return list(self._values)

    @values.setter
    def values(self, values: list[T]) -> None:
        self._values = list(values or [])
        self._values_applied = False

    def _collect(self) -> list[T]:
        items = filter_collection_by(
            self._values,
            self.filters,
            self.navigator,
            self.settings.unknown_operator_policy,
        )
        items = search_collection_by(items, self.terms)
        return sort_collection_by(items, self.sorters)

    def _present(self, item: T) -> T:
        if self._mask:
            return pointer_inclusion_mask(item, self._mask)
        if self.copy_on_select and isinstance(item, (dict, list)):
            return copy.copy(item)
        return item

    async def _fetch_page(self, page: int) -> PaginationInfo:
        collection = self._collect()
        count = len(collection)
        if count == 0:
            return PaginationInfo([], 0, 0)

        total_pages = math.ceil(count / self._limit)
        if page > total_pages:
            raise CursorStateError(
                f"Page {page} is beyond the last page ({total_pages})",
                page=page,
            )

        start = (page - 1) * self._limit
        items = [self._present(item) for item in collection[start : start + self._limit]]
        return PaginationInfo(items, count, total_pages)

    async def all(self, limit: int | None = None) -> list[T]:
        """Every matching item, in order, without moving the cursor."""
        collection = self._collect()
        if limit is not None:
            collection = collection[:limit]
        return [self._present(item) for item in collection]

    def _has_pending_changes(self) -> bool:
        return not self._values_applied or super()._has_pending_changes()

    def _mark_applied(self) -> None:
        self._values_applied = True
        super()._mark_applied()
