"""Optional cursor interfaces.

Each mixin keeps its own settings and an ``applied`` flag that stays False
until the next committed page load. Mixins cooperate through
``_has_pending_changes`` and ``_mark_applied`` and must precede BaseCursor
in the bases of a cursor class. A cursor class lists the mixins it uses in
its ``capabilities`` flags; code that needs to know what a cursor can do
checks those flags instead of probing for methods.
"""

from __future__ import annotations

from typing import Any, ClassVar, Self

from ..core.enums import CollectionFilterOperator, CursorCapability, SortingDirection
from ..core.exceptions import CapabilityError
from ..models.collection import (
    CollectionFilterDescriptor,
    CollectionSortDescriptor,
    get_sanitized_filters,
    get_sanitized_sorters,
)
from ..models.schema import SchemaColumnDescriptor
from .collection import column_path


def supports(cursor: Any, capability: CursorCapability) -> bool:
    """Whether the class of cursor declares capability."""
    declared = getattr(type(cursor), "capabilities", CursorCapability.NONE)
    return capability in declared


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    return list(value) if isinstance(value, (list, tuple)) else [value]


class FilterableCursorMixin:
    """Filter descriptors applied as a conjunction on every page load."""

    replace_filters_by_default: ClassVar[bool] = True

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._filters: list[CollectionFilterDescriptor] = []
        self.are_filters_applied = True

    @property
    def filters(self) -> list[CollectionFilterDescriptor]:
        return list(self._filters)

    def filter_by(self, filters: Any, replace: bool | None = None) -> Self:
        """Set or extend the filters.

        Args:
            filters: Descriptor, mapping or list of either
            replace: Replace the current filters instead of adding to them;
                defaults to ``replace_filters_by_default``
        """
        descriptors = get_sanitized_filters(_as_list(filters))
        if replace is None:
            replace = self.replace_filters_by_default
        if replace:
            self._filters = descriptors
        else:
            self._filters.extend(descriptors)
        self.are_filters_applied = False
        return self

    def clear_filter(self, target: CollectionFilterDescriptor | str) -> Self:
        """Drop one filter, or every filter on a path when given a string."""
        if isinstance(target, str):
            remaining = [f for f in self._filters if f.path != target]
        else:
            remaining = [f for f in self._filters if f != target]
        if len(remaining) != len(self._filters):
            self._filters = remaining
            self.are_filters_applied = False
        return self

    def clear_filters(self) -> Self:
        if self._filters:
            self._filters = []
            self.are_filters_applied = False
        return self

    def _has_pending_changes(self) -> bool:
        return not self.are_filters_applied or super()._has_pending_changes()

    def _mark_applied(self) -> None:
        self.are_filters_applied = True
        super()._mark_applied()


class SortableCursorMixin:
    """Multi-key ordering applied on every page load."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._sorters: list[CollectionSortDescriptor] = []
        self.are_sorters_applied = True

    @property
    def sorters(self) -> list[CollectionSortDescriptor]:
        return list(self._sorters)

    def sort_by(self, sorters: Any, replace: bool = True) -> Self:
        """Set the sorters, or update them per path when replace is False."""
        descriptors = get_sanitized_sorters(_as_list(sorters))
        if replace:
            self._sorters = descriptors
        else:
            for descriptor in descriptors:
                positions = [i for i, s in enumerate(self._sorters) if s.path == descriptor.path]
                if positions:
                    self._sorters[positions[0]] = descriptor
                else:
                    self._sorters.append(descriptor)
        self.are_sorters_applied = False
        return self

    def clear_sort(self, target: CollectionSortDescriptor | str) -> Self:
        """Drop the sorter on a path."""
        path = target if isinstance(target, str) else target.path
        remaining = [s for s in self._sorters if s.path != path]
        if len(remaining) != len(self._sorters):
            self._sorters = remaining
            self.are_sorters_applied = False
        return self

    def clear_sorters(self) -> Self:
        if self._sorters:
            self._sorters = []
            self.are_sorters_applied = False
        return self

    def _has_pending_changes(self) -> bool:
        return not self.are_sorters_applied or super()._has_pending_changes()

    def _mark_applied(self) -> None:
        self.are_sorters_applied = True
        super()._mark_applied()


class SearchableCursorMixin:
    """Free-text search terms."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._terms: list[str] = []
        self.is_search_applied = True

    @property
    def terms(self) -> list[str]:
        return list(self._terms)

    def search(self, terms: str | list[str] | None) -> Self:
        """Search for items containing every term."""
        normalized = [term for term in _as_list(terms) if isinstance(term, str) and term]
        if normalized != self._terms:
            self._terms = normalized
            self.is_search_applied = False
        return self

    def clear_search(self) -> Self:
        return self.search(None)

    def _has_pending_changes(self) -> bool:
        return not self.is_search_applied or super()._has_pending_changes()

    def _mark_applied(self) -> None:
        self.is_search_applied = True
        super()._mark_applied()


class MaskableCursorMixin:
    """Inclusion mask applied to the items of every page."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._mask: list[str] | None = None
        self.is_mask_applied = True

    @property
    def mask(self) -> list[str] | None:
        return list(self._mask) if self._mask is not None else None

    @mask.setter
    def mask(self, pointers: list[str] | None) -> None:
        pointers = list(pointers) if pointers else None
        if pointers != self._mask:
            self._mask = pointers
            self.is_mask_applied = False

    def _has_pending_changes(self) -> bool:
        return not self.is_mask_applied or super()._has_pending_changes()

    def _mark_applied(self) -> None:
        self.is_mask_applied = True
        super()._mark_applied()


class ColumnizedCursorMixin:
    """Column definitions that translate into sorters and filters.

    Requires a cursor that also declares the sortable or filterable
    capability for the corresponding operation.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._columns: list[SchemaColumnDescriptor] = []
        self.are_columns_applied = True

    @property
    def columns(self) -> list[SchemaColumnDescriptor]:
        return list(self._columns)

    @columns.setter
    def columns(self, columns: list[SchemaColumnDescriptor | dict[str, Any]]) -> None:
        self._columns = [
            c if isinstance(c, SchemaColumnDescriptor) else SchemaColumnDescriptor.model_validate(c)
            for c in columns or []
        ]
        self.are_columns_applied = False

    def get_column(self, column_id: str) -> SchemaColumnDescriptor:
        """Column by id.

        Raises:
            CapabilityError: When the cursor has no such column
        """
        for column in self._columns:
            if column.id == column_id:
                return column
        raise CapabilityError(f"Unknown column '{column_id}'", column=column_id)

    def sort_by_column(self, column_id: str, direction: SortingDirection | str = SortingDirection.ASCENDING) -> Self:
        """Sort by the value of a sortable column.

        Raises:
            CapabilityError: When the column is unknown or not sortable
        """
        column = self.get_column(column_id)
        if not column.sortable or not supports(self, CursorCapability.SORTABLE):
            raise CapabilityError(
                f"Unable to sort on column '{column_id}'", column=column_id, capability="sortable"
            )
        return self.sort_by({"path": column_path(column.id, column.path), "direction": direction})

    def filter_by_column(
        self,
        column_id: str,
        operator: CollectionFilterOperator | str,
        value: Any,
    ) -> Self:
        """Filter on the value of a filterable column.

        Raises:
            CapabilityError: When the column is unknown or not filterable
        """
        column = self.get_column(column_id)
        if not column.filterable or not supports(self, CursorCapability.FILTERABLE):
            raise CapabilityError(
                f"Unable to filter on column '{column_id}'", column=column_id, capability="filterable"
            )
        path = column_path(column.id, column.path)
        self.clear_filter(path)
        return self.filter_by({"path": path, "operator": operator, "value": value}, replace=False)

    def _has_pending_changes(self) -> bool:
        return not self.are_columns_applied or super()._has_pending_changes()

    def _mark_applied(self) -> None:
        self.are_columns_applied = True
        super()._mark_applied()
