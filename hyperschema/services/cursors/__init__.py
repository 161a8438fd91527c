"""Paginated views over collections."""

from .base import BaseCursor, CursorListener, get_all_cursor_pages
from .capabilities import (
    ColumnizedCursorMixin,
    FilterableCursorMixin,
    MaskableCursorMixin,
    SearchableCursorMixin,
    SortableCursorMixin,
    supports,
)
from .collection import (
    apply_filter,
    filter_collection_by,
    filter_predicate,
    normalize_value,
    search_collection_by,
    sort_collection_by,
)
from .endpoint import EndpointCursor, extract_pagination_info, pagination_request
from .streaming import StreamingCursor
from .value import ValueCursor

__all__ = [
    "BaseCursor",
    "ColumnizedCursorMixin",
    "CursorListener",
    "EndpointCursor",
    "FilterableCursorMixin",
    "MaskableCursorMixin",
    "SearchableCursorMixin",
    "SortableCursorMixin",
    "StreamingCursor",
    "ValueCursor",
    "apply_filter",
    "extract_pagination_info",
    "filter_collection_by",
    "filter_predicate",
    "get_all_cursor_pages",
    "normalize_value",
    "pagination_request",
    "search_collection_by",
    "sort_collection_by",
    "supports",
]
