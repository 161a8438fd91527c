"""Data models for schema navigation and cursors.

Architecture:
    Serializable descriptors (links, columns, filters, sorters) are frozen
    pydantic v2 models so they can be validated from raw JSON. Runtime
    records produced by cursors are frozen dataclasses.

See Also:
    - navigator: Produces link and column descriptors from schemas
    - cursors: Consumes filter and sort descriptors
"""

from .collection import (
    CollectionFilterDescriptor,
    CollectionSortDescriptor,
    get_sanitized_filters,
    get_sanitized_sorters,
    inverse_sort_direction,
    parse_sort_direction,
)
from .events import PageChangeEvent
from .pagination import PageMapItem, PaginationInfo
from .schema import FieldDescriptor, SchemaColumnDescriptor, SchemaHyperlinkDescriptor

__all__ = [
    "CollectionFilterDescriptor",
    "CollectionSortDescriptor",
    "FieldDescriptor",
    "PageChangeEvent",
    "PageMapItem",
    "PaginationInfo",
    "SchemaColumnDescriptor",
    "SchemaHyperlinkDescriptor",
    "get_sanitized_filters",
    "get_sanitized_sorters",
    "inverse_sort_direction",
    "parse_sort_direction",
]
