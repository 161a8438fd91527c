"""Hyperschema Services - JSON pointers, schema navigation and cursors."""

from .cache import MemorySchemaCache, MemoryStorage, SchemaIndex, SchemaStorage, StorageSchemaCache
from .core import (
    DEFAULT_CURSOR_SETTINGS,
    AgentResponse,
    CapabilityError,
    CollectionFilterOperator,
    CursorCapability,
    CursorEvent,
    CursorLoadingState,
    CursorSettings,
    CursorStateError,
    FilterOperatorError,
    PointerError,
    PointerNotFoundError,
    Schema,
    SchemaAgent,
    SchemaCache,
    SchemaFetchError,
    SchemaFetcher,
    SchemaNavigationError,
    SchemaValidator,
    ServicesError,
    SortingDirection,
    UnknownOperatorPolicy,
    ValidationResult,
)
from .cursors import (
    BaseCursor,
    EndpointCursor,
    StreamingCursor,
    ValueCursor,
    filter_collection_by,
    get_all_cursor_pages,
    search_collection_by,
    sort_collection_by,
    supports,
)
from .io import HTTPSchemaFetcher, NullSchemaFetcher, SchemaLoader
from .models import (
    CollectionFilterDescriptor,
    CollectionSortDescriptor,
    FieldDescriptor,
    PageChangeEvent,
    PageMapItem,
    PaginationInfo,
    SchemaColumnDescriptor,
    SchemaHyperlinkDescriptor,
    get_sanitized_filters,
    get_sanitized_sorters,
    inverse_sort_direction,
)
from .navigator import SchemaNavigator, get_applicable_property_definitions, resolve_and_merge_schemas
from .pointer import (
    compile_pointer_get,
    create_pointer,
    fix_json_pointer_path,
    is_json_pointer,
    is_relative_json_pointer,
    is_star_pointer,
    parse_pointer_root_adjusted,
    pointer_copy,
    pointer_exclusion_mask,
    pointer_get,
    pointer_get_all,
    pointer_has,
    pointer_inclusion_mask,
    pointer_remove,
    pointer_set,
    try_pointer_get,
)

__version__ = "0.1.0"

__all__ = [
    # Pointers
    "compile_pointer_get",
    "create_pointer",
    "fix_json_pointer_path",
    "is_json_pointer",
    "is_relative_json_pointer",
    "is_star_pointer",
    "parse_pointer_root_adjusted",
    "pointer_copy",
    "pointer_exclusion_mask",
    "pointer_get",
    "pointer_get_all",
    "pointer_has",
    "pointer_inclusion_mask",
    "pointer_remove",
    "pointer_set",
    "try_pointer_get",
    # Navigator
    "SchemaNavigator",
    "get_applicable_property_definitions",
    "resolve_and_merge_schemas",
    # Cursors
    "BaseCursor",
    "EndpointCursor",
    "StreamingCursor",
    "ValueCursor",
    "filter_collection_by",
    "get_all_cursor_pages",
    "search_collection_by",
    "sort_collection_by",
    "supports",
    # Models
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
    # Caches and loading
    "HTTPSchemaFetcher",
    "MemorySchemaCache",
    "MemoryStorage",
    "NullSchemaFetcher",
    "SchemaIndex",
    "SchemaLoader",
    "SchemaStorage",
    "StorageSchemaCache",
    # Core
    "DEFAULT_CURSOR_SETTINGS",
    "AgentResponse",
    "CapabilityError",
    "CollectionFilterOperator",
    "CursorCapability",
    "CursorEvent",
    "CursorLoadingState",
    "CursorSettings",
    "CursorStateError",
    "FilterOperatorError",
    "PointerError",
    "PointerNotFoundError",
    "Schema",
    "SchemaAgent",
    "SchemaCache",
    "SchemaFetchError",
    "SchemaFetcher",
    "SchemaNavigationError",
    "SchemaValidator",
    "ServicesError",
    "SortingDirection",
    "UnknownOperatorPolicy",
    "ValidationResult",
    "__version__",
]
