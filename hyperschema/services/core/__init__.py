"""Core types: exceptions, enums, configuration and ports."""

from .config import DEFAULT_CURSOR_SETTINGS, CursorSettings
from .enums import (
    CollectionFilterOperator,
    CursorCapability,
    CursorEvent,
    CursorLoadingState,
    SortingDirection,
    UnknownOperatorPolicy,
)
from .exceptions import (
    CapabilityError,
    CursorStateError,
    FilterOperatorError,
    PointerError,
    PointerNotFoundError,
    SchemaFetchError,
    SchemaNavigationError,
    ServicesError,
)
from .interfaces import (
    AgentResponse,
    Schema,
    SchemaAgent,
    SchemaCache,
    SchemaFetcher,
    SchemaValidator,
    ValidationResult,
)

__all__ = [
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
]
