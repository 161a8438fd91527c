"""Library-wide defaults.

Constants are plain module attributes; per-cursor overrides travel in a
frozen ``CursorSettings`` instance handed to the cursor constructor.
"""

from __future__ import annotations

from dataclasses import dataclass

from .enums import UnknownOperatorPolicy

DEFAULT_PAGE_LIMIT = 40
DEFAULT_STAR_LIMIT = 40
MAX_BUFFERED_ITEMS = 2000
DEFAULT_HTTP_TIMEOUT = 30.0
DEFAULT_LANGUAGE = "en"
DEFAULT_FIELDSET = "default"
DEFAULT_SEARCH_TERM_PROPERTY = "search"

# Conventional list relation names, in priority order
LIST_LINK_RELATIONS = ("list", "collection", "index")

# Pagination keys, camelCase spelling; snake/kebab variants are derived
PAGE_REQUEST_KEYS = ("page", "pageNumber", "index")
LIMIT_REQUEST_KEYS = ("limit", "perPage")
COUNT_RESPONSE_KEYS = ("totalCount", "itemCount", "count")
PAGES_RESPONSE_KEYS = ("pages", "numPages", "totalPages")
ITEMS_RESPONSE_KEYS = ("items", "data", "collection")
META_RESPONSE_KEYS = ("pagination", "meta")

IDENTITY_NAMES = ("id", "uid", "guid")
IDENTITY_SUFFIXES = ("id", "uid")
NAME_LIKE_IDENTITIES = ("name", "identity", "internalname")

DEFAULT_VISIBLE_FIELD_TYPES = ("integer", "numeric", "number", "string", "boolean")
COLUMN_PROPERTY_TYPES = ("string", "number", "integer", "boolean")
DATE_FORMATS = ("date", "date-time", "datetime", "time")

SCHEMA_CACHE_BUCKET = "schemacache"
SCHEMA_CACHE_ROOT_KEY = "schemacache-root"


@dataclass(frozen=True)
class CursorSettings:
    """Tunable cursor behaviour.

    Attributes:
        limit: Page size used when the cursor is created
        max_buffered_items: Upper bound of items a streaming cursor buffers
        unknown_operator_policy: Handling of unrecognised filter operators
        search_term_property: Request key carrying search terms to endpoints
    """

    limit: int = DEFAULT_PAGE_LIMIT
    max_buffered_items: int = MAX_BUFFERED_ITEMS
    unknown_operator_policy: UnknownOperatorPolicy = UnknownOperatorPolicy.NO_MATCH
    search_term_property: str = DEFAULT_SEARCH_TERM_PROPERTY

    def __post_init__(self) -> None:
        if self.limit < 1:
            raise ValueError("limit must be positive")
        if self.max_buffered_items < 1:
            raise ValueError("max_buffered_items must be positive")


DEFAULT_CURSOR_SETTINGS = CursorSettings()
