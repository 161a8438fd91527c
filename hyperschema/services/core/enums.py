"""Core enumerations shared by cursors and collection descriptors.

Architecture:
    String enums keep descriptors serializable: filter and sort descriptors
    travel through query strings and stored settings, so their values are
    plain lowercase strings. Cursor capabilities are an ``enum.Flag`` so a
    cursor class can declare any combination of optional interfaces.

Key Types:
    - CursorLoadingState: Cursor lifecycle states
    - CursorEvent: Observer notifications emitted around page loads
    - CursorCapability: Optional interfaces a cursor implements
    - SortingDirection: Ascending/descending ordering
    - CollectionFilterOperator: Filter predicate operators
    - UnknownOperatorPolicy: What to do with an operator nobody knows

See Also:
    - cursors.base: Drives CursorLoadingState transitions
    - cursors.collection: Applies filter operators and sort directions
"""

from __future__ import annotations

from enum import Enum, Flag, auto


class CursorLoadingState(str, Enum):
    """Lifecycle states of a cursor."""

    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    EMPTY = "empty"
    ERROR = "error"

    @property
    def is_settled(self) -> bool:
        """Whether no load is pending and no further transition is automatic."""
        return self in (CursorLoadingState.READY, CursorLoadingState.EMPTY, CursorLoadingState.ERROR)


class CursorEvent(str, Enum):
    """Notifications emitted by cursors to registered listeners."""

    BEFORE_PAGE_CHANGE = "before_page_change"
    AFTER_PAGE_CHANGE = "after_page_change"
    ERROR = "error"


class CursorCapability(Flag):
    """Optional interfaces implemented by a cursor class."""

    NONE = 0
    FILTERABLE = auto()
    SORTABLE = auto()
    SEARCHABLE = auto()
    MASKABLE = auto()
    COLUMNIZED = auto()


class SortingDirection(str, Enum):
    """Ordering of a sort key."""

    ASCENDING = "asc"
    DESCENDING = "desc"

    @property
    def inverse(self) -> SortingDirection:
        """Opposite direction."""
        if self is SortingDirection.ASCENDING:
            return SortingDirection.DESCENDING
        return SortingDirection.ASCENDING


class CollectionFilterOperator(str, Enum):
    """Operators understood by collection filters."""

    EQUALS = "eq"
    NOT_EQUALS = "neq"
    GREATER_THAN = "gt"
    GREATER_THAN_OR_EQUALS = "gte"
    LESS_THAN = "lt"
    LESS_THAN_OR_EQUALS = "lte"
    IN = "in"
    NOT_IN = "nin"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    CONTAINS_KEY = "contains_key"

    @classmethod
    def from_legacy(cls, value: int) -> CollectionFilterOperator:
        """Map the numeric operator codes used by older stored filters."""
        return _LEGACY_OPERATORS[value]


_LEGACY_OPERATORS = {
    0: CollectionFilterOperator.EQUALS,
    1: CollectionFilterOperator.GREATER_THAN_OR_EQUALS,
    2: CollectionFilterOperator.LESS_THAN_OR_EQUALS,
    3: CollectionFilterOperator.LESS_THAN,
    4: CollectionFilterOperator.GREATER_THAN,
    5: CollectionFilterOperator.IN,
    6: CollectionFilterOperator.NOT_EQUALS,
    7: CollectionFilterOperator.NOT_IN,
    8: CollectionFilterOperator.CONTAINS,
    9: CollectionFilterOperator.NOT_CONTAINS,
    10: CollectionFilterOperator.CONTAINS_KEY,
}


class UnknownOperatorPolicy(str, Enum):
    """Handling of filter descriptors whose operator is not recognised.

    ``NO_MATCH`` logs the operator and treats the item as not matching, so a
    page still loads with a safe but incomplete result. ``RAISE`` fails the
    filter with ``FilterOperatorError``.
    """

    NO_MATCH = "no_match"
    RAISE = "raise"
