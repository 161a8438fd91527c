"""Custom exception hierarchy."""

from __future__ import annotations


class ServicesError(Exception):
    """Base exception for all library errors."""

    pass


class PointerError(ServicesError):
    """Pointer could not be parsed or resolved.

    Raised for malformed pointer syntax, out-of-bounds array indexes and
    structurally invalid operations such as ``-`` in a read or ``*`` in a
    write. Carries the offending pointer and the index of the segment that
    failed, when known.
    """

    def __init__(
        self,
        message: str,
        pointer: str | None = None,
        index: int | None = None,
    ) -> None:
        super().__init__(message)
        self.pointer = pointer
        self.index = index


class PointerNotFoundError(PointerError):
    """Pointer addresses a path that does not exist in the data."""

    pass


class SchemaNavigationError(ServicesError):
    """Schema cannot be navigated.

    Raised when a navigator cannot resolve its property root, its identity
    or a referenced schema.
    """

    def __init__(self, message: str, schema_id: str | None = None) -> None:
        super().__init__(message)
        self.schema_id = schema_id


class CursorStateError(ServicesError):
    """Cursor was asked for a page it cannot provide."""

    def __init__(self, message: str, page: int | None = None) -> None:
        super().__init__(message)
        self.page = page


class CapabilityError(ServicesError):
    """Cursor or column does not support the requested operation."""

    def __init__(
        self,
        message: str,
        column: str | None = None,
        capability: str | None = None,
    ) -> None:
        super().__init__(message)
        self.column = column
        self.capability = capability


class FilterOperatorError(ServicesError):
    """Filter descriptor uses an operator that is not understood."""

    def __init__(self, message: str, operator: object = None) -> None:
        super().__init__(message)
        self.operator = operator


class SchemaFetchError(ServicesError):
    """Schema could not be fetched from its source."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        schema_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.schema_id = schema_id
