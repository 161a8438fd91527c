"""Filter and sort descriptors for collections.

Descriptors are frozen pydantic models so they can be built from query
payloads or stored settings and compared by value.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from ..core.enums import CollectionFilterOperator, SortingDirection

logger = logging.getLogger(__name__)

_DESCENDING_MARKERS = {"desc", "descending", "1", "-1"}


class CollectionFilterDescriptor(BaseModel):
    """Predicate over a pointer-addressed item field.

    A path of ``*`` matches when any own field of the item matches.
    Operators that are not members of ``CollectionFilterOperator`` are kept
    as plain strings and handled by the unknown operator policy.
    """

    path: str
    operator: CollectionFilterOperator | str = CollectionFilterOperator.EQUALS
    value: Any = None

    model_config = ConfigDict(frozen=True)

    @field_validator("operator", mode="before")
    @classmethod
    def validate_operator(cls, v: Any) -> Any:
        """Accept operator values, member names and legacy numeric codes."""
        if isinstance(v, CollectionFilterOperator):
            return v
        if isinstance(v, int) and not isinstance(v, bool):
            try:
                return CollectionFilterOperator.from_legacy(v)
            except KeyError:
                return str(v)
        if isinstance(v, str):
            try:
                return CollectionFilterOperator(v.lower())
            except ValueError:
                pass
            member = CollectionFilterOperator.__members__.get(v.upper())
            return member if member is not None else v
        return v

    @property
    def is_known_operator(self) -> bool:
        return isinstance(self.operator, CollectionFilterOperator)


class CollectionSortDescriptor(BaseModel):
    """Ordering by a pointer-addressed item field."""

    path: str
    direction: SortingDirection = SortingDirection.ASCENDING

    model_config = ConfigDict(frozen=True)

    @field_validator("direction", mode="before")
    @classmethod
    def validate_direction(cls, v: Any) -> SortingDirection:
        return parse_sort_direction(v)


def parse_sort_direction(value: Any) -> SortingDirection:
    """Anything but a descending marker (``DESC``, ``1``) sorts ascending."""
    if isinstance(value, SortingDirection):
        return value
    if str(value).lower() in _DESCENDING_MARKERS:
        return SortingDirection.DESCENDING
    return SortingDirection.ASCENDING


def inverse_sort_direction(direction: SortingDirection | str) -> SortingDirection:
    """Opposite of direction."""
    return parse_sort_direction(direction).inverse


def get_sanitized_filters(filters: Iterable[Any] | None) -> list[CollectionFilterDescriptor]:
    """Build filter descriptors from descriptors or mappings.

    Entries that cannot be turned into a descriptor are logged and dropped.
    """
    sanitized: list[CollectionFilterDescriptor] = []
    for entry in filters or []:
        if isinstance(entry, CollectionFilterDescriptor):
            sanitized.append(entry)
            continue
        try:
            sanitized.append(CollectionFilterDescriptor.model_validate(entry))
        except ValidationError as e:
            logger.warning("invalid_filter_descriptor", extra={"entry": repr(entry), "error": str(e)})
    return sanitized


def get_sanitized_sorters(sorters: Iterable[Any] | None) -> list[CollectionSortDescriptor]:
    """Build sort descriptors from descriptors or mappings.

    Entries that cannot be turned into a descriptor are logged and dropped.
    """
    sanitized: list[CollectionSortDescriptor] = []
    for entry in sorters or []:
        if isinstance(entry, CollectionSortDescriptor):
            sanitized.append(entry)
            continue
        try:
            sanitized.append(CollectionSortDescriptor.model_validate(entry))
        except ValidationError as e:
            logger.warning("invalid_sort_descriptor", extra={"entry": repr(entry), "error": str(e)})
    return sanitized
