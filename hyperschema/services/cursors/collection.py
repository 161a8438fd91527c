"""Filtering, searching and sorting of in-memory collections.

Filters form a conjunction: an item is kept when every descriptor matches.
A descriptor with path ``*`` matches when any own field of the item does.
Comparisons coerce values to lower-case strings, except the ordering
operators, which compare numbers and dates directly and otherwise compare
the length of strings and arrays against a numeric filter value.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Any

from ..core.config import DATE_FORMATS
from ..core.enums import CollectionFilterOperator, SortingDirection, UnknownOperatorPolicy
from ..core.exceptions import FilterOperatorError, PointerError, SchemaNavigationError
from ..models.collection import CollectionFilterDescriptor, CollectionSortDescriptor
from ..pointer import compile_pointer_get, escape_part, fix_json_pointer_path
from .telemetry import log_unknown_filter_operator

if TYPE_CHECKING:
    from ..navigator import SchemaNavigator

logger = logging.getLogger(__name__)

Op = CollectionFilterOperator

_EPOCH_DIGITS = re.compile(r"\d+")


def _text(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _ordered_operands(left: Any, right: Any) -> tuple[Any, Any] | None:
    if _is_number(left) and _is_number(right):
        return left, right
    if isinstance(left, datetime) and isinstance(right, datetime):
        return left, right
    if isinstance(left, date) and isinstance(right, date) and not isinstance(left, datetime):
        return left, right
    if isinstance(left, (str, list, tuple)) and _is_number(right):
        return len(left), right
    return None


_ORDERINGS: dict[CollectionFilterOperator, Callable[[Any, Any], bool]] = {
    Op.LESS_THAN: lambda a, b: a < b,
    Op.LESS_THAN_OR_EQUALS: lambda a, b: a <= b,
    Op.GREATER_THAN: lambda a, b: a > b,
    Op.GREATER_THAN_OR_EQUALS: lambda a, b: a >= b,
}


def _contains_key(value: Any, keys: Any) -> bool:
    if isinstance(value, dict):
        present = {str(key).lower() for key in value}
        wanted = keys if isinstance(keys, (list, tuple)) else [keys]
        return all(_text(key).lower() in present for key in wanted)
    if isinstance(value, list) and _is_number(keys):
        return 0 <= keys < len(value)
    return False


def _is_member(value: Any, candidates: Any) -> bool:
    if isinstance(candidates, (list, tuple)) and not isinstance(value, (list, tuple, dict)):
        return _text(value).lower() in {_text(candidate).lower() for candidate in candidates}
    return _text(value).lower() == _text(candidates).lower()


def apply_filter(
    descriptor: CollectionFilterDescriptor,
    value: Any,
    policy: UnknownOperatorPolicy = UnknownOperatorPolicy.NO_MATCH,
) -> bool:
    """Whether value satisfies descriptor.

    Raises:
        FilterOperatorError: For unknown operators under the ``RAISE`` policy
    """
    operator, expected = descriptor.operator, descriptor.value

    if operator == Op.EQUALS:
        return _text(value).lower() == _text(expected).lower()
    if operator == Op.NOT_EQUALS:
        return _text(value).lower() != _text(expected).lower()
    if operator == Op.CONTAINS:
        return _text(expected).lower() in _text(value).lower()
    if operator == Op.NOT_CONTAINS:
        return _text(expected).lower() not in _text(value).lower()
    if operator == Op.CONTAINS_KEY:
        return _contains_key(value, expected)
    if operator == Op.IN:
        return _is_member(value, expected)
    if operator == Op.NOT_IN:
        return not _is_member(value, expected)
    if operator in _ORDERINGS:
        operands = _ordered_operands(value, expected)
        return operands is not None and _ORDERINGS[operator](*operands)

    if policy is UnknownOperatorPolicy.RAISE:
        raise FilterOperatorError(f"Unknown filter operator {operator!r}", operator=operator)
    log_unknown_filter_operator(operator=operator, path=descriptor.path)
    return False


def own_fields(item: Any) -> list[tuple[str, Any]]:
    """Key/value pairs of the own fields of an item."""
    if isinstance(item, dict):
        return list(item.items())
    if isinstance(item, list):
        return [(str(i), value) for i, value in enumerate(item)]
    return []


def value_getter(path: str) -> Callable[[Any], Any]:
    """Compiled accessor for a filter or sort path returning None when absent."""
    accessor = compile_pointer_get(fix_json_pointer_path(path))

    def get(item: Any) -> Any:
        try:
            return accessor(item)
        except PointerError:
            return None

    return get


def normalize_value(value: Any, descriptors: list[dict[str, Any]]) -> Any:
    """Coerce value to the type declared by the first applicable schema.

    Values that already fit one of the schemas are returned unchanged.
    Date-formatted strings (and epoch seconds or milliseconds) become
    datetimes so ordering filters compare them chronologically.
    """
    if not descriptors:
        return value
    for descriptor in descriptors:
        if _fits(value, descriptor):
            return value
    if value is None:
        return None

    descriptor = descriptors[0]
    if isinstance(descriptor.get("oneOf"), list):
        return normalize_value(value, [d for d in descriptor["oneOf"] if isinstance(d, dict)])
    if isinstance(value, list):
        return [normalize_value(entry, descriptors) for entry in value]

    schema_type = descriptor.get("type")
    if schema_type == "string":
        if descriptor.get("format") in DATE_FORMATS:
            return _parse_date(value)
        return _text(value)
    if schema_type == "integer":
        try:
            return int(float(_text(value)))
        except ValueError:
            return 0
    if schema_type == "number":
        try:
            return float(_text(value))
        except ValueError:
            return 0.0
    if schema_type == "boolean":
        return _text(value).lower() in ("true", "1", "yes")
    return value


def _fits(value: Any, descriptor: dict[str, Any]) -> bool:
    schema_type = descriptor.get("type")
    if schema_type == "string":
        if descriptor.get("format") in DATE_FORMATS:
            return isinstance(value, (datetime, date))
        return isinstance(value, str)
    if schema_type == "integer":
        return isinstance(value, int) and not isinstance(value, bool)
    if schema_type == "number":
        return _is_number(value)
    if schema_type == "boolean":
        return isinstance(value, bool)
    if schema_type == "array":
        return isinstance(value, list)
    if schema_type == "null":
        return value is None
    return False


def _parse_date(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value
    text = _text(value)
    if _EPOCH_DIGITS.fullmatch(text):
        seconds = int(text) / 1000 if len(text) >= 12 else int(text)
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        logger.debug("filter_date_unparseable", extra={"value": text})
        return value
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def filter_predicate(
    filters: list[CollectionFilterDescriptor],
    navigator: SchemaNavigator | None = None,
    policy: UnknownOperatorPolicy = UnknownOperatorPolicy.NO_MATCH,
) -> Callable[[Any], bool]:
    """Predicate telling whether an item matches every filter.

    With a navigator, filter values and item values are normalized to the
    schema type of the filtered field first.

    Raises:
        SchemaNavigationError: When a navigator is given and a filter path is
            not described by its schema
    """
    prepared: list[tuple[CollectionFilterDescriptor, Callable[[Any], Any] | None, list[dict[str, Any]]]] = []
    for descriptor in filters:
        schemas: list[dict[str, Any]] = []
        if navigator is not None and descriptor.path != "*":
            schemas = navigator.get_field_descriptor_for_pointer(descriptor.path)
            if not schemas:
                raise SchemaNavigationError(
                    f"The filter path '{descriptor.path}' does not exist", schema_id=navigator.schema_id
                )
            descriptor = descriptor.model_copy(update={"value": normalize_value(descriptor.value, schemas)})
        getter = value_getter(descriptor.path) if descriptor.path != "*" else None
        prepared.append((descriptor, getter, schemas))

    def matches(item: Any) -> bool:
        for descriptor, getter, schemas in prepared:
            if getter is None:
                if not any(apply_filter(descriptor, value, policy) for _, value in own_fields(item)):
                    return False
                continue
            value = getter(item)
            if schemas:
                value = normalize_value(value, schemas)
            if not apply_filter(descriptor, value, policy):
                return False
        return True

    return matches


def filter_collection_by(
    items: Iterable[Any],
    filters: list[CollectionFilterDescriptor],
    navigator: SchemaNavigator | None = None,
    policy: UnknownOperatorPolicy = UnknownOperatorPolicy.NO_MATCH,
) -> list[Any]:
    """Items matching every filter; see ``filter_predicate``."""
    matches = filter_predicate(filters, navigator, policy)
    return [item for item in items if matches(item)]


def search_collection_by(items: Iterable[Any], terms: str | list[str] | None) -> list[Any]:
    """Items with an own field containing every term, case-insensitively."""
    if not terms:
        return list(items)
    wanted = [terms] if isinstance(terms, str) else list(terms)
    wanted = [term.lower() for term in wanted if term]

    def matches(item: Any) -> bool:
        texts = [_text(value).lower() for _, value in own_fields(item)]
        return all(any(term in text for text in texts) for term in wanted)

    return [item for item in items if matches(item)]


def _sort_key(value: Any) -> tuple[int, Any]:
    if _is_number(value) or isinstance(value, bool):
        return 0, value
    if isinstance(value, datetime):
        return 1, value.timestamp() if value.tzinfo else value.replace(tzinfo=timezone.utc).timestamp()
    if isinstance(value, str):
        return 2, value
    return 3, _text(value)


def sort_collection_by(items: Iterable[Any], sorters: list[CollectionSortDescriptor]) -> list[Any]:
    """Stable multi-key sort; items lacking a sort value go last in either direction."""
    result = list(items)
    for sorter in reversed(sorters):
        getter = value_getter("/" + sorter.path.lstrip("/")) if sorter.path.lstrip("/") else None
        if getter is None:
            continue
        keyed = [(getter(item), item) for item in result]
        present = [entry for entry in keyed if entry[0] is not None]
        absent = [item for value, item in keyed if value is None]
        present.sort(key=lambda entry: _sort_key(entry[0]), reverse=sorter.direction is SortingDirection.DESCENDING)
        result = [item for _, item in present] + absent
    return result


def column_path(column_id: str, path: str | None) -> str:
    """Path a column reads its value from."""
    return path if path else "/" + escape_part(column_id)
