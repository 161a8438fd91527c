"""In-memory schema cache."""

from __future__ import annotations

from collections.abc import Callable, Iterator

from ..core.interfaces import Schema
from ..navigator.utils import normalize_schema_id


def require_schema_id(schema: Schema) -> str:
    """Normalized id of a schema about to be cached.

    Raises:
        ValueError: When the schema or its id is missing
    """
    if not isinstance(schema, dict) or not isinstance(schema.get("id"), str) or not schema["id"]:
        raise ValueError("Cannot cache a schema without an id")
    return normalize_schema_id(schema["id"])


class MemorySchemaCache:
    """Schemas kept in a dict keyed by normalized id."""

    def __init__(self) -> None:
        self._schemas: dict[str, Schema] = {}

    def __len__(self) -> int:
        return len(self._schemas)

    def __contains__(self, schema_id: object) -> bool:
        return isinstance(schema_id, str) and normalize_schema_id(schema_id) in self._schemas

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._schemas))

    def get_schema(self, schema_id: str) -> Schema | None:
        return self._schemas.get(normalize_schema_id(schema_id))

    def set_schema(self, schema: Schema) -> None:
        self._schemas[require_schema_id(schema)] = schema

    def remove_schema(self, schema_id: str) -> None:
        self._schemas.pop(normalize_schema_id(schema_id), None)

    def get_schema_by(self, predicate: Callable[[Schema], bool]) -> Schema | None:
        for schema in list(self._schemas.values()):
            if predicate(schema):
                return schema
        return None

    def each(self, fn: Callable[[Schema, str], None]) -> None:
        for schema_id, schema in list(self._schemas.items()):
            fn(schema, schema_id)

    def clear(self) -> None:
        self._schemas.clear()
