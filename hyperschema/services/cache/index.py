"""Cache decorator resolving embedded definitions by id."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ..core.exceptions import PointerError
from ..core.interfaces import Schema, SchemaCache
from ..navigator.utils import normalize_schema_id
from ..pointer import escape_part, pointer_get

logger = logging.getLogger(__name__)


class SchemaIndex:
    """SchemaCache that also serves the definitions of cached schemas.

    Every entry under ``definitions`` (recursively) is reachable by the
    pointer id ``<schema id>#/definitions/<name>``, and by its own ``id``
    when it declares one that is not taken yet.

    Args:
        cache: Cache holding the full documents
    """

    def __init__(self, cache: SchemaCache) -> None:
        self.cache = cache
        self._index: dict[str, tuple[str, str]] = {}
        cache.each(lambda schema, schema_id: self._fill(schema, schema_id))

    def __contains__(self, schema_id: object) -> bool:
        return isinstance(schema_id, str) and self.get_schema(schema_id) is not None

    @property
    def indexed_ids(self) -> list[str]:
        return list(self._index)

    def get_schema(self, schema_id: str) -> Schema | None:
        location = self._index.get(schema_id) or self._index.get(normalize_schema_id(schema_id))
        if location is not None:
            owner_id, pointer = location
            owner = self.cache.get_schema(owner_id)
            if owner is not None:
                try:
                    return pointer_get(owner, pointer)
                except PointerError as e:
                    logger.warning(
                        "schema_index_stale",
                        extra={"schema_id": schema_id, "owner": owner_id, "pointer": pointer, "error": str(e)},
                    )
        return self.cache.get_schema(schema_id)

    def set_schema(self, schema: Schema) -> None:
        self.cache.set_schema(schema)
        self._fill(schema, normalize_schema_id(schema["id"]))

    def remove_schema(self, schema_id: str) -> None:
        """Drop an index entry, or the cached document when schema_id is not indexed."""
        for key in (schema_id, normalize_schema_id(schema_id)):
            if key in self._index:
                del self._index[key]
                return
        self.cache.remove_schema(schema_id)
        owner = normalize_schema_id(schema_id)
        self._index = {k: v for k, v in self._index.items() if v[0] != owner}

    def get_schema_by(self, predicate: Callable[[Schema], bool]) -> Schema | None:
        return self.cache.get_schema_by(predicate)

    def each(self, fn: Callable[[Schema, str], None]) -> None:
        self.cache.each(fn)

    def _fill(self, schema: Any, owner_id: str, prefix: str = "") -> None:
        definitions = schema.get("definitions") if isinstance(schema, dict) else None
        if not isinstance(definitions, dict):
            return
        base = owner_id.partition("#")[0] + "#"
        for name, definition in definitions.items():
            if not isinstance(definition, dict):
                continue
            pointer = f"{prefix}/definitions/{escape_part(name)}"
            self._index[base + pointer] = (owner_id, pointer)
            if isinstance(definition.get("id"), str):
                own_id = normalize_schema_id(definition["id"])
                if own_id not in self._index:
                    self._index[own_id] = (owner_id, pointer)
                    logger.debug(
                        "schema_index_lifted",
                        extra={"schema_id": own_id, "owner": owner_id, "pointer": pointer},
                    )
            self._fill(definition, owner_id, pointer)
