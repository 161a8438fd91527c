"""Schema cache persisted through a key-value storage port.

Architecture:
    StorageSchemaCache keeps a root listing of cached schemas and one
    storage item per schema, all serialized as JSON:

        schemacache-root          -> [{"id": ..., "name": ...}, ...]
        schemacache-<name>        -> schema document

    The name of an entry is the kebab-case entity of the schema, or the
    kebab-case host and path of its id when it declares no entity (the
    whole id for ids without either, such as URNs). Names already taken
    by another id get a numeric suffix.

Design Decisions:
    - The storage backend is injected. Any object with ``get_item``,
      ``set_item``, ``remove_item`` and ``keys`` works; MemoryStorage is the
      reference implementation.
    - The root listing is read once at construction and written through on
      every change. Ids compare case-insensitively.
    - Listing entries whose document has disappeared are dropped by
      ``each``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable
from typing import Protocol

from ..core.config import SCHEMA_CACHE_BUCKET, SCHEMA_CACHE_ROOT_KEY
from ..core.interfaces import Schema
from ..navigator.utils import normalize_schema_id
from ..utils.text import kebab_case
from .memory import require_schema_id

logger = logging.getLogger(__name__)


class SchemaStorage(Protocol):
    """String key-value store."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...

    def keys(self) -> Iterable[str]: ...


class MemoryStorage:
    """SchemaStorage held in a dict."""

    def __init__(self, items: dict[str, str] | None = None) -> None:
        self.items: dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self.items)


def id_entry_name(schema_id: str) -> str:
    """Storage name from the host and path of an id, or the whole id without one."""
    return kebab_case("-".join(schema_id.split("/")[2:])) or kebab_case(schema_id) or "schema"


def schema_entry_name(schema: Schema) -> str:
    """Storage name of a schema, from its entity or its id."""
    if isinstance(schema.get("entity"), str) and schema["entity"]:
        return kebab_case(schema["entity"])
    return id_entry_name(schema["id"])


class StorageSchemaCache:
    """SchemaCache writing every schema to a storage backend.

    Args:
        storage: Backend receiving the JSON documents
    """

    def __init__(self, storage: SchemaStorage) -> None:
        self.storage = storage
        self._entries: list[dict[str, str]] = self._load_entries()

    @staticmethod
    def _key(name: str) -> str:
        return f"{SCHEMA_CACHE_BUCKET}-{name}"

    def _load_entries(self) -> list[dict[str, str]]:
        raw = self.storage.get_item(SCHEMA_CACHE_ROOT_KEY)
        if not raw:
            return []
        entries = json.loads(raw)
        if not isinstance(entries, list):
            logger.warning("schema_cache_root_invalid", extra={"type": type(entries).__name__})
            return []
        return [e for e in entries if isinstance(e, dict) and "id" in e and "name" in e]

    def _save_entries(self) -> None:
        self.storage.set_item(SCHEMA_CACHE_ROOT_KEY, json.dumps(self._entries))

    def _find(self, schema_id: str) -> dict[str, str] | None:
        wanted = normalize_schema_id(schema_id).lower()
        for entry in self._entries:
            if entry["id"].lower() == wanted:
                return entry
        return None

    def _read(self, entry: dict[str, str]) -> Schema | None:
        raw = self.storage.get_item(self._key(entry["name"]))
        return json.loads(raw) if raw is not None else None

    def reload(self) -> None:
        """Re-read the root listing, picking up changes by other writers."""
        self._entries = self._load_entries()

    def get_schema(self, schema_id: str) -> Schema | None:
        entry = self._find(schema_id)
        return self._read(entry) if entry is not None else None

    def _unique_name(self, schema: Schema, existing: dict[str, str] | None) -> str:
        taken = {e["name"] for e in self._entries if e is not existing}
        name = schema_entry_name(schema)
        if name in taken:
            name = id_entry_name(require_schema_id(schema))
        candidate, suffix = name, 2
        while candidate in taken:
            candidate = f"{name}-{suffix}"
            suffix += 1
        return candidate

    def set_schema(self, schema: Schema) -> None:
        schema_id = require_schema_id(schema)
        existing = self._find(schema_id)
        entry = {"id": schema_id, "name": self._unique_name(schema, existing)}
        if existing is not None:
            self._entries.remove(existing)
            if existing["name"] != entry["name"]:
                self.storage.remove_item(self._key(existing["name"]))
        self._entries.append(entry)
        self.storage.set_item(self._key(entry["name"]), json.dumps(schema))
        self._save_entries()
        logger.debug("schema_cached", extra={"schema_id": schema_id, "entry": entry["name"]})

    def remove_schema(self, schema_id: str) -> None:
        entry = self._find(schema_id)
        if entry is None:
            return
        self.storage.remove_item(self._key(entry["name"]))
        self._entries.remove(entry)
        self._save_entries()

    def get_schema_by(self, predicate: Callable[[Schema], bool]) -> Schema | None:
        for entry in list(self._entries):
            schema = self._read(entry)
            if schema is not None and predicate(schema):
                return schema
        return None

    def each(self, fn: Callable[[Schema, str], None]) -> None:
        dangling = []
        for entry in list(self._entries):
            schema = self._read(entry)
            if schema is None:
                dangling.append(entry)
                continue
            fn(schema, entry["id"])
        if dangling:
            logger.warning("schema_cache_entries_dangling", extra={"ids": [e["id"] for e in dangling]})
            self._entries = [e for e in self._entries if e not in dangling]
            self._save_entries()

    def clear(self) -> None:
        """Remove every cached schema, including strays left by other writers."""
        for key in list(self.storage.keys()):
            if key.startswith(SCHEMA_CACHE_BUCKET):
                self.storage.remove_item(key)
        self._entries = []
        self._save_entries()
