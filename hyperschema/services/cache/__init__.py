"""Schema caches."""

from ..core.interfaces import SchemaCache
from .index import SchemaIndex
from .memory import MemorySchemaCache
from .storage import MemoryStorage, SchemaStorage, StorageSchemaCache, schema_entry_name

__all__ = [
    "MemorySchemaCache",
    "MemoryStorage",
    "SchemaCache",
    "SchemaIndex",
    "SchemaStorage",
    "StorageSchemaCache",
    "schema_entry_name",
]
