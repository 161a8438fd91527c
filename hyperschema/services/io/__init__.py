"""Schema fetching and loading."""

from .fetchers import HTTPSchemaFetcher, NullSchemaFetcher
from .loader import SchemaLoader

__all__ = ["HTTPSchemaFetcher", "NullSchemaFetcher", "SchemaLoader"]
