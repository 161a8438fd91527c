"""Schema loading through a cache.

Architecture:
    SchemaLoader ties a SchemaCache to a SchemaFetcher:

        load(id) -> cache hit?  -> schema
                 -> fetcher     -> cache.set_schema -> schema

    Navigators built by the loader resolve ``$ref``s against the cache, so
    referenced schemas must be loaded (or preloaded with ``load_all``)
    before the navigator follows them.

See Also:
    - cache: SchemaCache implementations
    - io.fetchers: HTTP and null fetchers
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from ..core.interfaces import Schema, SchemaCache, SchemaFetcher
from ..navigator import SchemaNavigator
from ..navigator.utils import normalize_schema_id
from .fetchers import NullSchemaFetcher

logger = logging.getLogger(__name__)


class SchemaLoader:
    """Cache-first schema access.

    Args:
        cache: Cache consulted first and filled with fetched schemas
        fetcher: Source for schemas missing from the cache; defaults to a
            fetcher that fails for every id
    """

    def __init__(self, cache: SchemaCache, fetcher: SchemaFetcher | None = None) -> None:
        self.cache = cache
        self.fetcher = fetcher or NullSchemaFetcher()
        self._pending: dict[str, asyncio.Future[Schema]] = {}

    async def load(self, schema_id: str) -> Schema:
        """Cached schema, fetched and cached first when missing.

        Concurrent loads of one id share a single fetch.

        Raises:
            SchemaFetchError: When the schema is neither cached nor fetchable
        """
        key = normalize_schema_id(schema_id)
        cached = self.cache.get_schema(key)
        if cached is not None:
            logger.debug("schema_cache_hit", extra={"schema_id": key})
            return cached

        pending = self._pending.get(key)
        if pending is not None:
            return await pending

        future: asyncio.Future[Schema] = asyncio.get_running_loop().create_future()
        self._pending[key] = future
        try:
            schema = await self.fetcher.fetch_schema(key)
            self.cache.set_schema(schema)
        except Exception as e:
            future.set_exception(e)
            future.exception()  # retrieved; waiters re-raise it
            raise
        else:
            future.set_result(schema)
            return schema
        finally:
            del self._pending[key]

    async def load_all(self, schema_ids: Iterable[str]) -> list[Schema]:
        """Load several schemas concurrently."""
        return list(await asyncio.gather(*(self.load(schema_id) for schema_id in schema_ids)))

    async def navigator(self, schema_id: str, property_prefix: str = "/") -> SchemaNavigator:
        """Navigator over a loaded schema, resolving references through the cache."""
        schema = await self.load(schema_id)
        return SchemaNavigator(schema, property_prefix, resolver=self.cache.get_schema)
