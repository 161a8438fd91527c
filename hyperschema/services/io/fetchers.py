"""Schema fetchers."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from time import perf_counter

import aiohttp

from ..core.exceptions import SchemaFetchError
from ..core.interfaces import Schema
from ..utils.http import HTTPClient

logger = logging.getLogger(__name__)


class NullSchemaFetcher:
    """Fetcher for setups where every schema must already be cached."""

    async def fetch_schema(self, schema_id: str) -> Schema:
        raise SchemaFetchError(f"Schema '{schema_id}' is not available", schema_id=schema_id)


class HTTPSchemaFetcher:
    """Loads schemas by dereferencing their id over HTTP.

    Args:
        client: HTTP client; one is created (and owned) when omitted
        headers: Headers sent with every request, e.g. authorization
    """

    def __init__(self, client: HTTPClient | None = None, headers: Mapping[str, str] | None = None) -> None:
        self._owns_client = client is None
        self.client = client or HTTPClient()
        self.headers = dict(headers or {})

    async def fetch_schema(self, schema_id: str) -> Schema:
        """Fetch the schema document at schema_id.

        Raises:
            SchemaFetchError: When the request fails or the document is not a
                schema object
        """
        url = schema_id.partition("#")[0]
        started = perf_counter()
        try:
            body = await self.client.get_json(url, headers=self.headers or None)
        except aiohttp.ClientResponseError as e:
            raise SchemaFetchError(
                f"Fetching schema '{schema_id}' failed with HTTP {e.status}",
                status_code=e.status,
                schema_id=schema_id,
            ) from e
        except (aiohttp.ClientError, ValueError) as e:
            raise SchemaFetchError(f"Fetching schema '{schema_id}' failed: {e}", schema_id=schema_id) from e

        if not isinstance(body, dict):
            raise SchemaFetchError(f"Document at '{schema_id}' is not a schema", schema_id=schema_id)
        body.setdefault("id", schema_id)
        logger.info(
            "schema_fetched",
            extra={"schema_id": schema_id, "latency_ms": (perf_counter() - started) * 1000.0},
        )
        return body

    async def close(self) -> None:
        if self._owns_client:
            await self.client.close()

    async def __aenter__(self) -> HTTPSchemaFetcher:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
