"""Integration tests loading published JSON schemas over HTTP."""

import os

import pytest
import pytest_asyncio

from hyperschema.services.cache import MemorySchemaCache
from hyperschema.services.core import SchemaFetchError
from hyperschema.services.io import HTTPSchemaFetcher, SchemaLoader

pytestmark = pytest.mark.skipif(
    os.environ.get("RUN_HYPERSCHEMA_NETWORK_TESTS") != "1",
    reason="Requires network access. Set RUN_HYPERSCHEMA_NETWORK_TESTS=1 to run",
)

DRAFT_04 = "http://json-schema.org/draft-04/schema#"
HYPER_SCHEMA_04 = "http://json-schema.org/draft-04/hyper-schema#"


@pytest_asyncio.fixture
async def loader():
    async with HTTPSchemaFetcher() as fetcher:
        yield SchemaLoader(MemorySchemaCache(), fetcher)


class TestSchemaFetchingIntegration:
    """Test fetching and navigating the draft-04 meta schemas."""

    @pytest.mark.asyncio
    async def test_fetch_meta_schema(self, loader):
        """Test the draft-04 meta schema loads and is cached."""
        schema = await loader.load(DRAFT_04)

        assert schema["id"] == DRAFT_04
        assert "definitions" in schema
        assert loader.cache.get_schema(DRAFT_04) is schema

    @pytest.mark.asyncio
    async def test_navigate_meta_schema(self, loader):
        """Test a navigator over a fetched schema."""
        navigator = await loader.navigator(DRAFT_04)

        assert navigator.get_property_pointer("title") == "/title"
        assert navigator.get_embedded_schema("#/definitions/positiveInteger") is not None

    @pytest.mark.asyncio
    async def test_hyper_schema_links(self, loader):
        """Test the links of the draft-04 hyper-schema."""
        await loader.load(DRAFT_04)
        navigator = await loader.navigator(HYPER_SCHEMA_04)
        assert navigator.links
        assert all(link.href for link in navigator.links)

    @pytest.mark.asyncio
    async def test_missing_schema(self, loader):
        """Test a missing document surfaces its status code."""
        with pytest.raises(SchemaFetchError) as exc_info:
            await loader.load("http://json-schema.org/draft-04/no-such-schema")
        assert exc_info.value.status_code == 404
