"""Unit tests for SchemaIndex."""

import pytest

from hyperschema.services.cache import MemorySchemaCache, SchemaIndex

CATALOG = {
    "id": "https://example.org/schemas/catalog",
    "definitions": {
        "product": {
            "id": "https://example.org/schemas/product",
            "type": "object",
            "definitions": {"price": {"type": "number"}},
        },
        "tag": {"type": "string"},
    },
}


@pytest.fixture
def cache():
    return MemorySchemaCache()


@pytest.fixture
def index(cache):
    index = SchemaIndex(cache)
    index.set_schema(CATALOG)
    return index


def test_definitions_by_pointer(index):
    """Test definitions are reachable through pointer ids."""
    assert index.get_schema("https://example.org/schemas/catalog#/definitions/tag") == {"type": "string"}
    nested = "https://example.org/schemas/catalog#/definitions/product/definitions/price"
    assert index.get_schema(nested) == {"type": "number"}


def test_definitions_by_own_id(index):
    """Test definitions with an id are reachable by it."""
    assert index.get_schema("https://example.org/schemas/product") is CATALOG["definitions"]["product"]
    assert "https://example.org/schemas/product#" in index.indexed_ids


def test_falls_through_to_cache(index):
    """Test documents are served by the wrapped cache."""
    assert index.get_schema("https://example.org/schemas/catalog") is CATALOG
    assert index.get_schema("https://example.org/schemas/missing") is None


def test_indexes_existing_entries(cache):
    """Test schemas already cached are indexed on construction."""
    cache.set_schema(CATALOG)
    assert "https://example.org/schemas/product" in SchemaIndex(cache)


def test_remove_indexed_id(index, cache):
    """Test removing a definition id keeps the owning document."""
    index.remove_schema("https://example.org/schemas/product")
    assert cache.get_schema(CATALOG["id"]) is CATALOG
    assert index.get_schema("https://example.org/schemas/product") is None


def test_remove_document(index, cache):
    """Test removing a document forgets its definitions."""
    index.remove_schema(CATALOG["id"])
    assert cache.get_schema(CATALOG["id"]) is None
    assert index.indexed_ids == []


def test_stale_pointer(index, cache, caplog):
    """Test a replaced document without the definition."""
    cache.set_schema({"id": CATALOG["id"]})
    with caplog.at_level("WARNING"):
        assert index.get_schema("https://example.org/schemas/catalog#/definitions/tag") is None
    assert "schema_index_stale" in caplog.text
