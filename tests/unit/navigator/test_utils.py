"""Unit tests for navigator helpers and URI templates."""

import pytest

from hyperschema.services.navigator import (
    convert_schema_id_to_entity_name,
    expand_uri_template,
    get_applicable_property_definitions,
    get_translatable_string,
    merge_schemas,
    normalize_schema_id,
    resolve_and_merge_schemas,
    variable_names,
)


class TestSchemaIds:
    """Test schema id helpers."""

    def test_normalize_schema_id(self):
        """Test ids get an empty fragment marker."""
        assert normalize_schema_id("http://x/user") == "http://x/user#"
        assert normalize_schema_id("http://x/user#") == "http://x/user#"
        assert normalize_schema_id("http://x/user#/definitions/a") == "http://x/user#/definitions/a"

    def test_entity_name(self):
        """Test entity names derived from ids."""
        assert convert_schema_id_to_entity_name("https://example.org/schemas/user-profile") == "UserProfile"


class TestDefinitions:
    """Test definition lookup and merging."""

    def test_applicable_definitions(self):
        """Test walking properties, items and allOf."""
        schema = {
            "properties": {
                "items": {"type": "array", "items": {"$ref": "#/definitions/item"}},
            },
            "definitions": {
                "item": {"allOf": [{"properties": {"a": {}}}, {"properties": {"b": {}}}]},
            },
        }
        definitions = get_applicable_property_definitions(schema, "/items/0")
        assert definitions == [
            "#/definitions/item",
            "#/definitions/item/allOf/0",
            "#/definitions/item/allOf/1",
        ]
        merged = resolve_and_merge_schemas(definitions, schema)
        assert set(merged["properties"]) == {"a", "b"}

    def test_relative_reference_resolves_to_absolute_id(self):
        """Test definitions behind a relative reference carry the absolute id."""
        schema = {"id": "http://x/person#", "properties": {"address": {"$ref": "address#"}}}
        address = {"id": "http://x/address#", "properties": {"city": {"type": "string"}}}
        resolved = []

        def resolver(schema_id):
            resolved.append(schema_id)
            return address if schema_id == "http://x/address#" else None

        definitions = get_applicable_property_definitions(schema, "/address/city", resolver)
        assert definitions == ["http://x/address#/properties/city"]
        assert set(resolved) == {"http://x/address#"}

    def test_reference_to_own_id(self):
        """Test a reference back to the schema itself keeps the empty id."""
        schema = {
            "id": "http://x/node#",
            "properties": {"parent": {"$ref": "node#"}, "name": {"type": "string"}},
        }
        assert get_applicable_property_definitions(schema, "/parent/name") == ["#/properties/name"]

    def test_pattern_properties(self):
        """Test map keys matching a pattern."""
        schema = {"patternProperties": {"^x-": {"type": "string"}}}
        assert get_applicable_property_definitions(schema, "/x-foo") == ["#/patternProperties/^x-"]
        assert get_applicable_property_definitions(schema, "/y") == []

    def test_merge_schemas(self):
        """Test arrays concatenate and objects merge shallowly."""
        merged = merge_schemas(
            {"required": ["a"], "properties": {"a": 1}, "type": "object"},
            {"required": ["b"], "properties": {"b": 2}, "type": "array"},
        )
        assert merged == {"required": ["a", "b"], "properties": {"a": 1, "b": 2}, "type": "array"}

    def test_translatable_string(self):
        """Test plain strings count as English."""
        assert get_translatable_string("Name") == "Name"
        assert get_translatable_string("Name", "nl") is None
        assert get_translatable_string({"en-GB": "Colour"}, "en") == "Colour"


class TestUriTemplate:
    """Test URI template expansion."""

    @pytest.mark.parametrize(
        "template,expected",
        [
            ("/users/{id}", "/users/7"),
            ("/search{?q,page}", "/search?q=a%20b&page=2"),
            ("{+path}/x", "/a/b/x"),
            ("/tags{/tags*}", "/tags/red/blue"),
            ("{#section}", "#intro"),
            ("/m{;id}", "/m;id=7"),
            ("{?missing}", ""),
            ("{q:1}", "a"),
        ],
    )
    def test_expand(self, template, expected):
        """Test operators and modifiers."""
        values = {"id": 7, "q": "a b", "page": 2, "path": "/a/b", "tags": ["red", "blue"], "section": "intro"}
        assert expand_uri_template(template, values) == expected

    def test_variable_names(self):
        """Test names in order of appearance."""
        assert variable_names("/users/{id}{?page,limit}{&id}") == ["id", "page", "limit"]
