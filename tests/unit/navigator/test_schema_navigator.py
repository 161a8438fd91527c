"""Unit tests for SchemaNavigator."""

import pytest

from hyperschema.services.core import SchemaNavigationError
from hyperschema.services.models import FieldDescriptor
from hyperschema.services.navigator import SchemaNavigator

USER_SCHEMA_ID = "https://example.org/schemas/user"


def user_schema(properties=None):
    return {
        "id": USER_SCHEMA_ID,
        "entity": "User",
        "type": "object",
        "required": ["name"],
        "properties": properties
        or {
            "id": {"type": "integer"},
            "userId": {"type": "string"},
            "name": {"type": "string", "title": {"en": "Name", "nl": "Naam"}, "field": {"type": "text"}},
            "age": {"type": "integer", "field": {}},
        },
        "links": [
            {"rel": "self", "href": "/users/{id}"},
            {"rel": "list", "href": "/users{?page,limit,search}"},
            {"rel": "update", "href": "/users/{id}", "method": "put"},
        ],
        "definitions": {
            "address": {
                "id": "https://example.org/schemas/address",
                "type": "object",
                "properties": {"city": {"type": "string"}},
            },
        },
    }


@pytest.fixture
def schema():
    return user_schema()


class TestConstruction:
    """Test navigator construction and the property root."""

    def test_root_and_id(self, schema):
        """Test the root of the default prefix is the schema itself."""
        navigator = SchemaNavigator(schema)
        assert navigator.schema_id == USER_SCHEMA_ID
        assert navigator.entity == "User"
        assert set(navigator.property_root) == {"id", "userId", "name", "age"}

    def test_missing_schema_rejected(self):
        """Test an empty schema cannot be navigated."""
        with pytest.raises(SchemaNavigationError):
            SchemaNavigator({})

    def test_schema_without_id_rejected(self):
        """Test the schema id is required."""
        with pytest.raises(SchemaNavigationError):
            SchemaNavigator({"type": "object", "properties": {"a": {"type": "string"}}})

    def test_unresolvable_prefix_rejected(self, schema):
        """Test a prefix the schema does not describe."""
        with pytest.raises(SchemaNavigationError):
            SchemaNavigator(schema, "/missing/")

    def test_envelope_prefix(self, schema):
        """Test the property root behind an envelope with a local reference."""
        envelope = {
            "id": "https://example.org/schemas/user-envelope",
            "type": "object",
            "properties": {"item": {"$ref": "#/definitions/user"}},
            "definitions": {"user": {"type": "object", "properties": schema["properties"]}},
        }
        navigator = SchemaNavigator(envelope, "/item/")
        assert navigator.property_prefix == "/item/"
        assert navigator.get_property_pointer("name") == "/item/name"
        assert navigator.get_property_value("name", {"item": {"name": "ada"}}) == "ada"

    def test_external_reference_uses_resolver(self, schema):
        """Test references to other schemas go through the resolver."""
        envelope = {
            "id": "https://example.org/schemas/team",
            "type": "object",
            "properties": {"owner": {"$ref": "user"}},
        }
        resolved = []

        def resolver(schema_id):
            resolved.append(schema_id)
            return schema if schema_id == USER_SCHEMA_ID + "#" else None

        navigator = SchemaNavigator(envelope, "/owner/", resolver=resolver)
        assert "name" in navigator.property_root
        assert USER_SCHEMA_ID + "#" in resolved


class TestIdentity:
    """Test identity detection."""

    def test_identity_property(self, schema):
        """Test 'id' wins for a User with id, userId, name and age."""
        assert SchemaNavigator(schema).identity_property == "id"

    def test_first_primary_identity_wins(self):
        """Test ties between primary identities go to the first field."""
        navigator = SchemaNavigator(
            user_schema({"userId": {"type": "string"}, "id": {"type": "integer"}, "name": {"type": "string"}})
        )
        assert navigator.identity_property == "userId"

    def test_scores(self, schema):
        """Test the identity score of different names."""
        navigator = SchemaNavigator(schema)
        assert navigator.is_identity_property("id") == 0
        assert navigator.is_identity_property("userId") == 0
        assert navigator.is_identity_property("accountId") == 2
        assert navigator.is_identity_property("name") == 3
        assert navigator.is_identity_property("age") == 4

    def test_parent_identity_score(self, schema):
        """Test a parent entity id scores 1."""
        navigator = SchemaNavigator(schema, entity="OrderLine")
        assert navigator.is_identity_property("orderId") == 1
        assert navigator.is_identity_property("orderLineId") == 0

    def test_first_field_fallback(self):
        """Test the first field is used when no field looks like an identity."""
        navigator = SchemaNavigator(user_schema({"age": {"type": "integer"}, "label": {"type": "string"}}))
        assert navigator.identity_property == "age"

    def test_contains_id_beats_fallback(self):
        """Test a field containing an id marker beats the first field."""
        navigator = SchemaNavigator(user_schema({"age": {"type": "integer"}, "accountId": {"type": "string"}}))
        assert navigator.identity_property == "accountId"

    def test_no_fields(self):
        """Test an entity without fields has no identity."""
        navigator = SchemaNavigator({"id": "https://example.org/schemas/empty", "type": "object"})
        with pytest.raises(SchemaNavigationError):
            navigator.identity_property

    def test_identity_properties(self, schema):
        """Test candidates are ordered by score."""
        navigator = SchemaNavigator(schema)
        assert navigator.identity_properties == ["id", "userId", "name"]
        assert navigator.identity_pointers == ["/id", "/userId", "/name"]

    def test_identity_values(self, schema):
        """Test reading and writing identity values."""
        navigator = SchemaNavigator(schema)
        data = {"id": 5, "name": "ada"}
        assert navigator.get_identity_value(data) == 5
        assert navigator.has_identity_value(data)
        assert navigator.get_identity_values(data) == {"id": 5, "name": "ada"}
        assert navigator.set_identity_value({}, 9) == {"id": 9}
        assert navigator.set_identity_values({}, {"id": 1, "userId": "u1"}) == {"id": 1, "userId": "u1"}

    def test_identity_values_missing(self, schema):
        """Test data without identities."""
        with pytest.raises(SchemaNavigationError):
            SchemaNavigator(schema).get_identity_values({"age": 3})


class TestFields:
    """Test form field helpers."""

    def test_fields(self, schema):
        """Test visible fields keyed by pointer."""
        assert set(SchemaNavigator(schema).fields) == {"/name", "/age"}

    def test_fieldsets(self, schema):
        """Test fields grouped in the default fieldset."""
        fieldsets = SchemaNavigator(schema).fieldsets
        assert [descriptor.name for descriptor in fieldsets["default"]] == ["name", "age"]
        assert fieldsets["default"][0] == FieldDescriptor(
            name="name", pointer="/name", is_required=True, schema=schema["properties"]["name"]
        )

    def test_titles(self, schema):
        """Test translated titles."""
        navigator = SchemaNavigator(schema)
        assert navigator.get_field_title("/name") == "Name"
        assert navigator.get_field_title("/name", "nl") == "Naam"
        assert navigator.get_field_title("/unknown") is None

    def test_required(self, schema):
        """Test required fields."""
        navigator = SchemaNavigator(schema)
        assert navigator.is_field_required("name")
        assert not navigator.is_field_required("age")

    def test_generated_columns(self, schema):
        """Test columns from simple, non-id properties."""
        columns = SchemaNavigator(schema).columns
        assert [column.id for column in columns] == ["name", "age"]
        assert columns[0].pointer == "/name"

    def test_declared_columns(self, schema):
        """Test collection schemas declare their columns."""
        schema["columns"] = [{"id": "name", "sortable": False}]
        navigator = SchemaNavigator(schema)
        assert navigator.is_collection()
        assert navigator.columns[0].sortable is False


class TestLinks:
    """Test hyperlink helpers."""

    def test_get_link(self, schema):
        """Test lookup by relation and position."""
        navigator = SchemaNavigator(schema)
        assert navigator.get_link("self").href == "/users/{id}"
        assert navigator.get_link(1).rel == "list"
        assert navigator.get_link("nope") is None
        assert navigator.has_link("update")
        assert navigator.get_link("update").method == "PUT"

    def test_get_first_link(self, schema):
        """Test the order of the requested relations wins."""
        navigator = SchemaNavigator(schema)
        assert navigator.get_first_link(["collection", "list", "self"]).rel == "list"
        assert navigator.get_first_link(["index"]) is None

    def test_resolve_link_href(self, schema):
        """Test hrefs expand from data and url data."""
        navigator = SchemaNavigator(schema)
        assert navigator.resolve_link_href(navigator.get_link("self"), {"id": 5}) == "/users/5"
        href = navigator.resolve_link_href(navigator.get_link("list"), url_data={"page": 2, "limit": 10})
        assert href == "/users?page=2&limit=10"

    def test_template_pointers(self, schema):
        """Test template variables map to property pointers."""
        navigator = SchemaNavigator(schema)
        assert navigator.get_link_uri_template_pointers(navigator.get_link("self")) == {"id": "/id"}
        assert navigator.has_link_uri_template_pointers(navigator.get_link("self"))

    def test_invalid_link(self, schema):
        """Test malformed links fail loudly."""
        schema["links"] = [{"href": "/x"}]
        with pytest.raises(SchemaNavigationError):
            SchemaNavigator(schema).links


class TestSchemaLookups:
    """Test descriptor and embedded schema lookups."""

    def test_field_descriptor_for_pointer(self, schema):
        """Test the schema of a data pointer."""
        navigator = SchemaNavigator(schema)
        assert navigator.get_field_descriptor_for_pointer("/age") == [{"type": "integer", "field": {}}]
        assert navigator.get_field_descriptor_for_pointer("/unknown") == []

    def test_field_descriptor_behind_relative_reference(self):
        """Test the resolver receives the absolute id of a relative reference."""
        person = {"id": "http://x/person#", "type": "object", "properties": {"address": {"$ref": "address#"}}}
        address = {"id": "http://x/address#", "properties": {"city": {"type": "string"}}}
        navigator = SchemaNavigator(person, resolver={"http://x/address#": address}.get)
        assert navigator.get_field_descriptor_for_pointer("/address/city") == [{"type": "string"}]

    def test_field_descriptor_for_value(self, schema):
        """Test picking a descriptor by value type."""
        navigator = SchemaNavigator(schema)
        descriptors = [{"type": "string"}, {"type": "integer"}]
        assert navigator.get_field_descriptor_for_value(descriptors, 3) == {"type": "integer"}
        assert navigator.get_field_descriptor_for_value(descriptors, "x") == {"type": "string"}

    def test_embedded_schema(self, schema):
        """Test embedded definitions resolve by id and pointer."""
        navigator = SchemaNavigator(schema)
        address = schema["definitions"]["address"]
        assert navigator.get_embedded_schema("https://example.org/schemas/address") is address
        assert navigator.get_embedded_schema("#/definitions/address") is address
        assert navigator.get_embedded_schema("https://example.org/schemas/other") is None
        assert navigator.get_schema_ids_with_pointers() == {
            "https://example.org/schemas/address#": "/definitions/address"
        }
