"""Pointer-addressable view of a Hyperschema document.

Architecture:
    A SchemaNavigator wraps one raw schema and a property prefix: the
    pointer, inside documents described by the schema, where the entity
    fields live. Schemas frequently wrap the entity in an envelope
    (``{"item": {...}}``) or describe a map through ``patternProperties``,
    so the navigator first walks the prefix through the schema to find the
    applicable definitions and merges them into one effective ``root``.
    Everything else (fields, identity, links) is derived from that root.

    Derived attributes are computed lazily, once, and never invalidated;
    build a new navigator to look at the schema differently.

Design Decisions:
    - Identity detection is a scoring heuristic and is approximate: the
      lowest score wins and the first field encountered wins ties.
    - Embedded schema lookups never raise; callers fall back to a fetcher.
    - The root is resolved eagerly so unusable schemas fail at construction.

See Also:
    - utils: Definition walking and schema merging
    - uri_template: Link href expansion
    - cursors: Use navigators for identity, columns and list links
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from ..core.config import (
    COLUMN_PROPERTY_TYPES,
    DEFAULT_FIELDSET,
    DEFAULT_LANGUAGE,
    DEFAULT_VISIBLE_FIELD_TYPES,
    IDENTITY_NAMES,
    IDENTITY_SUFFIXES,
    NAME_LIKE_IDENTITIES,
)
from ..core.exceptions import PointerError, SchemaNavigationError, ServicesError
from ..models.schema import FieldDescriptor, SchemaColumnDescriptor, SchemaHyperlinkDescriptor
from ..pointer import (
    escape_part,
    fix_json_pointer_path,
    pointer_get,
    pointer_has,
    pointer_set,
    try_pointer_get,
)
from ..utils.text import camel_case, upper_first, words
from .uri_template import expand_uri_template, variable_names
from .utils import (
    SchemaResolver,
    get_applicable_property_definitions,
    get_schema_entity,
    get_translatable_string,
    normalize_schema_id,
    resolve_and_merge_schemas,
)

logger = logging.getLogger(__name__)

IDENTITY_PRIMARY = 0
IDENTITY_PARENT = 1
IDENTITY_CONTAINS_ID = 2
IDENTITY_NAME_LIKE = 3
IDENTITY_NONE = 4


class SchemaNavigator:
    """Navigate the entity fields, identity and links of a schema.

    Args:
        schema: Raw JSON-Schema document (draft-04 with Hyperschema links)
        property_prefix: Pointer, in documents described by the schema,
            where the entity fields begin
        resolver: Loads schemas referenced by id that are not embedded
        entity: Entity name overriding the one declared by the schema

    Raises:
        SchemaNavigationError: When the schema is missing, has no id or its
            property root cannot be resolved
    """

    def __init__(
        self,
        schema: dict[str, Any],
        property_prefix: str = "/",
        resolver: SchemaResolver | None = None,
        entity: str | None = None,
    ) -> None:
        if not isinstance(schema, dict) or not schema:
            raise SchemaNavigationError("A schema is required to build a navigator")

        self._schema = schema
        prefix = fix_json_pointer_path(property_prefix)
        self.property_prefix = prefix if prefix.endswith("/") else prefix + "/"
        self._resolver = resolver
        self._entity = entity

        self._schema_id_pointers: dict[str, str] | None = None
        self._identity_property: str | None = None
        self._identity_properties: list[str] | None = None
        self._property_root: dict[str, Any] | None = None
        self._links: list[SchemaHyperlinkDescriptor] | None = None

        self.property_definition_roots = get_applicable_property_definitions(
            schema, self.property_prefix, self.get_schema
        )
        self._root = resolve_and_merge_schemas(self.property_definition_roots, schema, self.get_schema)
        if not self._root:
            raise SchemaNavigationError(
                f"Unable to determine the property root for prefix '{self.property_prefix}'",
                schema_id=schema.get("id"),
            )
        if not self.schema_id:
            raise SchemaNavigationError("The schema has no id")

    def __repr__(self) -> str:
        return f"SchemaNavigator(schema_id={self.schema_id!r}, property_prefix={self.property_prefix!r})"

    @property
    def schema_id(self) -> str | None:
        """Id of the property root, falling back to the id of the schema."""
        return self._root.get("id") or self._schema.get("id")

    @property
    def original(self) -> dict[str, Any]:
        """The wrapped schema document."""
        return self._schema

    @property
    def root(self) -> dict[str, Any]:
        """Merged schema of all definitions applicable to the property prefix."""
        return self._root

    @property
    def entity(self) -> str | None:
        """Entity name, from the constructor, the schema or its id."""
        if self._entity is None:
            self._entity = get_schema_entity(self._root) or get_schema_entity(self._schema)
        return self._entity

    # Properties

    def has_pattern_properties(self, schema: dict[str, Any] | None = None) -> bool:
        """Whether schema (the root by default) describes a map through patternProperties."""
        patterns = (self._root if schema is None else schema).get("patternProperties")
        return isinstance(patterns, dict) and bool(patterns)

    @property
    def property_root(self) -> dict[str, Any]:
        """Field name to sub-schema map of the entity."""
        if self._property_root is None:
            properties = self._root.get("properties")
            if isinstance(properties, dict):
                self._property_root = properties
            else:
                if self.has_pattern_properties():
                    logger.debug("property_root_pattern_only", extra={"schema_id": self.schema_id})
                self._property_root = {}
        return self._property_root

    def get_property_pointer(self, name: str) -> str | None:
        """Data pointer of a field, matching its name case-insensitively."""
        wanted = name.lower()
        for key in self.property_root:
            if key.lower() == wanted:
                return self.property_prefix + escape_part(key)
        return None

    def get_property_value(self, name: str, data: Any) -> Any:
        """Value of the named field in data.

        Raises:
            SchemaNavigationError: When the schema has no such field
            PointerNotFoundError: When data has no value for it
        """
        return pointer_get(data, self._require_property_pointer(name))

    def set_property_value(self, name: str, data: Any, value: Any) -> Any:
        """Set the named field in data and return data."""
        return pointer_set(data, self._require_property_pointer(name), value)

    def _require_property_pointer(self, name: str) -> str:
        pointer = self.get_property_pointer(name)
        if pointer is None:
            raise SchemaNavigationError(f"The schema has no property '{name}'", schema_id=self.schema_id)
        return pointer

    # Identity

    def is_identity_property(self, name: str) -> int:
        """Score how likely name is the identity field (0 best, 4 no match).

        - 0: ``id``, ``uid``, ``guid`` or the entity name with an id suffix
        - 1: a parent entity name with an id suffix (``orderId`` for
          ``OrderLine``)
        - 2: contains ``id``, ``uid`` or ``guid``
        - 3: ``name``, ``identity`` or ``internalname``
        - 4: anything else
        """
        lowered = "".join(ch for ch in name.lower() if ch.isalnum())
        if self._is_primary_identity(lowered):
            return IDENTITY_PRIMARY
        if self._is_parent_identity(lowered):
            return IDENTITY_PARENT
        if any(marker in lowered for marker in IDENTITY_NAMES):
            return IDENTITY_CONTAINS_ID
        if lowered in NAME_LIKE_IDENTITIES:
            return IDENTITY_NAME_LIKE
        return IDENTITY_NONE

    def _is_primary_identity(self, name: str) -> bool:
        if name in IDENTITY_NAMES:
            return True
        entity = self.entity
        return bool(entity) and _has_identity_suffix(name, entity.lower())

    def _is_parent_identity(self, name: str) -> bool:
        parents = words(upper_first(self.entity or ""))
        if not parents:
            return False
        own = parents.pop().lower()
        if _has_identity_suffix(name, own):
            return False
        for i in range(1, len(parents) + 1):
            if _has_identity_suffix(name, "".join(parents[:i]).lower()):
                return True
        return False

    @property
    def identity_property(self) -> str:
        """Field most likely to hold the entity identity.

        The lowest score wins; ties go to the field encountered first and a
        score of 0 ends the search immediately.

        Raises:
            SchemaNavigationError: When the entity has no fields
        """
        if self._identity_property is None:
            best: str | None = None
            best_score = IDENTITY_NONE
            for name in self.property_root:
                score = self.is_identity_property(name)
                if best is None:
                    best, best_score = name, min(score, IDENTITY_NAME_LIKE)
                elif score < best_score:
                    best, best_score = name, score
                if score == IDENTITY_PRIMARY:
                    break
            if best is None:
                raise SchemaNavigationError("Unable to determine the identity property", schema_id=self.schema_id)
            self._identity_property = best
        return self._identity_property

    @property
    def identity_pointer(self) -> str:
        return self.property_prefix + escape_part(self.identity_property)

    @property
    def identity_properties(self) -> list[str]:
        """All candidate identity fields, best first, primary identity leading."""
        if self._identity_properties is None:
            primary = self.identity_property
            scored = [(IDENTITY_PRIMARY, primary)]
            for name in self.property_root:
                if name == primary:
                    continue
                score = self.is_identity_property(name)
                if score < IDENTITY_NONE:
                    scored.append((score, name))
            scored.sort(key=lambda entry: entry[0])
            self._identity_properties = [name for _, name in scored]
        return self._identity_properties

    @property
    def identity_pointers(self) -> list[str]:
        return [self.property_prefix + escape_part(name) for name in self.identity_properties]

    def get_identity_value(self, data: Any) -> Any:
        """Identity value of data, with or without the property prefix envelope."""
        try:
            return pointer_get(data, self.identity_pointer)
        except PointerError:
            return pointer_get(data, "/" + escape_part(self.identity_property))

    def has_identity_value(self, data: Any) -> bool:
        """Whether data holds a non-null identity value."""
        return try_pointer_get(data, self.identity_pointer) is not None

    def get_identity_values(self, data: Any) -> dict[str, Any]:
        """Values of all identity fields present in data.

        Raises:
            SchemaNavigationError: When data holds none of them
        """
        values: dict[str, Any] = {}
        for name in self.identity_properties:
            value = try_pointer_get(data, self._require_property_pointer(name))
            if value is not None:
                values[name] = value
        if not values:
            raise SchemaNavigationError("Unable to fetch any identity value", schema_id=self.schema_id)
        return values

    def set_identity_value(self, data: Any, identity: Any) -> Any:
        """Set the identity field of data; identity may be a value or an identity mapping."""
        if isinstance(identity, Mapping):
            identity = self.get_identity_value(identity)
        return self.set_property_value(self.identity_property, data, identity)

    def set_identity_values(self, data: Any, identities: Mapping[str, Any]) -> Any:
        """Copy every identity field present in identities onto data."""
        for name in self.identity_properties:
            pointer = self._require_property_pointer(name)
            if pointer_has(identities, pointer):
                pointer_set(data, pointer, pointer_get(identities, pointer))
            elif name in identities:
                pointer_set(data, pointer, identities[name])
        return data

    # Form fields

    def qualifies_as_form_field(self, field: dict[str, Any], name: str | None = None) -> bool:
        """Whether field declares a visible form field."""
        options = field.get("field")
        if not isinstance(options, dict):
            return False
        visible = options.get("visible")
        if visible is True:
            return True
        if visible is False:
            return False
        if options.get("type") is not None:
            return True
        return name not in self.identity_properties and field.get("type") in DEFAULT_VISIBLE_FIELD_TYPES

    def _qualifies_as_subform(self, field: dict[str, Any]) -> bool:
        return (
            field.get("type") == "object"
            and isinstance(field.get("properties"), dict)
            and not self.has_pattern_properties(field)
        )

    @property
    def fields(self) -> dict[str, dict[str, Any]]:
        """Visible form fields keyed by data pointer."""
        return {
            self.property_prefix + escape_part(name): field
            for name, field in self.property_root.items()
            if isinstance(field, dict) and self.qualifies_as_form_field(field, name)
        }

    @property
    def fieldsets(self) -> dict[str, list[FieldDescriptor]]:
        """Form fields grouped by fieldset; nested objects become their own fieldset."""
        return self._collect_fieldsets(
            self.property_root, self.property_prefix, DEFAULT_FIELDSET, self._root.get("required") or []
        )

    def _collect_fieldsets(
        self,
        properties: dict[str, Any],
        prefix: str,
        fieldset_id: str,
        required: list[str],
    ) -> dict[str, list[FieldDescriptor]]:
        fieldsets: dict[str, list[FieldDescriptor]] = {}
        for name, field in properties.items():
            if not isinstance(field, dict):
                continue
            pointer = prefix + escape_part(name)
            if self._qualifies_as_subform(field):
                nested = self._collect_fieldsets(
                    field["properties"], pointer + "/", camel_case(pointer), field.get("required") or []
                )
                for key, descriptors in nested.items():
                    fieldsets.setdefault(key, []).extend(descriptors)
            elif self.qualifies_as_form_field(field, name):
                group = field["field"].get("fieldset") or fieldset_id
                fieldsets.setdefault(group, []).append(
                    FieldDescriptor(name=name, pointer=pointer, is_required=name in required, schema=field)
                )
        return fieldsets

    def is_field_required(self, name: str) -> bool:
        return name in (self._root.get("required") or [])

    def get_field_title(self, pointer: str, language: str = DEFAULT_LANGUAGE) -> str | None:
        return self._field_message(pointer, "title", language)

    def get_field_description(self, pointer: str, language: str = DEFAULT_LANGUAGE) -> str | None:
        return self._field_message(pointer, "description", language)

    def _field_message(self, pointer: str, message: str, language: str) -> str | None:
        if not pointer:
            return None
        field = self.fields.get(fix_json_pointer_path(pointer))
        if field is None:
            return None
        return get_translatable_string(field.get(message), language)

    # Collections

    def is_collection(self) -> bool:
        return isinstance(self._schema.get("columns"), list)

    @property
    def columns(self) -> list[SchemaColumnDescriptor]:
        """Declared columns, or columns generated from simple properties."""
        if self.is_collection():
            return [SchemaColumnDescriptor.model_validate(column) for column in self._schema["columns"]]
        return self.generate_columns()

    def generate_columns(self) -> list[SchemaColumnDescriptor]:
        """One column per simple-typed property that is not an id."""
        columns = []
        for name, field in self.property_root.items():
            if not isinstance(field, dict) or "id" in name.lower():
                continue
            if field.get("type") not in COLUMN_PROPERTY_TYPES:
                continue
            column_type = None
            if field["type"] == "string" and field.get("format") is not None:
                column_type = field["format"]
            elif field["type"] == "boolean":
                column_type = "boolean"
            columns.append(
                SchemaColumnDescriptor(
                    id=name, path="/" + escape_part(name), title=field.get("title"), type=column_type
                )
            )
        return columns

    # Links

    @property
    def links(self) -> list[SchemaHyperlinkDescriptor]:
        """Links of the property root followed by those of the schema itself."""
        if self._links is None:
            raw = list(self._root.get("links") or [])
            own = self._schema.get("links")
            if isinstance(own, list) and own is not self._root.get("links"):
                raw.extend(link for link in own if link not in raw)
            try:
                self._links = [SchemaHyperlinkDescriptor.model_validate(link) for link in raw]
            except ValueError as e:
                raise SchemaNavigationError(f"Invalid link in schema: {e}", schema_id=self.schema_id) from e
        return self._links

    def get_link(self, rel: str | int) -> SchemaHyperlinkDescriptor | None:
        """Link by relation name or by position."""
        if isinstance(rel, str):
            return next((link for link in self.links if link.rel == rel), None)
        if isinstance(rel, int) and not isinstance(rel, bool):
            return self.links[rel] if 0 <= rel < len(self.links) else None
        logger.debug("link_requested_with_invalid_rel", extra={"rel": repr(rel)})
        return None

    def has_link(self, rel: str | int) -> bool:
        return self.get_link(rel) is not None

    def get_first_link(self, rels: list[str] | tuple[str, ...]) -> SchemaHyperlinkDescriptor | None:
        """First link whose relation appears in rels, honouring the order of rels."""
        for rel in rels:
            link = self.get_link(rel)
            if link is not None:
                return link
        return None

    def get_link_uri_template_pointers(self, link: SchemaHyperlinkDescriptor) -> dict[str, str]:
        """Template variable to data pointer map of a link."""
        if link.template_pointers:
            return dict(link.template_pointers)
        return {name: self.property_prefix + escape_part(name) for name in variable_names(link.href)}

    def has_link_uri_template_pointers(self, link: SchemaHyperlinkDescriptor | None) -> bool:
        if link is None:
            return False
        if link.template_pointers is not None:
            return bool(link.template_pointers)
        return bool(variable_names(link.href))

    def resolve_link_href(
        self,
        link: SchemaHyperlinkDescriptor,
        data: Any = None,
        url_data: Mapping[str, Any] | None = None,
    ) -> str:
        """Expand the href of link.

        Template variables take their value from url_data first and from
        the pointer of the variable in data otherwise.
        """
        values: dict[str, Any] = {}
        for name, pointer in self.get_link_uri_template_pointers(link).items():
            if url_data is not None and name in url_data:
                values[name] = url_data[name]
            elif data is not None:
                values[name] = try_pointer_get(data, pointer)
        return expand_uri_template(link.href, values)

    # Schema lookups

    def get_field_descriptor_for_pointer(self, data_pointer: str) -> list[dict[str, Any]]:
        """Schemas describing the value at a root-relative data pointer.

        Returns an empty list when the pointer cannot be resolved.
        """
        try:
            definitions = get_applicable_property_definitions(self._root, data_pointer, self.get_schema)
        except ServicesError as e:
            logger.debug("field_descriptor_unresolved", extra={"pointer": data_pointer, "error": str(e)})
            return []

        descriptors = []
        for definition in definitions:
            ref_id, _, pointer = definition.partition("#")
            base = self._root if not ref_id else self.get_schema(normalize_schema_id(ref_id))
            if base is None:
                logger.debug("field_descriptor_schema_missing", extra={"schema_id": ref_id})
                continue
            descriptor = try_pointer_get(base, pointer)
            if descriptor is not None:
                descriptors.append(descriptor)
        return descriptors

    def get_field_descriptor_for_value(
        self, descriptors: list[dict[str, Any]], value: Any
    ) -> dict[str, Any] | None:
        """Pick the descriptor matching the JSON type of value.

        Required-ness is not considered: a None value selects the only
        descriptor when there is exactly one.
        """
        if len(descriptors) == 1 and value is None:
            return descriptors[0]
        if isinstance(value, bool):
            return next((d for d in descriptors if d.get("type") == "boolean"), None)
        if isinstance(value, str):
            return next((d for d in descriptors if d.get("type") == "string"), None)
        if isinstance(value, (int, float)):
            return next((d for d in descriptors if d.get("type") in ("integer", "number")), None)
        if isinstance(value, list):
            array = next((d for d in descriptors if d.get("type") == "array"), None)
            if array is None or not isinstance(array.get("items"), dict):
                return None
            items = dict(array["items"])
            if not isinstance(items.get("field"), dict) and isinstance(array.get("field"), dict):
                items["field"] = array["field"]
            return items
        return None

    def get_schema_ids_with_pointers(self) -> dict[str, str]:
        """Pointers of every id-bearing definition of the schema, keyed by id."""
        if self._schema_id_pointers is None:
            index: dict[str, str] = {}
            _index_definitions(self._schema, "", index)
            self._schema_id_pointers = index
        return self._schema_id_pointers

    def get_embedded_schema(self, schema_id: str) -> dict[str, Any] | None:
        """Schema embedded in this document, or None when it is not.

        Accepts local pointers (``#/definitions/x``), ids of embedded
        definitions and ids with a pointer fragment.
        """
        if not isinstance(schema_id, str) or not schema_id:
            return None
        if schema_id.startswith("#"):
            found = try_pointer_get(self._schema, schema_id[1:])
            return found if isinstance(found, dict) else None

        base, _, fragment = schema_id.partition("#")
        if fragment.startswith("/"):
            embedded = self.get_embedded_schema(base + "#")
            found = try_pointer_get(embedded, fragment) if embedded is not None else None
            return found if isinstance(found, dict) else None

        wanted = normalize_schema_id(schema_id)
        own_id = self._schema.get("id")
        if own_id and normalize_schema_id(own_id) == wanted:
            return self._schema
        pointer = self.get_schema_ids_with_pointers().get(wanted)
        if pointer is None:
            return None
        return try_pointer_get(self._schema, pointer)

    def get_schema(self, schema_id: str) -> dict[str, Any] | None:
        """Embedded schema, or the one supplied by the resolver."""
        embedded = self.get_embedded_schema(schema_id)
        if embedded is not None:
            return embedded
        if self._resolver is None:
            return None
        return self._resolver(schema_id)


def _has_identity_suffix(name: str, entity: str) -> bool:
    return name == entity or any(name == entity + suffix for suffix in IDENTITY_SUFFIXES)


def _index_definitions(schema: dict[str, Any], prefix: str, index: dict[str, str]) -> None:
    definitions = schema.get("definitions")
    if not isinstance(definitions, dict):
        return
    for key, definition in definitions.items():
        if not isinstance(definition, dict):
            continue
        pointer = f"{prefix}/definitions/{escape_part(key)}"
        if isinstance(definition.get("id"), str):
            index.setdefault(normalize_schema_id(definition["id"]), pointer)
        _index_definitions(definition, pointer, index)
