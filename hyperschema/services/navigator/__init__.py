"""Schema navigation: property roots, identity, fields and links."""

from .schema_navigator import SchemaNavigator
from .uri_template import expand_uri_template, variable_names
from .utils import (
    SchemaResolver,
    convert_schema_id_to_entity_name,
    get_applicable_property_definitions,
    get_schema_entity,
    get_translatable_string,
    merge_schemas,
    normalize_schema_id,
    resolve_and_merge_schemas,
)

__all__ = [
    "SchemaNavigator",
    "SchemaResolver",
    "convert_schema_id_to_entity_name",
    "expand_uri_template",
    "get_applicable_property_definitions",
    "get_schema_entity",
    "get_translatable_string",
    "merge_schemas",
    "normalize_schema_id",
    "resolve_and_merge_schemas",
    "variable_names",
]
