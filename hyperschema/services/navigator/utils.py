"""Schema traversal helpers used by the navigator.

Schema definitions are addressed by strings of the form
``"<schema id>#<pointer>"``; an empty schema id means the schema the
traversal started from.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable
from typing import Any
from urllib.parse import urljoin

from ..core.config import DEFAULT_LANGUAGE
from ..core.exceptions import PointerError, SchemaNavigationError
from ..pointer import escape_part, fix_json_pointer_path, parse_pointer, pointer_get
from ..pointer.iteration import is_index
from ..utils.text import camel_case, upper_first

logger = logging.getLogger(__name__)

SchemaResolver = Callable[[str], dict[str, Any] | None]

_MAX_REF_DEPTH = 32


def normalize_schema_id(schema_id: str) -> str:
    """Schema id with an empty fragment marker (``http://x/user#``)."""
    base, _, fragment = schema_id.partition("#")
    if fragment and fragment != "/":
        return schema_id
    return base + "#"


def convert_schema_id_to_entity_name(schema_id: str) -> str:
    """``"https://example.org/schemas/user-profile#"`` -> ``"UserProfile"``."""
    return upper_first(camel_case(schema_id.rstrip("/").split("/")[-1]))


def get_schema_entity(schema: dict[str, Any]) -> str | None:
    """Entity name declared by schema or derived from its id."""
    if schema.get("entity"):
        return schema["entity"]
    if schema.get("id"):
        return convert_schema_id_to_entity_name(schema["id"])
    return None


def get_translatable_string(value: Any, language: str = DEFAULT_LANGUAGE) -> str | None:
    """Pick language from a plain or translated string.

    Plain strings are considered English. Translation maps match on the
    language prefix, so ``"en"`` finds ``"en-GB"``.
    """
    if isinstance(value, str):
        return value if value and language.startswith("en") else None
    if isinstance(value, dict):
        return next((text for code, text in value.items() if code.startswith(language)), None)
    return None


def _definition(
    schema: dict[str, Any],
    ref_id: str,
    pointer: str,
    resolver: SchemaResolver | None,
) -> Any:
    base = schema
    if ref_id:
        own_id = schema.get("id")
        target = normalize_schema_id(urljoin(own_id, ref_id) if own_id else ref_id)
        if own_id is None or target != normalize_schema_id(own_id):
            base = resolver(target) if resolver else None
            if base is None:
                raise SchemaNavigationError(f"Unable to resolve schema '{target}'", schema_id=target)
    try:
        return pointer_get(base, pointer)
    except PointerError as e:
        raise SchemaNavigationError(
            f"Schema definition '{ref_id}#{pointer}' does not exist", schema_id=ref_id or schema.get("id")
        ) from e


def _reference_id(schema: dict[str, Any], ref_id: str, target: str) -> str:
    """Absolute id of a reference target seen inside ref_id; empty for schema itself."""
    own_id = schema.get("id")
    base = ref_id or own_id
    absolute = urljoin(base, target) if base else target
    if own_id and normalize_schema_id(absolute) == normalize_schema_id(own_id):
        return ""
    return absolute


def _dereference(
    candidates: Iterable[tuple[str, str]],
    schema: dict[str, Any],
    resolver: SchemaResolver | None,
) -> list[tuple[str, str]]:
    resolved: list[tuple[str, str]] = []
    pending = [(ref_id, pointer, 0) for ref_id, pointer in candidates]
    while pending:
        ref_id, pointer, depth = pending.pop(0)
        node = _definition(schema, ref_id, pointer, resolver)
        if not isinstance(node, dict):
            continue
        if isinstance(node.get("$ref"), str):
            if depth >= _MAX_REF_DEPTH:
                raise SchemaNavigationError(f"Reference chain at '{ref_id}#{pointer}' is too deep")
            target, _, fragment = node["$ref"].partition("#")
            pending.append((_reference_id(schema, ref_id, target) if target else ref_id, fragment, depth + 1))
            continue
        resolved.append((ref_id, pointer))
        for i, member in enumerate(node.get("allOf") or []):
            if isinstance(member, dict):
                pending.append((ref_id, f"{pointer}/allOf/{i}", depth + 1))
    return resolved


def _children(node: dict[str, Any], pointer: str, part: str) -> list[str]:
    matches: list[str] = []
    properties = node.get("properties")
    if isinstance(properties, dict) and part in properties:
        matches.append(f"{pointer}/properties/{escape_part(part)}")

    patterns = node.get("patternProperties")
    if isinstance(patterns, dict):
        for pattern in patterns:
            if re.search(pattern, part):
                matches.append(f"{pointer}/patternProperties/{escape_part(pattern)}")

    items = node.get("items")
    if items is not None and (is_index(part) or part in ("*", "-")):
        if isinstance(items, dict):
            matches.append(f"{pointer}/items")
        elif isinstance(items, list):
            if is_index(part) and int(part) < len(items):
                matches.append(f"{pointer}/items/{part}")
            elif isinstance(node.get("additionalItems"), dict):
                matches.append(f"{pointer}/additionalItems")

    if not matches and isinstance(node.get("additionalProperties"), dict):
        matches.append(f"{pointer}/additionalProperties")
    return matches


def get_applicable_property_definitions(
    schema: dict[str, Any],
    property_path: str,
    resolver: SchemaResolver | None = None,
) -> list[str]:
    """Schema definitions that describe the value at property_path.

    Walks the path through ``properties``, ``patternProperties``, ``items``
    and ``additionalProperties``, following ``$ref`` and ``allOf``.

    Args:
        schema: Schema describing the document the path points into
        property_path: Pointer into a document described by schema
        resolver: Loads schemas referenced by id

    Returns:
        Definitions as ``"<schema id>#<pointer>"`` strings; relative
        references are resolved to absolute ids (empty id for schema itself)

    Raises:
        SchemaNavigationError: When a reference cannot be resolved
    """
    path = fix_json_pointer_path(property_path).rstrip("/")
    parts = parse_pointer(path).parts if path else []

    candidates = _dereference([("", "")], schema, resolver)
    for part in parts:
        following: list[tuple[str, str]] = []
        for ref_id, pointer in candidates:
            node = _definition(schema, ref_id, pointer, resolver)
            following.extend((ref_id, child) for child in _children(node, pointer, part))
        candidates = _dereference(following, schema, resolver)
    return [f"{ref_id}#{pointer}" for ref_id, pointer in candidates]


def merge_schemas(target: dict[str, Any], source: dict[str, Any]) -> dict[str, Any]:
    """Union-merge source into a copy of target.

    Nested objects are shallow-assigned and arrays are concatenated; any
    other value from source replaces the one in target.
    """
    merged = dict(target)
    for key, value in source.items():
        current = merged.get(key)
        if isinstance(current, list) and isinstance(value, list):
            merged[key] = current + value
        elif isinstance(current, dict) and isinstance(value, dict):
            merged[key] = {**current, **value}
        else:
            merged[key] = value
    return merged


def resolve_and_merge_schemas(
    definitions: list[str],
    schema: dict[str, Any],
    resolver: SchemaResolver | None = None,
) -> dict[str, Any]:
    """Merge the definitions into one effective schema."""
    merged: dict[str, Any] = {}
    for definition in definitions:
        ref_id, _, pointer = definition.partition("#")
        node = _definition(schema, ref_id, pointer, resolver)
        if isinstance(node, dict):
            merged = merge_schemas(merged, {k: v for k, v in node.items() if k != "allOf"})
    logger.debug("schemas_merged", extra={"definitions": definitions})
    return merged
