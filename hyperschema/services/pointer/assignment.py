"""Write access to pointer-addressed data.

Writes must address exactly one location, so star segments are rejected.
Missing intermediate containers are created on the way down.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from ..core.config import DEFAULT_STAR_LIMIT
from ..core.exceptions import PointerError
from .iteration import DASH, array_index, assign, descend, expand
from .parser import KEY_MODIFIER, adjust_pointer

logger = logging.getLogger(__name__)


def _write_parts(pointer: str, root: str | None) -> list[str]:
    parts, modifier = adjust_pointer(pointer, root)
    if modifier == KEY_MODIFIER:
        raise PointerError(f"Key pointers cannot be written ('{pointer}')", pointer=pointer)
    return parts


def pointer_set(data: Any, pointer: str, value: Any, root: str | None = "") -> Any:
    """Set the value at pointer, creating missing containers.

    A trailing ``-`` appends to an array.

    Returns:
        The mutated document

    Raises:
        PointerError: On star segments, out-of-bounds indexes, writes into
            scalars or to the document root
    """
    parts = _write_parts(pointer, root)
    container, part = descend(data, parts, pointer, create=True)
    assign(container, part, value, pointer, len(parts) - 1)
    return data


def pointer_remove(data: Any, pointer: str, root: str | None = "") -> Any:
    """Remove the value at pointer; missing paths are left alone.

    Returns:
        The mutated document

    Raises:
        PointerError: On star segments or a non-final ``-``
    """
    parts = _write_parts(pointer, root)
    target = descend(data, parts, pointer, create=False)
    if target is None:
        logger.debug("pointer_remove_missing", extra={"pointer": pointer})
        return data

    container, part = target
    if isinstance(container, dict):
        container.pop(part, None)
    elif part != DASH:
        position = array_index(part, pointer, len(parts) - 1)
        if position < len(container):
            del container[position]
    return data


def pointer_copy(
    source: Any,
    pointer: str,
    target: Any = None,
    root: str | None = "",
    limit: int = DEFAULT_STAR_LIMIT,
) -> Any:
    """Copy the values addressed by pointer from source into target.

    Star segments expand to every location (bounded by limit). Containers
    created in target mirror the type of the source containers; skipped
    array positions are filled with None so indexes are preserved.

    Args:
        source: Document to copy from
        pointer: Absolute, star or relative pointer
        target: Document to copy into; a new object when omitted
        root: Context root for relative pointers
        limit: Maximum number of locations a star pointer expands to

    Returns:
        The target document

    Raises:
        PointerNotFoundError: When a non-star path does not exist in source
    """
    if target is None:
        target = [] if isinstance(source, list) else {}

    parts, _ = adjust_pointer(pointer, root)
    if not parts:
        raise PointerError("The document root cannot be copied into itself", pointer=pointer)
    copy_locations(source, target, expand(source, parts, pointer, limit), pointer)
    return target


def copy_locations(
    source: Any,
    target: Any,
    locations: list[tuple[list[str], Any]],
    pointer: str,
    keys_only: bool = False,
) -> None:
    """Copy expanded locations of source into target.

    With keys_only the locations are created with a None value, keeping any
    value target already holds there.
    """
    for path, value in locations:
        src, dst = source, target
        for i, part in enumerate(path[:-1]):
            src = src[int(part)] if isinstance(src, list) else src[part]
            child = _existing(dst, part)
            if not isinstance(child, (dict, list)):
                child = [] if isinstance(src, list) else {}
                assign(dst, part, child, pointer, i, pad=True)
            dst = child
        if keys_only:
            if _existing(dst, path[-1]) is None:
                assign(dst, path[-1], None, pointer, len(path) - 1, pad=True)
            continue
        assign(dst, path[-1], copy.deepcopy(value), pointer, len(path) - 1, pad=True)


def _existing(container: Any, part: str) -> Any:
    if isinstance(container, dict):
        return container.get(part)
    position = int(part)
    return container[position] if position < len(container) else None


