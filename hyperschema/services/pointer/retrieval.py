"""Read access to pointer-addressed data."""

from __future__ import annotations

import logging
from typing import Any

from ..core.config import DEFAULT_STAR_LIMIT
from ..core.exceptions import PointerError, PointerNotFoundError
from .iteration import DefaultGenerator, expand, raise_not_found, walk
from .parser import KEY_MODIFIER, adjust_pointer, create_pointer

logger = logging.getLogger(__name__)


def pointer_get(
    data: Any,
    pointer: str,
    root: str | None = "",
    default_generator: DefaultGenerator | None = None,
) -> Any:
    """Value addressed by pointer.

    Star segments resolve to the first index or key. A pointer ending in
    ``#`` returns the key name of its location instead of the value.

    Args:
        data: Document to read
        pointer: Absolute, star or relative pointer
        root: Context root for relative pointers
        default_generator: Called as ``generator(partial_pointer, parent)``
            for missing locations; its return value stands in for the
            missing one. Defaults to raising ``PointerNotFoundError``.

    Returns:
        The addressed value or key name

    Raises:
        PointerError: On malformed or structurally invalid pointers
        PointerNotFoundError: When the path does not exist
    """
    parts, modifier = adjust_pointer(pointer, root)
    if modifier == KEY_MODIFIER and parts[-1] != "*":
        return parts[-1]
    value, key = walk(data, parts, pointer, default_generator or raise_not_found)
    return key if modifier == KEY_MODIFIER else value


def try_pointer_get(
    data: Any,
    pointer: str,
    root: str | None = "",
    default_generator: DefaultGenerator | None = None,
) -> Any:
    """Like ``pointer_get`` but returns None instead of raising."""
    try:
        return pointer_get(data, pointer, root, default_generator)
    except PointerError:
        return None


def pointer_has(data: Any, pointer: str, root: str | None = "") -> bool:
    """Whether pointer addresses an existing location."""
    try:
        pointer_get(data, pointer, root)
    except PointerNotFoundError:
        return False
    return True


def pointer_get_all(
    data: Any,
    pointer: str,
    root: str | None = "",
    limit: int = DEFAULT_STAR_LIMIT,
    default_generator: DefaultGenerator | None = None,
) -> list[Any]:
    """All values addressed by a star pointer, depth-first, at most limit.

    Key pointers (``#``) yield the concrete key of every location.
    """
    parts, modifier = adjust_pointer(pointer, root)
    matches = expand(data, parts, pointer, limit, default_generator or raise_not_found)
    if modifier == KEY_MODIFIER:
        return [path[-1] for path, _ in matches]
    return [value for _, value in matches]


def pointer_expand(
    data: Any,
    pointer: str,
    root: str | None = "",
    limit: int = DEFAULT_STAR_LIMIT,
) -> list[str]:
    """Concrete absolute pointers a star pointer expands to in data.

    Returns an empty list when the path does not exist. The ``#`` modifier
    is dropped.
    """
    parts, _ = adjust_pointer(pointer, root)
    try:
        matches = expand(data, parts, pointer, limit)
    except PointerNotFoundError:
        logger.debug("pointer_expand_missing", extra={"pointer": pointer})
        return []
    return [create_pointer(path) for path, _ in matches]
