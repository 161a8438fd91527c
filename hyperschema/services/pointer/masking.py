"""Inclusion and exclusion masks over pointer-addressed data.

An inclusion mask builds a new document holding only the addressed paths;
an exclusion mask removes them from a deep copy. Pointers that address
nothing are ignored by both.

Key pointers (``/a#``) in an inclusion mask keep only the key names of the
object at ``/a``, each mapped to None. They are skipped when another pointer
of the same mask already includes children of ``/a``.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from ..core.config import DEFAULT_STAR_LIMIT
from ..core.exceptions import PointerNotFoundError
from .assignment import copy_locations, pointer_remove
from .iteration import expand, is_index
from .parser import KEY_MODIFIER, adjust_pointer, create_pointer

logger = logging.getLogger(__name__)


def _covered(pointer: str, pointers: list[str]) -> bool:
    prefix = pointer[: -len(KEY_MODIFIER)] + "/"
    return any(other != pointer and other.startswith(prefix) for other in pointers)


def pointer_inclusion_mask(
    data: Any,
    pointers: list[str],
    root: str | None = "",
    limit: int = DEFAULT_STAR_LIMIT,
) -> Any:
    """New document containing only the paths addressed by pointers.

    Args:
        data: Source document, left untouched
        pointers: Absolute, star, relative or key pointers
        root: Context root for relative pointers
        limit: Maximum number of locations each star pointer expands to

    Returns:
        Masked copy of data
    """
    result: Any = [] if isinstance(data, list) else {}
    for pointer in pointers:
        parts, modifier = adjust_pointer(pointer, root)
        keys_only = modifier == KEY_MODIFIER
        if keys_only:
            if _covered(pointer, pointers):
                continue
            parts = parts + ["*"]
        if not parts:
            return copy.deepcopy(data)

        try:
            locations = expand(data, parts, pointer, limit)
        except PointerNotFoundError:
            logger.debug("mask_pointer_missing", extra={"pointer": pointer})
            continue
        copy_locations(data, result, locations, pointer, keys_only=keys_only)
    return result


def _removal_order(parts: list[str]) -> list[tuple[int, int | str]]:
    return [(0, int(part)) if is_index(part) else (1, part) for part in parts]


def pointer_exclusion_mask(
    data: Any,
    pointers: list[str],
    root: str | None = "",
    limit: int = DEFAULT_STAR_LIMIT,
) -> Any:
    """Deep copy of data without the paths addressed by pointers.

    Star pointers remove every location they expand to. Array elements are
    removed from the highest index down so earlier removals do not shift
    later ones.
    """
    result = copy.deepcopy(data)
    paths: list[list[str]] = []
    for pointer in pointers:
        parts, _ = adjust_pointer(pointer, root)
        try:
            paths.extend(path for path, _ in expand(result, parts, pointer, limit))
        except PointerNotFoundError:
            logger.debug("mask_pointer_missing", extra={"pointer": pointer})

    for path in sorted(paths, key=_removal_order, reverse=True):
        if path:
            pointer_remove(result, create_pointer(path))
    return result
