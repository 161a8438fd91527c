"""Path walking shared by every pointer operation.

Reads resolve star segments to the first key or index, ``pointer_get_all``
expands them to every key or index, and writes create missing containers on
the way down. Missing locations are delegated to a default generator, which
raises ``PointerNotFoundError`` unless the caller supplies one.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any

from ..core.exceptions import PointerError, PointerNotFoundError
from .parser import create_pointer

STAR = "*"
DASH = "-"

_INDEX = re.compile(r"0|[1-9]\d*")

DefaultGenerator = Callable[[str, Any], Any]
"""Called as ``generator(partial_pointer, parent)`` for a missing location."""

_MISSING = object()


def raise_not_found(pointer: str, context: Any) -> Any:
    """Default generator: every missing location is an error."""
    raise PointerNotFoundError(f"Path '{pointer}' does not exist", pointer=pointer)


def is_index(part: str) -> bool:
    """Whether part is a valid array index segment."""
    return _INDEX.fullmatch(part) is not None


def array_index(part: str, pointer: str, index: int) -> int:
    """Parse an array index segment."""
    if not is_index(part):
        raise PointerError(
            f"Segment '{part}' of '{pointer}' is not a valid array index",
            pointer=pointer,
            index=index,
        )
    return int(part)


def lookup(current: Any, part: str, pointer: str, index: int) -> Any:
    """Child of current at part, or the ``_MISSING`` sentinel."""
    if isinstance(current, dict):
        return current.get(part, _MISSING)
    if isinstance(current, list):
        position = array_index(part, pointer, index)
        return current[position] if position < len(current) else _MISSING
    return _MISSING


def first_key(current: Any) -> str | None:
    """Key a star segment resolves to when reading, None if there is none."""
    if isinstance(current, dict):
        return next(iter(current), None)
    if isinstance(current, list):
        return "0" if current else None
    return None


def walk(
    data: Any,
    parts: list[str],
    pointer: str,
    default: DefaultGenerator = raise_not_found,
) -> tuple[Any, str | None]:
    """Resolve parts in data.

    Returns:
        Tuple of the value and the concrete key of its location (None for
        the document root)

    Raises:
        PointerError: On ``-`` segments or malformed array indexes
        PointerNotFoundError: From the default generator on missing paths
    """
    current = data
    key = None
    for i, part in enumerate(parts):
        if part == DASH:
            raise PointerError(f"'-' cannot be read in '{pointer}'", pointer=pointer, index=i)
        if part == STAR:
            part = first_key(current)
            if part is None:
                current = default(create_pointer(parts[: i + 1]), current)
                key = STAR
                continue
        child = lookup(current, part, pointer, i)
        if child is _MISSING:
            child = default(create_pointer(parts[:i] + [part]), current)
        current = child
        key = part
    return current, key


def expand(
    data: Any,
    parts: list[str],
    pointer: str,
    limit: int,
    default: DefaultGenerator = raise_not_found,
) -> list[tuple[list[str], Any]]:
    """Resolve parts expanding every star to all keys and indexes.

    Branches missing below an expanded star are skipped; a missing path
    before the first star is handed to the default generator.

    Returns:
        Concrete path and value pairs in depth-first order, at most limit
    """
    results: list[tuple[list[str], Any]] = []

    def visit(current: Any, i: int, prefix: list[str], strict: bool) -> None:
        if len(results) >= limit:
            return
        if i == len(parts):
            results.append((prefix, current))
            return

        part = parts[i]
        if part == DASH:
            raise PointerError(f"'-' cannot be read in '{pointer}'", pointer=pointer, index=i)

        if part == STAR:
            if isinstance(current, dict):
                keys = list(current)
            elif isinstance(current, list):
                keys = [str(n) for n in range(len(current))]
            else:
                keys = []
            for key in keys:
                visit(lookup(current, key, pointer, i), i + 1, prefix + [key], False)
            return

        child = lookup(current, part, pointer, i)
        if child is _MISSING:
            if not strict:
                return
            child = default(create_pointer(prefix + [part]), current)
        visit(child, i + 1, prefix + [part], strict)

    visit(data, 0, [], True)
    return results


def descend(
    data: Any,
    parts: list[str],
    pointer: str,
    *,
    create: bool,
    pad: bool = False,
) -> tuple[Any, str] | None:
    """Walk to the parent of the last segment for writing.

    Args:
        data: Document to walk
        parts: Absolute path segments, at least one
        pointer: Original pointer, for error messages
        create: Create missing containers (object or array chosen by
            whether the following segment is an array index or ``-``)
        pad: Fill skipped array positions with None instead of failing

    Returns:
        Parent container and last segment, or None when create is False and
        the path does not exist

    Raises:
        PointerError: On star segments, a non-final ``-``, out-of-bounds
            indexes or descending into a scalar
    """
    if not parts:
        raise PointerError("The document root cannot be written", pointer=pointer)

    for i, part in enumerate(parts):
        if part == STAR:
            raise PointerError(f"Star segments are ambiguous in writes ('{pointer}')", pointer=pointer, index=i)
        if part == DASH and i != len(parts) - 1:
            raise PointerError(f"'-' is only valid as the last segment of '{pointer}'", pointer=pointer, index=i)

    current = data
    for i, part in enumerate(parts[:-1]):
        following = parts[i + 1]
        child = lookup(current, part, pointer, i)
        if child is _MISSING or child is None:
            if not create:
                return None
            if not isinstance(current, (dict, list)):
                raise PointerError(
                    f"Cannot descend into a scalar at segment {i} of '{pointer}'", pointer=pointer, index=i
                )
            child = [] if following == DASH or is_index(following) else {}
            assign(current, part, child, pointer, i, pad=pad)
        elif not isinstance(child, (dict, list)):
            if not create:
                return None
            raise PointerError(
                f"Cannot descend into a scalar at segment {i + 1} of '{pointer}'", pointer=pointer, index=i + 1
            )
        current = child

    if not isinstance(current, (dict, list)):
        if not create:
            return None
        raise PointerError(f"Cannot write into a scalar at '{pointer}'", pointer=pointer, index=len(parts) - 1)
    return current, parts[-1]


def assign(container: Any, part: str, value: Any, pointer: str, index: int, *, pad: bool = False) -> None:
    """Set container[part] to value, appending for ``-`` or the next index."""
    if isinstance(container, dict):
        if part == DASH:
            raise PointerError(f"'-' only applies to arrays in '{pointer}'", pointer=pointer, index=index)
        container[part] = value
        return

    if part == DASH:
        container.append(value)
        return
    position = array_index(part, pointer, index)
    if position < len(container):
        container[position] = value
        return
    if position > len(container):
        if not pad:
            raise PointerError(
                f"Index {position} is out of bounds in '{pointer}'", pointer=pointer, index=index
            )
        container.extend([None] * (position - len(container)))
    container.append(value)
