"""Structural comparison of pointers."""

from __future__ import annotations

from .parser import parse_pointer

PointerLike = str | list[str] | tuple[str, ...]


def _parts(pointer: PointerLike) -> list[str]:
    if isinstance(pointer, str):
        return parse_pointer(pointer).parts
    return list(pointer)


def _segments_equal(a: list[str], b: list[str]) -> bool:
    return all(x == y or x == "*" or y == "*" for x, y in zip(a, b))


def is_pointer_equal(a: PointerLike, b: PointerLike) -> bool:
    """Whether two pointers address the same location.

    A ``*`` segment on either side matches any segment.
    """
    parts_a, parts_b = _parts(a), _parts(b)
    return len(parts_a) == len(parts_b) and _segments_equal(parts_a, parts_b)


def match_pointer(a: PointerLike, b: PointerLike) -> int | None:
    """Relative position of b with respect to a.

    Returns:
        0 when both address the same location, ``n`` when b lies n levels
        below a, ``-n`` when b lies n levels above a, None when unrelated
    """
    parts_a, parts_b = _parts(a), _parts(b)
    if not _segments_equal(parts_a, parts_b):
        return None
    return len(parts_b) - len(parts_a)
