"""Pointer parsing for JSON-Pointers, star pointers and relative pointers.

Architecture:
    Three pointer forms share one parser:

    - Absolute pointers (``/a/b/0``) follow RFC 6901.
    - Star pointers (``/a/*/c``) use ``*`` as a wildcard segment.
    - Relative pointers (``1/b`` or ``2#``) climb N levels from a context
      root before resolving the remainder, or return a key name when the
      pointer ends in ``#``.

    ``parse_pointer`` only splits and classifies. ``adjust_pointer`` applies
    a context root and yields the absolute path every other operation walks.

See Also:
    - iteration: Walks parsed paths through data
    - predicates: Cheap syntactic checks without parsing
"""

from __future__ import annotations

import re
from typing import NamedTuple

from ..core.exceptions import PointerError

_RELATIVE_ROOT = re.compile(r"-?\d+")

KEY_MODIFIER = "#"


class ParsedPointer(NamedTuple):
    """Result of splitting a pointer string.

    Attributes:
        root: Levels to climb for relative pointers, None for absolute ones
        parts: Unescaped path segments
        modifier: ``"#"`` when the key name is requested instead of the value
    """

    root: int | None
    parts: list[str]
    modifier: str | None


def escape_part(part: str) -> str:
    """Escape a single path segment."""
    return part.replace("~", "~0").replace("/", "~1")


def unescape_part(part: str) -> str:
    """Unescape a single path segment."""
    return part.replace("~1", "/").replace("~0", "~")


def create_pointer(parts: list[str] | tuple[str, ...]) -> str:
    """Build an absolute pointer from path segments."""
    return "".join("/" + escape_part(str(part)) for part in parts)


def fix_json_pointer_path(path: str, leading_slash: bool = True) -> str:
    """Normalize slashes of a pointer-like path.

    Collapses repeated slashes and enforces (or removes) the leading slash.
    A trailing slash is kept, since property prefixes use it to mark the
    place where a field name is appended.

    Args:
        path: Pointer or pointer-like path (``"a/b"``, ``"//a"``)
        leading_slash: Whether the result should start with ``/``

    Returns:
        Normalized path
    """
    path = re.sub(r"/{2,}", "/", path or "")
    if leading_slash:
        return path if path.startswith("/") else "/" + path
    return path.lstrip("/")


def parse_pointer(pointer: str) -> ParsedPointer:
    """Split a pointer into its root, unescaped parts and modifier.

    Args:
        pointer: Absolute, star or relative pointer

    Returns:
        ParsedPointer tuple

    Raises:
        PointerError: If the pointer is not a string or its first segment is
            neither empty nor an integer
    """
    if not isinstance(pointer, str):
        raise PointerError(f"Pointer must be a string, got {type(pointer).__name__}")

    segments = [unescape_part(part) for part in pointer.split("/")]
    head = segments.pop(0)

    if not segments and head.endswith(KEY_MODIFIER) and _RELATIVE_ROOT.fullmatch(head[:-1]):
        return ParsedPointer(int(head[:-1]), [], KEY_MODIFIER)

    if head == "":
        root = None
    elif _RELATIVE_ROOT.fullmatch(head):
        root = int(head)
    else:
        raise PointerError(f"Unable to parse pointer '{pointer}'", pointer=pointer, index=0)

    modifier = None
    last = segments[-1] if segments else ""
    if len(last) > 1 and last.endswith(KEY_MODIFIER):
        segments[-1] = last[:-1]
        modifier = KEY_MODIFIER

    return ParsedPointer(root, segments, modifier)


def context_parts(root: str | None) -> list[str]:
    """Path segments of a context root pointer.

    A trailing slash is ignored, so ``""`` and ``"/"`` both denote the
    document root.
    """
    if not root or root == "/":
        return []
    parsed = parse_pointer(root.rstrip("/") if root.endswith("/") else root)
    if parsed.root is not None:
        raise PointerError(f"Context root '{root}' must be an absolute pointer", pointer=root)
    return parsed.parts


def adjust_pointer(pointer: str, root: str | None = "") -> tuple[list[str], str | None]:
    """Resolve a pointer against a context root.

    Absolute pointers are returned unchanged. Relative pointers drop N
    trailing segments from the root and append their own parts.

    Returns:
        Tuple of absolute path segments and the modifier. With the ``#``
        modifier the requested key is the last segment of the path.

    Raises:
        PointerError: If a relative pointer climbs above the document root or
            asks for the key of the document root
    """
    parsed = parse_pointer(pointer)
    if parsed.root is None:
        return parsed.parts, parsed.modifier

    base = context_parts(root)
    depth = len(base)
    if parsed.root < 0:
        raise PointerError(f"Relative pointer '{pointer}' has a negative root", pointer=pointer, index=0)
    if parsed.root > depth:
        raise PointerError(
            f"Relative pointer '{pointer}' climbs {parsed.root} levels but root '{root}' is only {depth} deep",
            pointer=pointer,
            index=0,
        )

    parts = base[: depth - parsed.root] + parsed.parts
    if parsed.modifier == KEY_MODIFIER and not parts:
        raise PointerError(f"The document root has no key (pointer '{pointer}')", pointer=pointer, index=0)
    return parts, parsed.modifier


def parse_pointer_root_adjusted(pointer: str, root: str | None = "") -> list[str] | str:
    """Absolute path of a pointer, or the key name for ``#`` pointers.

    >>> parse_pointer_root_adjusted("1/c", "/a/b")
    ['a', 'c']
    >>> parse_pointer_root_adjusted("0#", "/a/b")
    'b'
    """
    parts, modifier = adjust_pointer(pointer, root)
    if modifier == KEY_MODIFIER:
        return parts[-1]
    return parts
