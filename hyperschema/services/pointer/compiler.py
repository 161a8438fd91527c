"""Compiled pointer accessors.

``compile_pointer_get`` turns a pointer into a chain of small accessor
closures, built once per distinct ``(pointer, root)`` pair and reused for
every document it is applied to. Filter and sort predicates evaluate the
same pointer against every item of a page, which is where this pays off.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import lru_cache
from typing import Any

from ..core.exceptions import PointerError
from .iteration import DASH, STAR, DefaultGenerator, array_index, first_key, is_index, raise_not_found
from .parser import KEY_MODIFIER, adjust_pointer, create_pointer

Step = Callable[[Any, DefaultGenerator], Any]
Accessor = Callable[[Any], Any]

_MISSING = object()


def _key_step(part: str, partial: str) -> Step:
    position = int(part) if is_index(part) else None

    def step(current: Any, default: DefaultGenerator) -> Any:
        if isinstance(current, dict):
            value = current.get(part, _MISSING)
        elif isinstance(current, list):
            if position is None:
                array_index(part, partial, partial.count("/") - 1)
            value = current[position] if position < len(current) else _MISSING
        else:
            value = _MISSING
        return default(partial, current) if value is _MISSING else value

    return step


def _star_step(partial: str, want_key: bool) -> Step:
    def step(current: Any, default: DefaultGenerator) -> Any:
        key = first_key(current)
        if key is None:
            return default(partial, current)
        if want_key:
            return key
        return current[int(key)] if isinstance(current, list) else current[key]

    return step


@lru_cache(maxsize=512)
def _compile(pointer: str, root: str) -> tuple[tuple[Step, ...], str | None]:
    parts, modifier = adjust_pointer(pointer, root)
    steps: list[Step] = []
    for i, part in enumerate(parts):
        if part == DASH:
            raise PointerError(f"'-' cannot be read in '{pointer}'", pointer=pointer, index=i)
        partial = create_pointer(parts[: i + 1])
        if part == STAR:
            want_key = modifier == KEY_MODIFIER and i == len(parts) - 1
            steps.append(_star_step(partial, want_key))
        else:
            steps.append(_key_step(part, partial))

    constant_key = None
    if modifier == KEY_MODIFIER and parts[-1] != STAR:
        constant_key = parts[-1]
    return tuple(steps), constant_key


def compile_pointer_get(
    pointer: str,
    root: str | None = "",
    default_generator: DefaultGenerator | None = None,
) -> Accessor:
    """Build a reusable accessor equivalent to ``pointer_get``.

    Args:
        pointer: Absolute, star or relative pointer
        root: Context root for relative pointers
        default_generator: Called for missing locations, as in ``pointer_get``

    Returns:
        Function taking a document and returning the addressed value

    Raises:
        PointerError: Immediately, for pointers that can never be read
    """
    steps, constant_key = _compile(pointer, root or "")
    generator = default_generator or raise_not_found

    if constant_key is not None:
        return lambda data: constant_key

    def accessor(data: Any) -> Any:
        current = data
        for step in steps:
            current = step(current, generator)
        return current

    return accessor
