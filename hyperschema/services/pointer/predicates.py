"""Syntactic pointer checks."""

from __future__ import annotations

import re
from typing import Any

_RELATIVE_POINTER = re.compile(r"(0|[1-9]\d*)(#|/.*)?", re.DOTALL)


def is_json_pointer(value: Any) -> bool:
    """Whether value is an absolute pointer (``""`` addresses the whole document)."""
    if not isinstance(value, str):
        return False
    if value == "":
        return True
    return value.startswith("/") and not value.endswith("/")


def is_star_pointer(value: Any) -> bool:
    """Whether value is an absolute pointer containing a ``*`` segment."""
    return is_json_pointer(value) and "*" in value.split("/")


def is_relative_json_pointer(value: Any) -> bool:
    """Whether value is a relative pointer (``0``, ``1/a``, ``2#``)."""
    return isinstance(value, str) and _RELATIVE_POINTER.fullmatch(value) is not None


def is_absolute_json_pointer(value: Any) -> bool:
    """Whether value is a schema URI with a pointer fragment (``id#/a/b``)."""
    return isinstance(value, str) and not is_relative_json_pointer(value) and "#/" in value
