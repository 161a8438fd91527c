"""Identifier case conversions."""

from __future__ import annotations

import re

_WORDS = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|\d+")


def words(value: str) -> list[str]:
    """Split an identifier into words on case changes and punctuation."""
    return _WORDS.findall(value or "")


def upper_first(value: str) -> str:
    return value[:1].upper() + value[1:]


def camel_case(value: str) -> str:
    """``"user-profile id"`` -> ``"userProfileId"``."""
    parts = words(value)
    if not parts:
        return ""
    return parts[0].lower() + "".join(part.capitalize() for part in parts[1:])


def snake_case(value: str) -> str:
    """``"pageNumber"`` -> ``"page_number"``."""
    return "_".join(part.lower() for part in words(value))


def kebab_case(value: str) -> str:
    """``"pageNumber"`` -> ``"page-number"``."""
    return "-".join(part.lower() for part in words(value))


def key_variants(key: str) -> tuple[str, ...]:
    """A camelCase key followed by its distinct snake_case and kebab-case spellings."""
    variants = [key]
    for variant in (snake_case(key), kebab_case(key)):
        if variant not in variants:
            variants.append(variant)
    return tuple(variants)
