"""Utility helpers."""

from .http import HTTPClient
from .text import camel_case, kebab_case, key_variants, snake_case, upper_first, words

__all__ = ["HTTPClient", "camel_case", "kebab_case", "key_variants", "snake_case", "upper_first", "words"]
