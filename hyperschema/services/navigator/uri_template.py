"""URI template expansion for hyperlink hrefs (RFC 6570, levels 1 to 3).

Supported expressions: ``{var}``, ``{+var}``, ``{#var}``, ``{.var}``,
``{/var}``, ``{;var}``, ``{?a,b}``, ``{&a}``, with the ``:n`` prefix and
``*`` explode modifiers. Undefined variables (None, empty lists and empty
mappings) are left out of the expansion.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

_EXPRESSION = re.compile(r"\{([^{}]+)\}")
_RESERVED = ":/?#[]@!$&'()*+,;="


@dataclass(frozen=True)
class _Operator:
    first: str
    separator: str
    named: bool
    if_empty: str
    allow_reserved: bool


_OPERATORS = {
    "": _Operator("", ",", False, "", False),
    "+": _Operator("", ",", False, "", True),
    "#": _Operator("#", ",", False, "", True),
    ".": _Operator(".", ".", False, "", False),
    "/": _Operator("/", "/", False, "", False),
    ";": _Operator(";", ";", True, "", False),
    "?": _Operator("?", "&", True, "=", False),
    "&": _Operator("&", "&", True, "=", False),
}


def _split_expression(expression: str) -> tuple[_Operator, list[str]]:
    operator = expression[0] if expression[0] in _OPERATORS else ""
    return _OPERATORS[operator], expression[len(operator) :].split(",")


def _varname(varspec: str) -> str:
    return varspec.rstrip("*").split(":", 1)[0].strip()


def variable_names(template: str) -> list[str]:
    """Names of all variables referenced by template, in order of appearance."""
    names: list[str] = []
    for expression in _EXPRESSION.findall(template):
        _, varspecs = _split_expression(expression)
        for varspec in varspecs:
            name = _varname(varspec)
            if name and name not in names:
                names.append(name)
    return names


def _text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _encode(value: Any, allow_reserved: bool) -> str:
    return quote(_text(value), safe=_RESERVED if allow_reserved else "")


def _expand_var(operator: _Operator, varspec: str, value: Any) -> str | None:
    name = _varname(varspec)
    explode = varspec.endswith("*")
    prefix = None
    if ":" in varspec and not explode:
        prefix = int(varspec.split(":", 1)[1])

    if value is None or (isinstance(value, (list, tuple, Mapping)) and not value):
        return None

    if isinstance(value, Mapping):
        pairs = [(str(k), v) for k, v in value.items() if v is not None]
        if explode:
            return operator.separator.join(
                f"{_encode(k, operator.allow_reserved)}={_encode(v, operator.allow_reserved)}" for k, v in pairs
            )
        joined = ",".join(
            f"{_encode(k, operator.allow_reserved)},{_encode(v, operator.allow_reserved)}" for k, v in pairs
        )
        return f"{name}={joined}" if operator.named else joined

    if isinstance(value, (list, tuple)):
        items = [_encode(item, operator.allow_reserved) for item in value if item is not None]
        if explode:
            if operator.named:
                return operator.separator.join(f"{name}={item}" for item in items)
            return operator.separator.join(items)
        joined = ",".join(items)
        return f"{name}={joined}" if operator.named else joined

    text = _text(value)
    if prefix is not None:
        text = text[:prefix]
    encoded = _encode(text, operator.allow_reserved)
    if not operator.named:
        return encoded
    return f"{name}={encoded}" if encoded else f"{name}{operator.if_empty}"


def expand_uri_template(template: str, values: Mapping[str, Any]) -> str:
    """Expand template with values.

    >>> expand_uri_template("/users/{id}{?fields}", {"id": 7, "fields": ["a", "b"]})
    '/users/7?fields=a,b'
    """

    def replace(match: re.Match[str]) -> str:
        operator, varspecs = _split_expression(match.group(1))
        expanded = []
        for varspec in varspecs:
            part = _expand_var(operator, varspec, values.get(_varname(varspec)))
            if part is not None:
                expanded.append(part)
        if not expanded:
            return ""
        return operator.first + operator.separator.join(expanded)

    return _EXPRESSION.sub(replace, template)
