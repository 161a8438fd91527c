"""JSON-Pointer engine with star and relative pointer dialects.

Example:
    >>> data = {"users": [{"name": "ada"}, {"name": "linus"}]}
    >>> pointer_get(data, "/users/*/name")
    'ada'
    >>> pointer_get_all(data, "/users/*/name")
    ['ada', 'linus']
"""

from .assignment import pointer_copy, pointer_remove, pointer_set
from .compiler import compile_pointer_get
from .iteration import DefaultGenerator, raise_not_found
from .masking import pointer_exclusion_mask, pointer_inclusion_mask
from .matching import is_pointer_equal, match_pointer
from .parser import (
    ParsedPointer,
    create_pointer,
    escape_part,
    fix_json_pointer_path,
    parse_pointer,
    parse_pointer_root_adjusted,
    unescape_part,
)
from .predicates import (
    is_absolute_json_pointer,
    is_json_pointer,
    is_relative_json_pointer,
    is_star_pointer,
)
from .retrieval import pointer_expand, pointer_get, pointer_get_all, pointer_has, try_pointer_get

__all__ = [
    "DefaultGenerator",
    "ParsedPointer",
    "compile_pointer_get",
    "create_pointer",
    "escape_part",
    "fix_json_pointer_path",
    "is_absolute_json_pointer",
    "is_json_pointer",
    "is_pointer_equal",
    "is_relative_json_pointer",
    "is_star_pointer",
    "match_pointer",
    "parse_pointer",
    "parse_pointer_root_adjusted",
    "pointer_copy",
    "pointer_exclusion_mask",
    "pointer_expand",
    "pointer_get",
    "pointer_get_all",
    "pointer_has",
    "pointer_inclusion_mask",
    "pointer_remove",
    "pointer_set",
    "raise_not_found",
    "try_pointer_get",
    "unescape_part",
]
