"""Cursor event payloads."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..core.enums import CursorEvent


@dataclass(frozen=True)
class PageChangeEvent:
    """Emitted before (items None) and after (resolved items) a page load."""

    event: CursorEvent
    page: int
    items: list[Any] | None = None
    error: BaseException | None = None
