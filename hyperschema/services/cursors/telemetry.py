"""Structured logging for cursor operations.

Cursor classes report page loads and page-map growth through these hooks so
every cursor logs the same event names and fields.
"""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)


def log_page_requested(
    *,
    cursor: str,
    page: int,
    limit: int,
    force_reload: bool = False,
) -> None:
    """Log the start of a page load.

    Args:
        cursor: Cursor class name
        page: Requested page (1-indexed)
        limit: Page size
        force_reload: Whether the load was forced
    """
    logger.debug(
        "cursor_page_requested",
        extra={"cursor": cursor, "page": page, "limit": limit, "force_reload": force_reload},
    )


def log_page_loaded(
    *,
    cursor: str,
    page: int,
    items: int,
    count: int,
    total_pages: int,
    latency_ms: float | None = None,
) -> None:
    """Log a committed page load.

    Args:
        cursor: Cursor class name
        page: Loaded page
        items: Number of items on the page
        count: Reported collection size
        total_pages: Reported number of pages
        latency_ms: Load latency in milliseconds (optional)
    """
    logger.info(
        "cursor_page_loaded",
        extra={
            "cursor": cursor,
            "page": page,
            "items": items,
            "count": count,
            "total_pages": total_pages,
            "latency_ms": latency_ms,
        },
    )


def log_page_error(
    *,
    cursor: str,
    page: int,
    error_type: str,
    error_message: str,
) -> None:
    """Log a failed page load.

    Args:
        cursor: Cursor class name
        page: Page that failed to load
        error_type: Exception class name
        error_message: Exception message
    """
    logger.error(
        "cursor_page_error",
        extra={
            "cursor": cursor,
            "page": page,
            "error_type": error_type,
            "error_message": error_message,
        },
    )


def log_page_size_exceeded(*, cursor: str, page: int, items: int, limit: int) -> None:
    """Log a source returning more items than the page size."""
    logger.warning(
        "cursor_page_size_exceeded",
        extra={"cursor": cursor, "page": page, "items": items, "limit": limit},
    )


def log_page_map_extended(
    *,
    page: int,
    from_page: int,
    from_index: int,
    to_page: int,
    to_index: int,
    items: int,
) -> None:
    """Log a new streaming page-map entry.

    Args:
        page: Client page the entry describes
        from_page: First parent page of the slice
        from_index: Offset in the first parent page
        to_page: Last parent page of the slice
        to_index: End offset (exclusive) in the last parent page
        items: Items on the client page
    """
    logger.debug(
        "cursor_page_map_extended",
        extra={
            "page": page,
            "from_page": from_page,
            "from_index": from_index,
            "to_page": to_page,
            "to_index": to_index,
            "items": items,
        },
    )


def log_unknown_filter_operator(*, operator: Any, path: str) -> None:
    """Log a filter whose operator is not recognised."""
    logger.warning("cursor_unknown_filter_operator", extra={"operator": repr(operator), "path": path})
