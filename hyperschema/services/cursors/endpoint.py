"""Cursor over a paginated collection endpoint.

Architecture:
    The cursor dispatches the list link of a schema through a SchemaAgent
    and reads one page from the response:

        EndpointCursor.select(page)
            -> pagination_request(page, limit)   # URI template values
            -> agent.execute(link, url_data=...)
            -> extract_pagination_info(response) # items, count, pages

Design Decisions:
    - Servers spell their pagination keys differently. Requests carry every
      spelling of the page and limit keys (camelCase, snake_case and
      kebab-case); the link's URI template picks the ones it knows.
    - Responses are searched in the body first, then the headers, then a
      ``pagination`` or ``meta`` envelope in the body. The first usable
      value found for each key wins.
    - Only searching is supported; filtering and sorting are server
      concerns that a list link does not describe. Wrap the cursor in a
      StreamingCursor to filter or sort client-side.

See Also:
    - core.interfaces.SchemaAgent: Port dispatching the link
    - StreamingCursor: Client-side filtering over any cursor
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from ..core.config import (
    COUNT_RESPONSE_KEYS,
    ITEMS_RESPONSE_KEYS,
    LIMIT_REQUEST_KEYS,
    LIST_LINK_RELATIONS,
    META_RESPONSE_KEYS,
    PAGE_REQUEST_KEYS,
    PAGES_RESPONSE_KEYS,
    CursorSettings,
)
from ..core.enums import CursorCapability
from ..core.exceptions import SchemaNavigationError
from ..core.interfaces import AgentResponse, SchemaAgent
from ..models.pagination import PaginationInfo
from ..models.schema import SchemaHyperlinkDescriptor
from ..utils.text import key_variants
from .base import BaseCursor, T
from .capabilities import SearchableCursorMixin
from .telemetry import log_page_size_exceeded

if TYPE_CHECKING:
    from ..navigator import SchemaNavigator

PaginationRequestGenerator = Callable[[int, int], dict[str, Any]]
PaginationInfoExtractor = Callable[[AgentResponse, int], PaginationInfo]


def pagination_request(page: int, limit: int) -> dict[str, Any]:
    """URI template values announcing page and limit in every known spelling."""
    values: dict[str, Any] = {}
    for key in PAGE_REQUEST_KEYS:
        for variant in key_variants(key):
            values[variant] = page
    for key in LIMIT_REQUEST_KEYS:
        for variant in key_variants(key):
            values[variant] = limit
    return values


def _as_count(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _as_items(value: Any) -> list[Any] | None:
    return value if isinstance(value, list) else None


def _lookup(data: Any, keys: tuple[str, ...], convert: Callable[[Any], Any]) -> Any:
    if not isinstance(data, Mapping):
        return None
    lowered = {str(k).lower(): v for k, v in data.items()}
    for key in keys:
        for variant in key_variants(key):
            value = data.get(variant)
            if value is None:
                value = lowered.get(variant.lower())
            converted = convert(value) if value is not None else None
            if converted is not None:
                return converted
    return None


def _meta_envelope(body: Any) -> Any:
    if not isinstance(body, Mapping):
        return None
    for key, value in body.items():
        if str(key).lower() in META_RESPONSE_KEYS:
            return value
    return None


def extract_pagination_info(response: AgentResponse, limit: int) -> PaginationInfo:
    """Read items and totals from a collection response.

    A bare list body is taken as the items. A missing item count falls back
    to the number of items, a missing page count is derived from the item
    count and limit.
    """
    sources = [response.body, response.headers, _meta_envelope(response.body)]

    items = _as_items(response.body)
    count = None
    total_pages = None
    for source in sources:
        if items is None:
            items = _lookup(source, ITEMS_RESPONSE_KEYS, _as_items)
        if count is None:
            count = _lookup(source, COUNT_RESPONSE_KEYS, _as_count)
        if total_pages is None:
            total_pages = _lookup(source, PAGES_RESPONSE_KEYS, _as_count)

    items = items or []
    if count is None:
        count = len(items)
    if total_pages is None:
        total_pages = math.ceil(count / limit) if count else 0
    return PaginationInfo(list(items), count, total_pages)


class EndpointCursor(SearchableCursorMixin, BaseCursor[T]):
    """Pages through a collection served behind a schema link.

    Args:
        agent: Agent bound to the collection schema
        link_name: Relation of the list link; defaults to the first of
            ``list``, ``collection`` and ``index`` the schema has
        url_data: Extra URI template values, such as parent identities
        limit: Page size
        settings: Cursor settings
        request_generator: Builds the pagination URI template values
        info_extractor: Reads a page from the agent response
    """

    capabilities = CursorCapability.SEARCHABLE

    def __init__(
        self,
        agent: SchemaAgent,
        link_name: str | None = None,
        url_data: Mapping[str, Any] | None = None,
        limit: int | None = None,
        settings: CursorSettings | None = None,
        request_generator: PaginationRequestGenerator = pagination_request,
        info_extractor: PaginationInfoExtractor = extract_pagination_info,
    ) -> None:
        super().__init__(limit=limit, settings=settings)
        self.agent = agent
        self.link_name = link_name
        self.url_data = dict(url_data or {})
        self.request_generator = request_generator
        self.info_extractor = info_extractor

    @property
    def schema(self) -> SchemaNavigator:
        return self.agent.schema

    @property
    def link(self) -> SchemaHyperlinkDescriptor:
        """Link dispatched to load a page.

        Raises:
            SchemaNavigationError: When the schema has no usable link
        """
        schema = self.agent.schema
        if self.link_name is not None:
            link = schema.get_link(self.link_name)
        else:
            link = schema.get_first_link(LIST_LINK_RELATIONS)
        if link is None:
            raise SchemaNavigationError(
                "Unable to find a link for this cursor to fetch any pages",
                schema_id=schema.schema_id,
            )
        return link

    def build_url_data(self, page: int) -> dict[str, Any]:
        """URI template values for loading page."""
        values = dict(self.url_data)
        values.update(self.request_generator(page, self._limit))
        if self._terms:
            values[self.settings.search_term_property] = " ".join(self._terms)
        return values

    async def _fetch_page(self, page: int) -> PaginationInfo:
        link = self.link
        response = await self.agent.execute(link, None, self.build_url_data(page))
        info = self.info_extractor(response, self._limit)
        if len(info.items) > self._limit:
            log_page_size_exceeded(
                cursor=type(self).__name__, page=page, items=len(info.items), limit=self._limit
            )
        return info
