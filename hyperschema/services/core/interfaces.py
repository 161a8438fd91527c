"""Ports implemented by collaborators outside the core.

Architecture:
    The core never talks to HTTP servers, storage backends or validator
    libraries directly. It consumes these protocols instead:

    - SchemaCache: key-value store of schemas by id
    - SchemaFetcher: loads a schema that is not cached yet
    - SchemaValidator: validates data against a schema
    - SchemaAgent: dispatches a hyperlink and returns the response

    Any object with the right methods satisfies a protocol; no inheritance
    is required.

See Also:
    - cache: In-memory and storage-backed SchemaCache implementations
    - io: HTTP SchemaFetcher and the SchemaLoader tying cache and fetcher
    - cursors.endpoint: Pages through collections via a SchemaAgent
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..models.schema import SchemaHyperlinkDescriptor
    from ..navigator.schema_navigator import SchemaNavigator

Schema = dict[str, Any]


@runtime_checkable
class SchemaCache(Protocol):
    """Store of schemas keyed by their id."""

    def get_schema(self, schema_id: str) -> Schema | None:
        """Schema with the given id, None when absent."""
        ...

    def set_schema(self, schema: Schema) -> None:
        """Store a schema under its ``id``."""
        ...

    def remove_schema(self, schema_id: str) -> None:
        """Drop the schema with the given id."""
        ...

    def get_schema_by(self, predicate: Callable[[Schema], bool]) -> Schema | None:
        """First stored schema satisfying predicate."""
        ...

    def each(self, fn: Callable[[Schema, str], None]) -> None:
        """Call ``fn(schema, schema_id)`` for every stored schema."""
        ...


class SchemaFetcher(Protocol):
    """Source of schemas that are not cached."""

    async def fetch_schema(self, schema_id: str) -> Schema:
        """Load the schema with the given id."""
        ...


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating data against a schema."""

    valid: bool
    errors: list[Any] = field(default_factory=list)


class SchemaValidator(Protocol):
    """Validates data against a schema."""

    async def validate(self, data: Any) -> ValidationResult:
        """Validate data."""
        ...


@dataclass(frozen=True)
class AgentResponse:
    """Response of a dispatched hyperlink."""

    body: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)
    status_code: int = 200


class SchemaAgent(Protocol):
    """Dispatches hyperlinks of the schema it is bound to."""

    @property
    def schema(self) -> SchemaNavigator:
        """Navigator of the schema the agent works with."""
        ...

    async def execute(
        self,
        link: SchemaHyperlinkDescriptor,
        data: Any = None,
        url_data: Mapping[str, Any] | None = None,
    ) -> AgentResponse:
        """Dispatch link with a request body and URI template values."""
        ...
