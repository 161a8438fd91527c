"""Schema descriptor models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..pointer import fix_json_pointer_path


class SchemaHyperlinkDescriptor(BaseModel):
    """One followable Hyperschema link.

    ``href`` is a URI template whose ``{param}`` placeholders must resolve
    against supplied data before the link is dispatched.
    """

    rel: str = Field(..., min_length=1)
    href: str
    method: str = "GET"
    title: str | None = None
    enc_type: str | None = Field(None, alias="encType")
    media_type: str | None = Field(None, alias="mediaType")
    schema_: dict[str, Any] | None = Field(None, alias="schema")
    target_schema: dict[str, Any] | None = Field(None, alias="targetSchema")
    template_pointers: dict[str, str] | None = Field(None, alias="templatePointers")

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    @field_validator("method")
    @classmethod
    def validate_method(cls, v: str) -> str:
        """Normalize the HTTP verb to upper case."""
        return v.upper()


class SchemaColumnDescriptor(BaseModel):
    """Column of a collection schema."""

    id: str = Field(..., min_length=1)
    path: str | None = None
    title: str | dict[str, str] | None = None
    type: str | None = None
    format: str | None = None
    sortable: bool = True
    filterable: bool = True

    model_config = ConfigDict(frozen=True, extra="allow")

    @property
    def pointer(self) -> str:
        """Pointer of the column value inside a collection item."""
        return fix_json_pointer_path(self.path or self.id)


@dataclass(frozen=True)
class FieldDescriptor:
    """A form field of a schema, with its location in the data."""

    name: str
    pointer: str
    is_required: bool = False
    schema: dict[str, Any] = field(default_factory=dict)

    @property
    def type(self) -> str | None:
        return self.schema.get("type")
