"""Base class for protocol models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def convert(text: str) -> str:
    if text == "field_meta":
        return "_meta"
    return to_camel(text)


class Schema(BaseModel):
    """Base class for protocol models."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=convert)

    def to_wire(self) -> dict[str, Any]:
        """Dump to the camelCase dict sent over the wire."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class AnnotatedObject(Schema):
    """Schema carrying the `_meta` extension point."""

    field_meta: Any | None = None
    """Extension point for implementations."""


class Request(AnnotatedObject):
    """Base request model."""


class Response(AnnotatedObject):
    """Base response model."""
