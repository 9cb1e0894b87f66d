"""Content block schema definitions."""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import Field

from acp_connect.base import AnnotatedObject


class TextContentBlock(AnnotatedObject):
    """Plain text content."""

    type: Literal["text"] = "text"

    annotations: Any | None = None

    text: str


class ImageContentBlock(AnnotatedObject):
    """Base64 encoded image."""

    type: Literal["image"] = "image"

    annotations: Any | None = None

    data: str

    mime_type: str

    uri: str | None = None


class AudioContentBlock(AnnotatedObject):
    """Base64 encoded audio."""

    type: Literal["audio"] = "audio"

    annotations: Any | None = None

    data: str

    mime_type: str


class ResourceContentBlock(AnnotatedObject):
    """A link to a resource the agent can access."""

    type: Literal["resource_link"] = "resource_link"

    annotations: Any | None = None

    description: str | None = None

    mime_type: str | None = None

    name: str

    size: int | None = None

    title: str | None = None

    uri: str


class EmbeddedResourceContentBlock(AnnotatedObject):
    """The contents of a resource, embedded into the prompt or response."""

    type: Literal["resource"] = "resource"

    annotations: Any | None = None

    resource: dict[str, Any]
    """Text or blob resource contents, passed through unchanged."""


ContentBlock = Annotated[
    (
        TextContentBlock
        | ImageContentBlock
        | AudioContentBlock
        | ResourceContentBlock
        | EmbeddedResourceContentBlock
    ),
    Field(discriminator="type"),
]
