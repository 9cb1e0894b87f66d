"""Common schema definitions."""

from __future__ import annotations

from acp_connect.base import Schema


class Implementation(Schema):
    """Describes the name and version of a protocol implementation.

    Includes an optional title for UI representation.
    """

    name: str
    """Intended for programmatic or logical use.

    Can be used as a display name fallback if title isn't present."""

    title: str | None = None
    """Intended for UI and end-user contexts."""

    version: str
    """Version of the implementation."""
