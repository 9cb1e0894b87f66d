"""Error schema definitions."""

from __future__ import annotations

from typing import Any

from acp_connect.base import Schema


class Error(Schema):
    """JSON-RPC error object.

    See protocol docs: [JSON-RPC Error Object](https://www.jsonrpc.org/specification#error_object)
    """

    code: int
    """A number indicating the error type that occurred."""

    data: Any | None = None
    """Optional primitive or structured value with additional error information."""

    message: str
    """A short description of the error."""
