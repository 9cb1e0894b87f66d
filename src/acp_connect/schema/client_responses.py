"""Responses sent from the client to the agent."""

from __future__ import annotations

from acp_connect.base import Response
from acp_connect.schema.tool_call import PermissionOutcome


class RequestPermissionResponse(Response):
    """Response to a permission request."""

    outcome: PermissionOutcome
    """The user's decision on the permission request."""


ClientResponse = RequestPermissionResponse
