"""Automatic answers to agent permission requests."""

from __future__ import annotations

from typing import TYPE_CHECKING

from acp_connect.log import get_logger
from acp_connect.schema import AllowedOutcome, DeniedOutcome, RequestPermissionResponse


if TYPE_CHECKING:
    from collections.abc import Sequence

    import structlog

    from acp_connect.schema import PermissionOption, RequestPermissionRequest


ALLOW_KINDS = frozenset({"allow_once", "allow_always"})


def select_allow_option(options: Sequence[PermissionOption]) -> PermissionOption | None:
    """Return the first option granting permission, if any."""
    return next((option for option in options if option.kind in ALLOW_KINDS), None)


class PermissionResolver:
    """Grants every permission request the agent makes an allow option for.

    Requests without an allow option are answered as cancelled. Nothing
    here ever waits for a human.
    """

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None) -> None:
        self._logger = logger or get_logger(__name__)

    def resolve(self, request: RequestPermissionRequest) -> RequestPermissionResponse:
        tool_name = request.tool_call.title or request.tool_call.tool_call_id
        if option := select_allow_option(request.options):
            self._logger.info(
                "Auto-granting permission",
                tool=tool_name,
                option_id=option.option_id,
                kind=option.kind,
            )
            return RequestPermissionResponse(outcome=AllowedOutcome(option_id=option.option_id))

        self._logger.info("No allow option offered, cancelling permission request", tool=tool_name)
        return RequestPermissionResponse(outcome=DeniedOutcome())
