"""Tests for automatic permission answers."""

from __future__ import annotations

import pytest

from acp_connect.permissions import PermissionResolver, select_allow_option
from acp_connect.schema import (
    AllowedOutcome,
    DeniedOutcome,
    PermissionOption,
    RequestPermissionRequest,
    ToolCall,
)


def make_request(*kinds: str) -> RequestPermissionRequest:
    options = [
        PermissionOption(option_id=f"opt-{i}", name=kind, kind=kind)  # type: ignore[arg-type]
        for i, kind in enumerate(kinds)
    ]
    return RequestPermissionRequest(
        session_id="s1",
        options=options,
        tool_call=ToolCall(tool_call_id="t1", title="Edit file"),
    )


@pytest.mark.parametrize(
    ("kinds", "expected"),
    [
        (("allow_once", "reject_once"), "opt-0"),
        (("reject_once", "allow_always"), "opt-1"),
        (("reject_always", "allow_always", "allow_once"), "opt-1"),
        (("allow_once", "allow_always"), "opt-0"),
    ],
)
def test_first_allow_option_is_selected(kinds: tuple[str, ...], expected: str):
    response = PermissionResolver().resolve(make_request(*kinds))
    assert response.outcome == AllowedOutcome(option_id=expected)


@pytest.mark.parametrize("kinds", [(), ("reject_once",), ("reject_once", "reject_always")])
def test_no_allow_option_cancels(kinds: tuple[str, ...]):
    response = PermissionResolver().resolve(make_request(*kinds))
    assert isinstance(response.outcome, DeniedOutcome)
    assert response.to_wire() == {"outcome": {"outcome": "cancelled"}}


def test_selected_outcome_wire_format():
    response = PermissionResolver().resolve(make_request("allow_always"))
    assert response.to_wire() == {"outcome": {"outcome": "selected", "optionId": "opt-0"}}


def test_select_allow_option_none():
    assert select_allow_option([]) is None
