"""Protocol constants."""

from __future__ import annotations

from typing import Final


PROTOCOL_VERSION: Final = 1

AGENT_METHODS: Final = {
    "initialize": "initialize",
    "session_new": "session/new",
    "session_set_mode": "session/set_mode",
    "session_set_model": "session/set_model",
    "session_prompt": "session/prompt",
    "session_cancel": "session/cancel",
}
"""Methods the agent implements (client -> agent)."""
