"""Presets for well-known ACP agents."""

from __future__ import annotations

from acp_connect.config import AgentConfig


OPENCODE = AgentConfig(id="opencode", name="OpenCode", command="opencode", args=["acp"])
CLAUDE_CODE = AgentConfig(id="claude-code", name="Claude Code", command="claude-code-acp")
GEMINI = AgentConfig(
    id="gemini",
    name="Gemini CLI",
    command="gemini",
    args=["--experimental-acp"],
)

AGENTS: dict[str, AgentConfig] = {agent.id: agent for agent in (OPENCODE, CLAUDE_CODE, GEMINI)}
DEFAULT_AGENT_ID = OPENCODE.id


def get_agent(agent_id: str) -> AgentConfig:
    """Look up a preset by id.

    Raises:
        KeyError: If no preset has that id
    """
    try:
        return AGENTS[agent_id]
    except KeyError:
        msg = f"Unknown agent {agent_id!r}. Available: {', '.join(AGENTS)}"
        raise KeyError(msg) from None


def get_default_agent() -> AgentConfig:
    return AGENTS[DEFAULT_AGENT_ID]


def get_first_available_agent() -> AgentConfig | None:
    """Return the first preset whose command is installed."""
    return next((agent for agent in AGENTS.values() if agent.is_available()), None)


def get_agents_with_status() -> list[tuple[AgentConfig, bool]]:
    """All presets paired with whether they are installed."""
    return [(agent, agent.is_available()) for agent in AGENTS.values()]
