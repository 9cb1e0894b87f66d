"""Agent and client configuration."""

from __future__ import annotations

import shutil
from typing import TYPE_CHECKING, Any, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator

from acp_connect.meta import PROTOCOL_VERSION


if TYPE_CHECKING:
    from os import PathLike


class AgentConfig(BaseModel):
    """How to launch an ACP agent.

    Example:
        ```yaml
        agent:
          id: opencode
          name: OpenCode
          command: opencode
          args: [acp]
          env:
            OPENCODE_LOG: debug
        ```
    """

    model_config = ConfigDict(frozen=True)

    id: str
    """Stable identifier of the agent."""

    name: str
    """Display name."""

    command: str
    """Executable to spawn, resolved through PATH."""

    args: list[str] = Field(default_factory=list)
    """Arguments passed to the executable."""

    env: dict[str, str] = Field(default_factory=dict)
    """Environment overrides on top of the inherited environment."""

    def is_available(self) -> bool:
        """Whether the command resolves on this host."""
        return shutil.which(self.command) is not None


class ClientConfig(BaseModel):
    """Settings of an ACPClient."""

    agent: AgentConfig = Field(default_factory=lambda: _default_agent())
    """Agent to launch. A preset id may be given instead of a full config."""

    client_name: str = "acp-connect"
    """Name sent as clientInfo during the handshake."""

    client_version: str = "0.1.0"
    """Version sent as clientInfo during the handshake."""

    protocol_version: int = PROTOCOL_VERSION

    skip_availability_check: bool = False
    """Spawn the agent without checking the command resolves first."""

    handshake_timeout: float | None = Field(default=None, gt=0)
    """Seconds to wait for the initialize response. None waits indefinitely."""

    terminate_timeout: float = Field(default=5.0, gt=0)
    """Seconds to wait for a graceful exit in `aclose()` before killing."""

    log_level: str | None = None
    """Level for the client's own logger. None leaves it to the global config."""

    @field_validator("agent", mode="before")
    @classmethod
    def _resolve_preset(cls, value: Any) -> Any:
        if isinstance(value, str):
            from acp_connect.agents import get_agent

            try:
                return get_agent(value)
            except KeyError as exc:
                raise ValueError(exc.args[0]) from None
        return value

    @classmethod
    def from_yaml(cls, path: str | PathLike[str]) -> Self:
        """Load the configuration from a YAML file.

        Raises:
            ValueError: If the file cannot be read or is invalid
        """
        import yamling

        try:
            data = yamling.load_yaml_file(path)
            return cls.model_validate(data)
        except Exception as exc:
            msg = f"Failed to load client config from {path}"
            raise ValueError(msg) from exc


def _default_agent() -> AgentConfig:
    from acp_connect.agents import get_default_agent

    return get_default_agent()
