"""Capability schema."""

from __future__ import annotations

from pydantic import Field

from acp_connect.base import AnnotatedObject


class FileSystemCapability(AnnotatedObject):
    """File system capabilities that a client may support."""

    read_text_file: bool | None = None
    """Whether the Client supports `fs/read_text_file` requests."""

    write_text_file: bool | None = None
    """Whether the Client supports `fs/write_text_file` requests."""


class ClientCapabilities(AnnotatedObject):
    """Capabilities supported by the client.

    All fields default to unset so that an empty instance serializes to `{}`:
    this client advertises no file system or terminal support.
    """

    fs: FileSystemCapability | None = None
    """File system capabilities supported by the client."""

    terminal: bool | None = None
    """Whether the Client supports all `terminal/*` methods."""


class PromptCapabilities(AnnotatedObject):
    """Prompt content types the agent accepts beyond text and resource links."""

    audio: bool | None = False
    embedded_context: bool | None = False
    image: bool | None = False


class McpCapabilities(AnnotatedObject):
    """MCP transports supported by the agent."""

    http: bool | None = False
    sse: bool | None = False


class AgentCapabilities(AnnotatedObject):
    """Capabilities supported by the agent.

    See protocol docs: [Agent Capabilities](https://agentclientprotocol.com/protocol/initialization#agent-capabilities)
    """

    load_session: bool | None = False
    """Whether the agent supports `session/load`."""

    mcp_capabilities: McpCapabilities | None = Field(default_factory=McpCapabilities)
    """MCP capabilities supported by the agent."""

    prompt_capabilities: PromptCapabilities | None = Field(default_factory=PromptCapabilities)
    """Prompt capabilities supported by the agent."""
