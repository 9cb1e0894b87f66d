"""Client for agents speaking the Agent Client Protocol over stdio.

Spawns the agent process, performs the handshake, manages a single
session and fans out streamed updates to subscribers.
"""

from __future__ import annotations

from importlib.metadata import version

from acp_connect.agents import (
    get_agent,
    get_agents_with_status,
    get_default_agent,
    get_first_available_agent,
)
from acp_connect.client import ACPClient
from acp_connect.config import AgentConfig, ClientConfig
from acp_connect.diagnostics import CLASSIFIER_VERSION, DiagnosticClassifier, ErrorSignal
from acp_connect.events import (
    AgentErrorReported,
    ClientEvent,
    CommandsChanged,
    ModeChanged,
    PromptFinished,
    TextDelta,
    ToolCallFinished,
    ToolCallStarted,
    UnrecognizedUpdate,
)
from acp_connect.exceptions import (
    ACPClientError,
    AgentUnavailableError,
    AlreadyActiveError,
    ConnectionClosedError,
    NoActiveSessionError,
    NotConnectedError,
    ProcessError,
    ProtocolError,
    RequestError,
    SpawnError,
)
from acp_connect.log import configure_logging, get_logger, shutdown_logging
from acp_connect.session import Session, SessionMetadata
from acp_connect.state import ConnectionState
from acp_connect.subscribers import Subscription

__version__ = version("acp-connect")

__all__ = [
    "CLASSIFIER_VERSION",
    "ACPClient",
    "ACPClientError",
    "AgentConfig",
    "AgentErrorReported",
    "AgentUnavailableError",
    "AlreadyActiveError",
    "ClientConfig",
    "ClientEvent",
    "CommandsChanged",
    "ConnectionClosedError",
    "ConnectionState",
    "DiagnosticClassifier",
    "ErrorSignal",
    "ModeChanged",
    "NoActiveSessionError",
    "NotConnectedError",
    "ProcessError",
    "PromptFinished",
    "ProtocolError",
    "RequestError",
    "Session",
    "SessionMetadata",
    "SpawnError",
    "Subscription",
    "TextDelta",
    "ToolCallFinished",
    "ToolCallStarted",
    "UnrecognizedUpdate",
    "configure_logging",
    "get_agent",
    "get_agents_with_status",
    "get_default_agent",
    "get_first_available_agent",
    "get_logger",
    "shutdown_logging",
]
