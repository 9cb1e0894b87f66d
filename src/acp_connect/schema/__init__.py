"""Schema definitions for the ACP protocol, as far as this client uses it."""

from acp_connect.schema.agent_requests import AgentRequest, RequestPermissionRequest
from acp_connect.schema.agent_responses import (
    AgentResponse,
    InitializeResponse,
    NewSessionResponse,
    PromptResponse,
    SetSessionModelResponse,
    SetSessionModeResponse,
    StopReason,
)
from acp_connect.schema.capabilities import (
    AgentCapabilities,
    ClientCapabilities,
    FileSystemCapability,
    McpCapabilities,
    PromptCapabilities,
)
from acp_connect.schema.client_requests import (
    InitializeRequest,
    NewSessionRequest,
    PromptRequest,
    SetSessionModelRequest,
    SetSessionModeRequest,
)
from acp_connect.schema.client_responses import ClientResponse, RequestPermissionResponse
from acp_connect.schema.common import Implementation
from acp_connect.schema.content_blocks import (
    AudioContentBlock,
    ContentBlock,
    EmbeddedResourceContentBlock,
    ImageContentBlock,
    ResourceContentBlock,
    TextContentBlock,
)
from acp_connect.schema.errors import Error
from acp_connect.schema.notifications import CancelNotification, SessionNotification
from acp_connect.schema.session_state import (
    ModelInfo,
    SessionMode,
    SessionModelState,
    SessionModeState,
)
from acp_connect.schema.session_updates import (
    AgentMessageChunk,
    AgentPlanUpdate,
    AgentThoughtChunk,
    AvailableCommandsUpdate,
    CurrentModeUpdate,
    PlanEntry,
    SessionUpdate,
    ToolCallProgress,
    ToolCallStart,
    UnknownSessionUpdate,
    UserMessageChunk,
)
from acp_connect.schema.slash_commands import AvailableCommand, CommandInputHint
from acp_connect.schema.tool_call import (
    AllowedOutcome,
    ContentToolCallContent,
    DeniedOutcome,
    FileEditToolCallContent,
    PermissionKind,
    PermissionOption,
    TerminalToolCallContent,
    ToolCall,
    ToolCallContent,
    ToolCallKind,
    ToolCallLocation,
    ToolCallStatus,
)

__all__ = [
    "AgentCapabilities",
    "AgentMessageChunk",
    "AgentPlanUpdate",
    "AgentRequest",
    "AgentResponse",
    "AgentThoughtChunk",
    "AllowedOutcome",
    "AudioContentBlock",
    "AvailableCommand",
    "AvailableCommandsUpdate",
    "CancelNotification",
    "ClientCapabilities",
    "ClientResponse",
    "CommandInputHint",
    "ContentBlock",
    "ContentToolCallContent",
    "CurrentModeUpdate",
    "DeniedOutcome",
    "EmbeddedResourceContentBlock",
    "Error",
    "FileEditToolCallContent",
    "FileSystemCapability",
    "ImageContentBlock",
    "Implementation",
    "InitializeRequest",
    "InitializeResponse",
    "McpCapabilities",
    "ModelInfo",
    "NewSessionRequest",
    "NewSessionResponse",
    "PermissionKind",
    "PermissionOption",
    "PlanEntry",
    "PromptCapabilities",
    "PromptRequest",
    "PromptResponse",
    "RequestPermissionRequest",
    "RequestPermissionResponse",
    "ResourceContentBlock",
    "SessionMode",
    "SessionModeState",
    "SessionModelState",
    "SessionNotification",
    "SessionUpdate",
    "SetSessionModeRequest",
    "SetSessionModeResponse",
    "SetSessionModelRequest",
    "SetSessionModelResponse",
    "StopReason",
    "TerminalToolCallContent",
    "TextContentBlock",
    "ToolCall",
    "ToolCallContent",
    "ToolCallKind",
    "ToolCallLocation",
    "ToolCallProgress",
    "ToolCallStart",
    "ToolCallStatus",
    "UnknownSessionUpdate",
    "UserMessageChunk",
]
