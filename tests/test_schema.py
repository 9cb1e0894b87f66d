"""Tests for wire model decoding and encoding."""

from __future__ import annotations

from acp_connect.schema import (
    AgentMessageChunk,
    AvailableCommandsUpdate,
    ClientCapabilities,
    Implementation,
    InitializeRequest,
    NewSessionRequest,
    NewSessionResponse,
    PromptRequest,
    SessionNotification,
    TextContentBlock,
    ToolCallProgress,
    UnknownSessionUpdate,
)


def test_initialize_request_wire_format():
    request = InitializeRequest(
        protocol_version=1,
        client_capabilities=ClientCapabilities(),
        client_info=Implementation(name="acp-connect", version="0.1.0"),
    )
    assert request.to_wire() == {
        "protocolVersion": 1,
        "clientCapabilities": {},
        "clientInfo": {"name": "acp-connect", "version": "0.1.0"},
    }


def test_new_session_request_sends_empty_mcp_servers():
    assert NewSessionRequest(cwd="/work").to_wire() == {"cwd": "/work", "mcpServers": []}


def test_prompt_request_wire_format():
    request = PromptRequest(session_id="s1", prompt=[TextContentBlock(text="hello")])
    assert request.to_wire() == {
        "sessionId": "s1",
        "prompt": [{"type": "text", "text": "hello"}],
    }


def test_new_session_response_without_modes():
    response = NewSessionResponse.model_validate({"sessionId": "s1"})
    assert response.session_id == "s1"
    assert response.modes is None
    assert response.models is None


def test_new_session_response_with_modes_and_models():
    response = NewSessionResponse.model_validate({
        "sessionId": "s1",
        "modes": {
            "availableModes": [{"id": "build", "name": "Build"}, {"id": "plan", "name": "Plan"}],
            "currentModeId": "build",
        },
        "models": {
            "availableModels": [{"modelId": "acme/x1", "name": "X1"}],
            "currentModelId": "acme/x1",
        },
    })
    assert response.modes is not None
    assert [m.id for m in response.modes.available_modes] == ["build", "plan"]
    assert response.models is not None
    assert response.models.current_model_id == "acme/x1"


def test_known_update_variants_decode():
    chunk = SessionNotification.model_validate({
        "sessionId": "s1",
        "update": {
            "sessionUpdate": "agent_message_chunk",
            "content": {"type": "text", "text": "hi"},
        },
    })
    assert isinstance(chunk.update, AgentMessageChunk)
    assert chunk.update.text == "hi"

    commands = SessionNotification.model_validate({
        "sessionId": "s1",
        "update": {
            "sessionUpdate": "available_commands_update",
            "availableCommands": [
                {"name": "review", "description": "Review", "input": {"hint": "branch"}}
            ],
        },
    })
    assert isinstance(commands.update, AvailableCommandsUpdate)
    assert commands.update.available_commands[0].input is not None
    assert commands.update.available_commands[0].input.hint == "branch"

    progress = SessionNotification.model_validate({
        "sessionId": "s1",
        "update": {"sessionUpdate": "tool_call_update", "toolCallId": "t1", "status": "completed"},
    })
    assert isinstance(progress.update, ToolCallProgress)
    assert progress.update.status == "completed"


def test_unknown_update_kind_is_preserved():
    notification = SessionNotification.model_validate({
        "sessionId": "s1",
        "update": {"sessionUpdate": "usage_update", "used": 1200, "size": 200000},
    })
    update = notification.update
    assert isinstance(update, UnknownSessionUpdate)
    assert update.session_update == "usage_update"
    assert update.model_extra == {"used": 1200, "size": 200000}


def test_meta_field_alias():
    chunk = AgentMessageChunk.model_validate({
        "content": {"type": "text", "text": "x"},
        "_meta": {"trace": "abc"},
    })
    assert chunk.field_meta == {"trace": "abc"}
    assert chunk.to_wire()["_meta"] == {"trace": "abc"}
