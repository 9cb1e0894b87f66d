"""Tests for configuration models and agent presets."""

from __future__ import annotations

import sys

from pydantic import ValidationError
import pytest

from acp_connect import agents
from acp_connect.agents import (
    get_agent,
    get_agents_with_status,
    get_default_agent,
    get_first_available_agent,
)
from acp_connect.config import AgentConfig, ClientConfig


def test_agent_availability():
    assert AgentConfig(id="py", name="Python", command=sys.executable).is_available()
    missing = AgentConfig(id="nope", name="Nope", command="acp-connect-no-such-agent-xyz")
    assert not missing.is_available()


def test_client_config_defaults():
    config = ClientConfig()
    assert config.agent == get_default_agent()
    assert config.protocol_version == 1
    assert config.handshake_timeout is None
    assert not config.skip_availability_check


def test_agent_preset_by_id():
    config = ClientConfig.model_validate({"agent": "gemini"})
    assert config.agent.command == "gemini"
    assert config.agent.args == ["--experimental-acp"]


def test_unknown_preset_is_a_validation_error():
    with pytest.raises(ValidationError, match="Unknown agent"):
        ClientConfig.model_validate({"agent": "does-not-exist"})


def test_handshake_timeout_must_be_positive():
    with pytest.raises(ValidationError):
        ClientConfig(handshake_timeout=0)


def test_from_yaml(tmp_path):
    path = tmp_path / "client.yml"
    path.write_text(
        """\
agent:
  id: custom
  name: Custom Agent
  command: my-agent
  args: [acp, --verbose]
  env:
    MY_AGENT_TOKEN: secret
client_name: my-editor
handshake_timeout: 10
"""
    )
    config = ClientConfig.from_yaml(path)
    assert config.agent.id == "custom"
    assert config.agent.args == ["acp", "--verbose"]
    assert config.agent.env == {"MY_AGENT_TOKEN": "secret"}
    assert config.client_name == "my-editor"
    assert config.handshake_timeout == 10  # noqa: PLR2004


def test_from_yaml_with_preset(tmp_path):
    path = tmp_path / "client.yml"
    path.write_text("agent: claude-code\nskip_availability_check: true\n")
    config = ClientConfig.from_yaml(path)
    assert config.agent == get_agent("claude-code")
    assert config.skip_availability_check


def test_from_yaml_invalid(tmp_path):
    path = tmp_path / "client.yml"
    path.write_text("handshake_timeout: soon\n")
    with pytest.raises(ValueError, match="Failed to load client config"):
        ClientConfig.from_yaml(path)


def test_get_agent_unknown():
    with pytest.raises(KeyError, match="Unknown agent"):
        get_agent("nope")


def test_presets():
    assert set(agents.AGENTS) == {"opencode", "claude-code", "gemini"}
    assert get_default_agent().id == "opencode"


def test_first_available_agent(monkeypatch):
    monkeypatch.setattr(
        "shutil.which", lambda cmd: "/usr/bin/gemini" if cmd == "gemini" else None
    )
    assert get_first_available_agent() == get_agent("gemini")
    status = {agent.id: available for agent, available in get_agents_with_status()}
    assert status == {"opencode": False, "claude-code": False, "gemini": True}


def test_no_agent_available(monkeypatch):
    monkeypatch.setattr("shutil.which", lambda cmd: None)
    assert get_first_available_agent() is None
