"""Tests for the command line interface."""

from __future__ import annotations

import sys

import pytest
from typer.testing import CliRunner

from acp_connect.__main__ import cli

from conftest import FAKE_AGENT


@pytest.fixture
def runner(monkeypatch) -> CliRunner:
    # Keep the test session's logging setup intact
    monkeypatch.setattr("acp_connect.__main__.configure_logging", lambda *a, **kw: None)
    monkeypatch.setattr("acp_connect.__main__.shutdown_logging", lambda: None)
    return CliRunner()


def write_config(tmp_path, scenario: str):
    path = tmp_path / "client.yml"
    path.write_text(
        "agent:\n"
        "  id: fake\n"
        "  name: Fake Agent\n"
        f"  command: {sys.executable!r}\n"
        f"  args: [{str(FAKE_AGENT)!r}, {scenario}]\n"
    )
    return path


def test_agents_lists_presets(runner: CliRunner, monkeypatch):
    monkeypatch.setattr("shutil.which", lambda cmd: "/bin/opencode" if cmd == "opencode" else None)
    result = runner.invoke(cli, ["agents"])
    assert result.exit_code == 0
    assert "| opencode | OpenCode | opencode acp | yes |" in result.stdout
    assert "| gemini | Gemini CLI | gemini --experimental-acp | no |" in result.stdout


def test_prompt_streams_answer(runner: CliRunner, tmp_path):
    config = write_config(tmp_path, "stream")
    result = runner.invoke(cli, ["prompt", "read it", "--config", str(config), "--cwd", str(tmp_path)])
    assert result.exit_code == 0, result.output
    assert "Hello world" in result.stdout


def test_prompt_with_mode_and_model(runner: CliRunner, tmp_path):
    config = write_config(tmp_path, "modes")
    args = ["prompt", "plan it", "-c", str(config), "--mode", "plan", "--model", "m2"]
    result = runner.invoke(cli, args)
    assert result.exit_code == 0, result.output


def test_prompt_unknown_agent(runner: CliRunner):
    result = runner.invoke(cli, ["prompt", "hi", "--agent", "nope"])
    assert result.exit_code == 1


def test_prompt_failing_connect(runner: CliRunner, tmp_path):
    config = write_config(tmp_path, "exit_immediately")
    result = runner.invoke(cli, ["prompt", "hi", "--config", str(config)])
    assert result.exit_code == 1
