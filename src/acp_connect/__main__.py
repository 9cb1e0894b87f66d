"""Command line interface for acp-connect."""

from __future__ import annotations

from pathlib import Path
import sys
from typing import TYPE_CHECKING, Annotated

import anyio
import typer as t

from acp_connect.agents import get_agent, get_agents_with_status
from acp_connect.client import ACPClient
from acp_connect.config import ClientConfig
from acp_connect.events import AgentErrorReported, TextDelta, ToolCallFinished, ToolCallStarted
from acp_connect.exceptions import ACPClientError
from acp_connect.log import configure_logging, shutdown_logging


if TYPE_CHECKING:
    from acp_connect.events import ClientEvent


cli = t.Typer(help="Talk to ACP agents from the command line", no_args_is_help=True)

AGENT_HELP = "Preset id of the agent to launch (overrides the config file)"
CONFIG_HELP = "Path to a YAML client configuration"
VERBOSE_HELP = "Enable debug logging"
VERBOSE_CMDS = "-v", "--verbose"


@cli.command("agents")
def list_agents() -> None:
    """List the agent presets and whether they are installed."""
    t.echo("| Id | Name | Command | Installed |")
    t.echo("|----|------|---------|-----------|")
    for agent, available in get_agents_with_status():
        command = " ".join([agent.command, *agent.args])
        marker = "yes" if available else "no"
        t.echo(f"| {agent.id} | {agent.name} | {command} | {marker} |")


@cli.command("prompt")
def prompt(
    text: Annotated[str, t.Argument(help="Prompt to send to the agent")],
    agent: Annotated[str | None, t.Option("--agent", "-a", help=AGENT_HELP)] = None,
    config: Annotated[Path | None, t.Option("--config", "-c", help=CONFIG_HELP)] = None,
    cwd: Annotated[Path | None, t.Option("--cwd", help="Session working directory")] = None,
    mode: Annotated[str | None, t.Option("--mode", help="Mode to switch to first")] = None,
    model: Annotated[str | None, t.Option("--model", help="Model to switch to first")] = None,
    verbose: Annotated[bool, t.Option(*VERBOSE_CMDS, help=VERBOSE_HELP)] = False,
) -> None:
    """Send one prompt to an agent and stream its answer to stdout."""
    configure_logging("DEBUG" if verbose else "WARNING")
    try:
        client_config = ClientConfig.from_yaml(config) if config else ClientConfig()
        if agent:
            client_config = client_config.model_copy(update={"agent": get_agent(agent)})
    except (ValueError, KeyError) as e:
        t.echo(f"Error: {e}", err=True)
        raise t.Exit(1) from e

    working_dir = (cwd or Path.cwd()).resolve()
    try:
        stop_reason = anyio.run(_run_prompt, client_config, text, working_dir, mode, model)
    except ACPClientError as e:
        t.echo(f"Error: {e}", err=True)
        raise t.Exit(1) from e
    finally:
        shutdown_logging()
    t.echo(f"\n[stop reason: {stop_reason}]", err=True)


async def _run_prompt(
    config: ClientConfig,
    text: str,
    cwd: Path,
    mode: str | None,
    model: str | None,
) -> str:
    async with ACPClient(config) as client:
        client.on_event(_print_event)
        await client.connect()
        await client.new_session(cwd)
        if mode:
            await client.set_mode(mode)
        if model:
            await client.set_model(model)
        response = await client.send_message(text)
        return response.stop_reason


def _print_event(event: ClientEvent) -> None:
    match event:
        case TextDelta(text=chunk):
            sys.stdout.write(chunk)
            sys.stdout.flush()
        case ToolCallStarted(title=title):
            t.echo(f"\n[tool] {title}", err=True)
        case ToolCallFinished(title=title, status=status):
            t.echo(f"[tool {status}] {title or event.tool_call_id}", err=True)
        case AgentErrorReported():
            t.echo(f"[agent error] {event.message}", err=True)
        case _:
            pass


if __name__ == "__main__":
    cli()
