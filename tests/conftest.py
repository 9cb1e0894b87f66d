"""Test configuration and shared fixtures."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path
import sys
from typing import Any

import pytest

from acp_connect import ACPClient, AgentConfig, ClientConfig
from acp_connect.log import configure_logging


FAKE_AGENT = Path(__file__).parent / "fake_agent.py"


@pytest.fixture(scope="session", autouse=True)
def debug_logging():
    """Route structlog through stdlib logging so caplog sees everything."""
    configure_logging("DEBUG", use_colors=False)


def fake_agent_config(scenario: str = "basic") -> AgentConfig:
    return AgentConfig(
        id="fake",
        name="Fake Agent",
        command=sys.executable,
        args=[str(FAKE_AGENT), scenario],
        env={"PYTHONUNBUFFERED": "1"},
    )


@pytest.fixture
async def make_client():
    """Factory for clients talking to the scripted fake agent.

    All created clients are closed after the test.
    """
    clients: list[ACPClient] = []

    def factory(scenario: str = "basic", **kwargs: Any) -> ACPClient:
        config = ClientConfig(agent=fake_agent_config(scenario), **kwargs)
        client = ACPClient(config)
        clients.append(client)
        return client

    yield factory

    for client in clients:
        await client.aclose()


async def wait_until(predicate: Callable[[], bool], timeout: float = 5.0) -> None:
    """Poll `predicate` on the event loop until it holds."""
    async with asyncio.timeout(timeout):
        while not predicate():
            await asyncio.sleep(0.01)
