"""Exceptions raised by the ACP connection layer."""

from __future__ import annotations

from typing import Any


class ACPClientError(Exception):
    """Base class for all acp_connect errors."""


class AgentUnavailableError(ACPClientError):
    """Raised when the configured agent executable cannot be resolved."""

    def __init__(self, agent_name: str, command: str):
        self.agent_name = agent_name
        self.command = command
        msg = f"Agent {agent_name!r} is not installed. Please install {command!r} and try again."
        super().__init__(msg)


class AlreadyActiveError(ACPClientError):
    """Raised when connect() is called while connecting or connected."""

    def __init__(self, state: str):
        self.state = state
        super().__init__(f"Already connected or connecting (state: {state})")


class SpawnError(ACPClientError):
    """Raised when the agent process fails to launch."""

    def __init__(self, command: str, reason: str):
        self.command = command
        super().__init__(f"Failed to start agent process {command!r}: {reason}")


class ProcessError(ACPClientError):
    """Runtime failure of the agent process reported by the host."""


class NotConnectedError(ACPClientError):
    """Raised when an operation needs an open connection."""

    def __init__(self):
        super().__init__("Not connected")


class NoActiveSessionError(ACPClientError):
    """Raised when an operation needs an active session."""

    def __init__(self):
        super().__init__("No active session")


class ProtocolError(ACPClientError):
    """Malformed or rejected protocol exchange."""


class ConnectionClosedError(ProtocolError):
    """The message stream ended while a request was pending."""

    def __init__(self, reason: str = "Connection closed"):
        super().__init__(reason)


class RequestError(ProtocolError):
    """JSON-RPC error, either received from the agent or sent back to it."""

    def __init__(self, code: int, message: str, data: Any | None = None):
        self.code = code
        self.message = message
        self.data = data
        super().__init__(f"{message} (code {code})")

    @classmethod
    def method_not_found(cls, method: str) -> RequestError:
        return cls(-32601, "Method not found", {"method": method})

    @classmethod
    def invalid_params(cls, data: Any | None = None) -> RequestError:
        return cls(-32602, "Invalid params", data)

    @classmethod
    def internal_error(cls, data: Any | None = None) -> RequestError:
        return cls(-32603, "Internal error", data)

    def to_error_object(self) -> dict[str, Any]:
        """Serialize into a JSON-RPC error object."""
        error: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            error["data"] = self.data
        return error
