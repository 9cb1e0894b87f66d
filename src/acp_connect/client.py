"""ACP client: agent process, connection state and the single session."""

from __future__ import annotations

import asyncio
import contextlib
import copy
from functools import partial
import os
from typing import TYPE_CHECKING, Any, Self

from acp_connect.client_connection import ClientSideConnection
from acp_connect.client_handler import ACPClientHandler
from acp_connect.config import AgentConfig, ClientConfig
from acp_connect.diagnostics import DiagnosticClassifier
from acp_connect.dispatcher import SessionUpdateDispatcher
from acp_connect.events import AgentErrorReported
from acp_connect.exceptions import (
    AgentUnavailableError,
    AlreadyActiveError,
    ConnectionClosedError,
    NoActiveSessionError,
    NotConnectedError,
    ProcessError,
)
from acp_connect.log import get_logger
from acp_connect.permissions import PermissionResolver
from acp_connect.process import ProcessSupervisor
from acp_connect.schema import (
    CancelNotification,
    ClientCapabilities,
    Implementation,
    InitializeRequest,
    NewSessionRequest,
    PromptRequest,
    SetSessionModelRequest,
    SetSessionModeRequest,
    TextContentBlock,
)
from acp_connect.session import Session
from acp_connect.state import ConnectionState, ConnectionStateMachine
from acp_connect.subscribers import SubscriberRegistry


if TYPE_CHECKING:
    from collections.abc import Callable

    import structlog

    from acp_connect.events import ClientEvent
    from acp_connect.process import ProcessHandle
    from acp_connect.schema import (
        InitializeResponse,
        NewSessionResponse,
        PromptResponse,
        SessionNotification,
    )
    from acp_connect.session import SessionMetadata
    from acp_connect.subscribers import Subscription


class ACPClient:
    """Connects to an ACP agent subprocess and drives one session at a time.

    State moves through `disconnected -> connecting -> connected` and ends
    in `disconnected` (process exit, dispose) or `error` (spawn, handshake
    or runtime failure). Subscribers are called synchronously on the event
    loop; none of the callbacks may block.

    Example:
        async with ACPClient(get_agent("opencode")) as client:
            client.on_event(print)
            await client.connect()
            await client.new_session(os.getcwd())
            response = await client.send_message("Explain this repository")
    """

    def __init__(
        self,
        config: ClientConfig | AgentConfig | None = None,
        *,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        """Create a client. Nothing is spawned until `connect()`.

        Args:
            config: Client configuration, or just the agent to launch
            logger: Logger to use for the client and all of its components
        """
        if isinstance(config, AgentConfig):
            config = ClientConfig(agent=config)
        self.config = config or ClientConfig()
        self._logger = logger or get_logger(__name__, self.config.log_level)
        self._state = ConnectionStateMachine(logger=self._logger)
        self._diagnostics = SubscriberRegistry[str]("diagnostics", self._logger)
        self._dispatcher = SessionUpdateDispatcher(logger=self._logger)
        self._classifier = DiagnosticClassifier()
        self._handler = ACPClientHandler(self._dispatcher, PermissionResolver(self._logger))
        self._supervisor = ProcessSupervisor(
            on_stderr=self._on_stderr,
            on_exit=self._on_process_exit,
            on_error=self._on_process_error,
            logger=self._logger,
        )
        self._process: ProcessHandle | None = None
        self._connection: ClientSideConnection | None = None
        self._session: Session | None = None
        self._init_response: InitializeResponse | None = None
        self._early_failure: asyncio.Future[None] | None = None
        self._session_lock = asyncio.Lock()
        self._generation = 0
        self._closing: set[asyncio.Task[None]] = set()

    def __repr__(self) -> str:
        return f"ACPClient(agent={self.agent_id!r}, state={self._state.state.value!r})"

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *_args: object) -> None:
        await self.aclose()

    # --- Accessors ---

    @property
    def agent_id(self) -> str:
        return self.config.agent.id

    @property
    def state(self) -> ConnectionState:
        return self._state.state

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def initialize_response(self) -> InitializeResponse | None:
        return self._init_response

    def is_connected(self) -> bool:
        return self._state.state is ConnectionState.CONNECTED

    def current_state(self) -> ConnectionState:
        return self._state.state

    def session_metadata(self) -> SessionMetadata | None:
        """Copy of the current session metadata."""
        return copy.deepcopy(self._dispatcher.metadata)

    # --- Subscriptions ---

    def on_state_change(self, callback: Callable[[ConnectionState], Any]) -> Subscription:
        return self._state.subscribers.add(callback)

    def on_session_update(self, callback: Callable[[SessionNotification], Any]) -> Subscription:
        return self._dispatcher.updates.add(callback)

    def on_diagnostic_text(self, callback: Callable[[str], Any]) -> Subscription:
        return self._diagnostics.add(callback)

    def on_event(self, callback: Callable[[ClientEvent], Any]) -> Subscription:
        return self._dispatcher.events.add(callback)

    # --- Agent selection ---

    def set_agent(self, agent: AgentConfig) -> None:
        """Switch to another agent. An active connection is disposed first."""
        if self._state.state is not ConnectionState.DISCONNECTED:
            self.dispose()
        self.config = self.config.model_copy(update={"agent": agent})
        self._logger.info("Agent selected", agent=agent.id)

    # --- Lifecycle ---

    async def connect(self) -> InitializeResponse:
        """Spawn the agent and perform the handshake.

        Raises:
            AlreadyActiveError: If connecting or connected already
            AgentUnavailableError: If the agent command cannot be found
            SpawnError: If the process could not be started
            ProcessError: If the process died or timed out during the handshake
            ProtocolError: If the handshake was rejected or malformed
        """
        if self._state.is_active:
            raise AlreadyActiveError(self._state.state.value)
        agent = self.config.agent
        if not self.config.skip_availability_check and not agent.is_available():
            raise AgentUnavailableError(agent.name, agent.command)

        self._state.begin_connect()
        self._generation += 1
        generation = self._generation
        self._early_failure = early_failure = asyncio.get_running_loop().create_future()
        try:
            response = await self._open(agent, generation, early_failure)
        except asyncio.CancelledError:
            if generation == self._generation:
                self.dispose()
            raise
        except Exception:
            self._logger.exception("Failed to connect", agent=agent.id)
            # A dispose() during the handshake already settled the state.
            if generation == self._generation:
                self._teardown()
                self._state.transition(ConnectionState.ERROR)
            raise
        finally:
            _discard_future(early_failure)
            if self._early_failure is early_failure:
                self._early_failure = None

        self._init_response = response
        self._state.transition(ConnectionState.CONNECTED)
        self._logger.info(
            "Connected to agent",
            agent=agent.id,
            protocol_version=response.protocol_version,
            agent_info=response.agent_info.name if response.agent_info else None,
        )
        return response

    async def _open(
        self, agent: AgentConfig, generation: int, early_failure: asyncio.Future[None]
    ) -> InitializeResponse:
        process = await self._supervisor.start(agent.command, agent.args, agent.env)
        if generation != self._generation:
            # Disposed while spawning
            process.terminate()
            self._retire(None, process)
            raise ConnectionClosedError("Client was disposed during connect")
        self._process = process
        connection = ClientSideConnection(
            self._handler,
            process.stdin,
            process.stdout,
            on_error=partial(self._on_process_error, process),
            logger=self._logger,
        )
        self._connection = connection
        request = InitializeRequest(
            protocol_version=self.config.protocol_version,
            client_capabilities=ClientCapabilities(),
            client_info=Implementation(
                name=self.config.client_name,
                version=self.config.client_version,
            ),
        )
        init_task = asyncio.create_task(connection.initialize(request))
        try:
            done, _ = await asyncio.wait(
                {init_task, early_failure},
                timeout=self.config.handshake_timeout,
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            if not init_task.done():
                init_task.cancel()
        if early_failure in done:
            _discard_future(init_task)
            await early_failure
        if init_task in done:
            return init_task.result()
        msg = f"Agent did not answer initialize within {self.config.handshake_timeout} seconds"
        raise ProcessError(msg)

    def dispose(self) -> None:
        """Kill the agent and forget all session state. Always succeeds.

        Safe to call at any time, including while another operation is in
        flight. Use `aclose()` to also wait for the background tasks.
        """
        self._generation += 1
        self._teardown()
        self._init_response = None
        self._state.transition(ConnectionState.DISCONNECTED)

    async def aclose(self) -> None:
        """Dispose and wait for the process and reader tasks to wind down."""
        self.dispose()
        if self._closing:
            await asyncio.gather(*self._closing)

    def _retire(
        self, connection: ClientSideConnection | None, process: ProcessHandle | None
    ) -> None:
        """Close a torn-down connection and process in the background."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Disposed after the loop stopped; the process was already killed.
            return
        task = loop.create_task(self._close_retired(connection, process))
        self._closing.add(task)
        task.add_done_callback(self._closing.discard)

    async def _close_retired(
        self, connection: ClientSideConnection | None, process: ProcessHandle | None
    ) -> None:
        try:
            if connection is not None:
                await connection.close()
            if process is not None:
                await process.aclose(self.config.terminate_timeout)
        except Exception:
            pid = process.pid if process is not None else None
            self._logger.exception("Failed to close agent process", pid=pid)

    def _teardown(self) -> None:
        connection, self._connection = self._connection, None
        process, self._process = self._process, None
        if connection is not None:
            connection.abort()
        if process is not None:
            process.terminate()
        if connection is not None or process is not None:
            self._retire(connection, process)
        self._session = None
        self._dispatcher.clear()
        self._classifier.reset()

    # --- Session operations ---

    async def new_session(self, cwd: str | os.PathLike[str]) -> NewSessionResponse:
        """Create a session, replacing the current one.

        Raises:
            NotConnectedError: If not connected
        """
        async with self._session_lock:
            connection = self._require_connection()
            request = NewSessionRequest(cwd=os.fspath(cwd))
            response = await connection.new_session(request)
            if connection is not self._connection:
                raise NotConnectedError
            self._session = Session(session_id=response.session_id, cwd=os.fspath(cwd))
            metadata = self._dispatcher.start_session(response)
        self._logger.info(
            "Session created",
            session_id=response.session_id,
            mode=response.modes.current_mode_id if response.modes else None,
            model=response.models.current_model_id if response.models else None,
            commands=len(metadata.commands) if metadata.commands is not None else None,
        )
        return response

    async def set_mode(self, mode_id: str) -> None:
        """Ask the agent to switch mode and cache the new mode id.

        Raises:
            NoActiveSessionError: If there is no session
        """
        async with self._session_lock:
            connection, session = self._require_session()
            request = SetSessionModeRequest(session_id=session.session_id, mode_id=mode_id)
            await connection.set_session_mode(request)
            if session is self._session and self._dispatcher.metadata is not None:
                self._dispatcher.metadata.set_current_mode(mode_id)
        self._logger.info("Mode set", session_id=session.session_id, mode_id=mode_id)

    async def set_model(self, model_id: str) -> None:
        """Ask the agent to switch model and cache the new model id.

        Raises:
            NoActiveSessionError: If there is no session
        """
        async with self._session_lock:
            connection, session = self._require_session()
            request = SetSessionModelRequest(session_id=session.session_id, model_id=model_id)
            await connection.set_session_model(request)
            if session is self._session and self._dispatcher.metadata is not None:
                self._dispatcher.metadata.set_current_model(model_id)
        self._logger.info("Model set", session_id=session.session_id, model_id=model_id)

    async def send_message(self, text: str) -> PromptResponse:
        """Send `text` as one prompt turn and wait for the turn to end.

        Streamed output arrives through the subscribers meanwhile.

        Raises:
            NoActiveSessionError: If there is no session
        """
        connection, session = self._require_session()
        self._dispatcher.start_prompt()
        self._classifier.reset()
        request = PromptRequest(session_id=session.session_id, prompt=[TextContentBlock(text=text)])
        try:
            response = await connection.prompt(request)
        except Exception:
            self._logger.exception("Prompt failed", session_id=session.session_id)
            self._dispatcher.fail_prompt()
            raise
        self._dispatcher.finish_prompt(session.session_id, response)
        return response

    async def cancel(self) -> None:
        """Ask the agent to stop the current turn.

        No-op without a session, or when the agent has already gone away.
        """
        if self._connection is None or self._session is None:
            return
        self._logger.info("Cancelling prompt", session_id=self._session.session_id)
        notification = CancelNotification(session_id=self._session.session_id)
        with contextlib.suppress(ConnectionClosedError):
            await self._connection.cancel(notification)

    def _require_connection(self) -> ClientSideConnection:
        if self._connection is None or not self.is_connected():
            raise NotConnectedError
        return self._connection

    def _require_session(self) -> tuple[ClientSideConnection, Session]:
        if self._connection is None or self._session is None:
            raise NoActiveSessionError
        return self._connection, self._session

    # --- Process callbacks ---

    def _on_stderr(self, process: ProcessHandle, text: str) -> None:
        self._diagnostics.emit(text)
        if signal := self._classifier.observe(text):
            self._logger.error(
                "Agent reported an error",
                message=signal.message,
                error_type=signal.error_type,
                pid=process.pid,
            )
            self._dispatcher.publish(AgentErrorReported(signal=signal))

    def _on_process_exit(self, process: ProcessHandle, code: int) -> None:
        if process is not self._process:
            return
        if self._fail_handshake(ProcessError(f"Agent process exited with code {code}")):
            return
        self._teardown()
        self._init_response = None
        self._state.transition(ConnectionState.DISCONNECTED)

    def _on_process_error(self, process: ProcessHandle, exc: BaseException) -> None:
        if process is not self._process:
            return
        if self._fail_handshake(ProcessError(f"Agent process failed: {exc}")):
            return
        self._teardown()
        self._state.transition(ConnectionState.ERROR)

    def _fail_handshake(self, exc: ProcessError) -> bool:
        """Hand `exc` to a running connect(). Returns False if none is waiting."""
        if self._early_failure is None or self._early_failure.done():
            return False
        self._early_failure.set_exception(exc)
        return True


def _discard_future(future: asyncio.Future[Any] | None) -> None:
    """Cancel a pending future, or mark a failed one's exception as seen."""
    if future is None:
        return
    if not future.done():
        future.cancel()
    elif not future.cancelled():
        future.exception()
