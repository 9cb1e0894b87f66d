"""Agent subprocess supervision."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping, Sequence
import codecs
import contextlib
import os
import subprocess
import sys
from typing import TYPE_CHECKING

import anyio

from acp_connect.exceptions import ProcessError, SpawnError
from acp_connect.log import get_logger


if TYPE_CHECKING:
    from anyio.abc import ByteReceiveStream, ByteSendStream, Process
    import structlog


StderrCallback = Callable[["ProcessHandle", str], None]
ExitCallback = Callable[["ProcessHandle", int], None]
ProcessErrorCallback = Callable[["ProcessHandle", BaseException], None]

# Give the stderr pump a moment to flush after exit before reporting it.
STDERR_DRAIN_TIMEOUT = 1.0


class ProcessHandle:
    """A running agent process together with its watcher tasks."""

    def __init__(self, process: Process, command: Sequence[str]) -> None:
        self.process = process
        self.command = list(command)
        self._tasks: set[asyncio.Task[None]] = set()

    def __repr__(self) -> str:
        return f"ProcessHandle(pid={self.pid}, command={self.command!r})"

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def returncode(self) -> int | None:
        return self.process.returncode

    @property
    def running(self) -> bool:
        return self.process.returncode is None

    @property
    def stdin(self) -> ByteSendStream:
        if self.process.stdin is None:
            raise ProcessError("Agent process has no stdin pipe")
        return self.process.stdin

    @property
    def stdout(self) -> ByteReceiveStream:
        if self.process.stdout is None:
            raise ProcessError("Agent process has no stdout pipe")
        return self.process.stdout

    def terminate(self) -> None:
        """Kill the process. Does nothing if it already exited."""
        if not self.running:
            return
        with contextlib.suppress(ProcessLookupError):
            self.process.kill()

    async def aclose(self, timeout: float = 5.0) -> None:
        """Terminate gracefully, kill after `timeout`, then wait for the watchers."""
        if self.running:
            with contextlib.suppress(ProcessLookupError):
                self.process.terminate()
            try:
                await asyncio.wait_for(self.process.wait(), timeout=timeout)
            except TimeoutError:
                self.terminate()
                await self.process.wait()
        await self.wait_closed()

    async def wait_closed(self) -> None:
        """Wait for the stderr pump and exit watcher to finish."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    def _spawn(self, coro) -> asyncio.Task[None]:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task


class ProcessSupervisor:
    """Spawns agent processes and reports what happens to them.

    Every callback receives the handle it concerns, so the owner can ignore
    signals from a process it has already let go of.

    Args:
        on_stderr: Called with each decoded chunk of stderr text
        on_exit: Called once with the exit code when the process ends
        on_error: Called when watching the process fails unexpectedly
        logger: Logger to use, defaults to the module logger
    """

    def __init__(
        self,
        *,
        on_stderr: StderrCallback,
        on_exit: ExitCallback,
        on_error: ProcessErrorCallback,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._on_stderr = on_stderr
        self._on_exit = on_exit
        self._on_error = on_error
        self._logger = logger or get_logger(__name__)

    async def start(
        self,
        executable: str,
        args: Sequence[str] = (),
        env: Mapping[str, str] | None = None,
        cwd: str | os.PathLike[str] | None = None,
    ) -> ProcessHandle:
        """Spawn the agent with piped stdin, stdout and stderr.

        The environment is the current one overlaid with `env`.

        Raises:
            SpawnError: If the process could not be launched
        """
        cmd = [executable, *args]
        full_env = {**os.environ, **(env or {})}
        # Windows needs the shell to resolve .cmd / .bat shims (npx and friends)
        command: str | list[str] = subprocess.list2cmdline(cmd) if sys.platform == "win32" else cmd
        self._logger.info("Starting agent process", command=cmd)
        try:
            process = await anyio.open_process(command, env=full_env, cwd=cwd)
        except OSError as exc:
            raise SpawnError(executable, str(exc)) from exc
        handle = ProcessHandle(process, cmd)
        self._logger.info("Agent process started", pid=handle.pid)
        stderr_task = handle._spawn(self._pump_stderr(handle))
        handle._spawn(self._watch_exit(handle, stderr_task))
        return handle

    async def _pump_stderr(self, handle: ProcessHandle) -> None:
        stream = handle.process.stderr
        if stream is None:
            return
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        try:
            async for chunk in stream:
                if text := decoder.decode(chunk):
                    self._logger.warning("Agent stderr", pid=handle.pid, text=text.rstrip())
                    self._on_stderr(handle, text)
        except (anyio.ClosedResourceError, anyio.BrokenResourceError):
            pass
        except Exception as exc:
            self._logger.exception("Reading agent stderr failed", pid=handle.pid)
            self._on_error(handle, exc)
        if tail := decoder.decode(b"", final=True):
            self._on_stderr(handle, tail)

    async def _watch_exit(self, handle: ProcessHandle, stderr_task: asyncio.Task[None]) -> None:
        try:
            code = await handle.process.wait()
        except Exception as exc:
            self._logger.exception("Waiting for agent process failed", pid=handle.pid)
            self._on_error(handle, exc)
            return
        await asyncio.wait({stderr_task}, timeout=STDERR_DRAIN_TIMEOUT)
        self._logger.info("Agent process exited", pid=handle.pid, code=code)
        self._on_exit(handle, code)
