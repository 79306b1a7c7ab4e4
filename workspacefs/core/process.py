"""External process invocation.

Commands are always passed as an argument vector to
``asyncio.create_subprocess_exec``; nothing is interpreted by a shell.
"""

import asyncio
import logging
from dataclasses import dataclass

from .exceptions import ProcessInvocationError, ProcessTimeoutError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessResult:
    """Captured outcome of one external command."""

    command: tuple[str, ...]
    returncode: int
    stdout: bytes
    stderr: bytes

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def stdout_text(self) -> str:
        return self.stdout.decode("utf-8", errors="replace")

    @property
    def stderr_text(self) -> str:
        return self.stderr.decode("utf-8", errors="replace").strip()


class ProcessInvoker:
    """Run external commands and capture their output.

    Args:
        timeout: Optional timeout in seconds applied to every command.
            ``None`` waits indefinitely.
    """

    def __init__(self, timeout: float | None = None):
        self.timeout = timeout

    async def run(self, command: list[str], input_data: bytes | None = None) -> ProcessResult:
        """Run ``command`` and wait for it to finish.

        Args:
            command: Program and arguments
            input_data: Optional bytes written to the process' stdin

        Returns:
            ProcessResult with exit status and captured streams

        Raises:
            ProcessInvocationError: If the program cannot be started
            ProcessTimeoutError: If the timeout elapses (the process is killed)
        """
        if not command:
            raise ProcessInvocationError("Empty command")

        logger.debug("Running command: %s", command)
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.PIPE if input_data is not None else asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ProcessInvocationError(f"Cannot start '{command[0]}': {e}") from e

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(input=input_data), timeout=self.timeout
            )
        except asyncio.TimeoutError as e:
            process.kill()
            await process.wait()
            raise ProcessTimeoutError(
                f"Command timed out after {self.timeout}s: {command[0]}",
                command=list(command),
            ) from e

        return ProcessResult(
            command=tuple(command),
            returncode=process.returncode if process.returncode is not None else -1,
            stdout=stdout or b"",
            stderr=stderr or b"",
        )
