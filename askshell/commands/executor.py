"""Command execution utilities for askshell."""

import os
import signal
import subprocess
import sys
from enum import Enum
from typing import Callable, List, Optional

from ..constants import (
    DEFAULT_FOLLOW_OUTPUT, DEFAULT_STDERR_LIMIT, DEFAULT_TIMEOUT_SECONDS,
    EXIT_CODE_NOT_EXECUTABLE, EXIT_CODE_NOT_FOUND, EXIT_CODE_TIMEOUT
)
from ..errors import ProcessSpawnFailed
from ..utils.helpers import truncate_text
from ..utils.logging import logger

_PERMISSION_SIGNALS = [
    "permission denied",
    "operation not permitted",
    "access is denied",
    "must be root",
    "are you root",
    "requires root",
    "must be run as root",
    "superuser privileges",
    "insufficient privileges",
    "eacces",
]

_NOT_FOUND_SIGNALS = [
    "command not found",
    "is not recognized as an internal or external command",
]


class FailureKind(Enum):
    """Why a command did not succeed."""
    SUCCESS = "success"
    PERMISSION_DENIED = "permission_denied"
    NOT_FOUND = "not_found"
    OTHER = "other"


def classify_failure(exit_code: int, stderr: str) -> FailureKind:
    """Map an exit code and stderr text to a failure kind."""
    if exit_code == 0:
        return FailureKind.SUCCESS

    lowered = stderr.lower()
    if exit_code == EXIT_CODE_NOT_EXECUTABLE or any(s in lowered for s in _PERMISSION_SIGNALS):
        return FailureKind.PERMISSION_DENIED
    if exit_code == EXIT_CODE_NOT_FOUND or any(s in lowered for s in _NOT_FOUND_SIGNALS):
        return FailureKind.NOT_FOUND
    return FailureKind.OTHER


class CommandResult:
    """Represents the result of a command execution."""

    def __init__(self,
                 command: str,
                 exit_code: int,
                 stdout: str = "",
                 stderr: str = "",
                 error_message: str = "",
                 timed_out: bool = False,
                 stderr_limit: int = DEFAULT_STDERR_LIMIT):
        self.command = command
        self.exit_code = exit_code
        self.stdout = stdout or ""
        self.stderr = truncate_text(stderr or "", stderr_limit)
        self.error_message = error_message
        self.timed_out = timed_out
        if timed_out:
            self.failure_kind = FailureKind.OTHER
        else:
            self.failure_kind = classify_failure(exit_code, self.stderr)

    @property
    def success(self) -> bool:
        """Whether the command executed successfully."""
        return self.exit_code == 0 and not self.error_message


def shell_invocation(command: str) -> List[str]:
    """Argument vector that runs *command* through the platform shell."""
    if sys.platform == "win32":
        return ["cmd", "/C", command]
    return ["sh", "-c", command]


class CommandExecutor:
    """Executes shell commands with timeout and error handling."""

    def __init__(self,
                 default_timeout: int = DEFAULT_TIMEOUT_SECONDS,
                 stderr_limit: int = DEFAULT_STDERR_LIMIT,
                 follow: bool = DEFAULT_FOLLOW_OUTPUT):
        """Initialize command executor.

        Args:
            default_timeout: Default timeout in seconds; 0 means no limit
            stderr_limit: Characters of stderr kept in results
            follow: Let stdout stream straight to the terminal instead of capturing it
        """
        self.default_timeout = default_timeout
        self.stderr_limit = stderr_limit
        self.follow = follow

    def execute(self, command: str, timeout: Optional[int] = None) -> CommandResult:
        """Execute a shell command in exactly one child process.

        Args:
            command: Shell command to execute
            timeout: Command timeout in seconds (uses default if None)

        Returns:
            CommandResult object with execution details

        Raises:
            ProcessSpawnFailed: The shell could not be started at all
        """
        if timeout is None:
            timeout = self.default_timeout

        logger.command(f"Executing command: {command} - timeout: {timeout or 'none'}s")

        terminal_fd = _controlling_terminal()
        popen_kwargs = {}
        if os.name == "posix":
            # One process group per command, so a timeout reaches everything it started
            popen_kwargs["preexec_fn"] = _own_process_group(terminal_fd)

        try:
            # stderr is always captured: it decides the failure kind
            process = subprocess.Popen(
                shell_invocation(command),
                stdout=None if self.follow else subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                **popen_kwargs
            )
        except OSError as e:
            logger.error(f"Error starting command: {e}")
            raise ProcessSpawnFailed(command, str(e)) from e

        try:
            try:
                stdout, stderr = process.communicate(timeout=timeout or None)
            except subprocess.TimeoutExpired:
                _kill_process_group(process)
                _, stderr = process.communicate()
                error_msg = f"Command timed out after {timeout} seconds"
                logger.warning(error_msg)
                return CommandResult(
                    command=command,
                    exit_code=EXIT_CODE_TIMEOUT,
                    stderr=stderr,
                    error_message=error_msg,
                    timed_out=True,
                    stderr_limit=self.stderr_limit
                )
            except BaseException:
                _kill_process_group(process)
                process.wait()
                raise
        finally:
            if terminal_fd is not None:
                _set_foreground_group(terminal_fd, os.getpgrp())

        if self.follow and stderr:
            sys.stderr.write(stderr)
            sys.stderr.flush()

        result = CommandResult(
            command=command,
            exit_code=process.returncode,
            stdout=stdout,
            stderr=stderr,
            stderr_limit=self.stderr_limit
        )

        logger.command(f"Command completed with exit code {result.exit_code}")
        if result.stderr.strip():
            logger.debug(f"stderr:\n{result.stderr}")

        return result


def _controlling_terminal() -> Optional[int]:
    """stdin's descriptor when it is a terminal we hold in the foreground, else None."""
    if os.name != "posix":
        return None
    try:
        fd = sys.stdin.fileno()
        if os.isatty(fd) and os.tcgetpgrp(fd) == os.getpgrp():
            return fd
    except (AttributeError, ValueError, OSError):
        pass
    return None


def _set_foreground_group(fd: int, pgid: int) -> None:
    # A background group changing the foreground group is sent SIGTTOU
    previous = signal.signal(signal.SIGTTOU, signal.SIG_IGN)
    try:
        os.tcsetpgrp(fd, pgid)
    except OSError as e:
        logger.debug(f"Could not hand the terminal to process group {pgid}: {e}")
    finally:
        signal.signal(signal.SIGTTOU, previous)


def _own_process_group(terminal_fd: Optional[int]) -> Callable[[], None]:
    """Runs in the child before exec: new process group, given the terminal if we had it.

    Keeping the terminal lets prompts such as sudo's password read from it.
    """
    def preexec() -> None:
        os.setpgid(0, 0)
        if terminal_fd is not None:
            signal.signal(signal.SIGTTOU, signal.SIG_IGN)
            try:
                os.tcsetpgrp(terminal_fd, os.getpgrp())
            except OSError:
                pass
            signal.signal(signal.SIGTTOU, signal.SIG_DFL)
    return preexec


def _kill_process_group(process: subprocess.Popen) -> None:
    """Kill the shell and every process it started."""
    if os.name != "posix":
        process.kill()
        return
    try:
        os.killpg(process.pid, signal.SIGKILL)
    except OSError as e:
        logger.debug(f"Could not kill process group {process.pid}: {e}")
        process.kill()


def create_command_executor(timeout: int = DEFAULT_TIMEOUT_SECONDS,
                            stderr_limit: int = DEFAULT_STDERR_LIMIT,
                            follow: bool = DEFAULT_FOLLOW_OUTPUT) -> CommandExecutor:
    """Create a command executor with the specified default timeout."""
    return CommandExecutor(timeout, stderr_limit, follow)
