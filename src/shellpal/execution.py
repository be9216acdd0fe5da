"""Command execution backends.

The shell executor runs a confirmed candidate synchronously and streams its
combined stdout/stderr to the reporter line by line.
"""

import logging
import os
import shutil
import signal
import subprocess
import threading
from dataclasses import dataclass, field
from typing import Protocol

from shellpal.console import Reporter
from shellpal.errors import ExecutionError
from shellpal.logging_utils import log_info, log_warning

logger = logging.getLogger(__name__)

SUPPORTED_SHELLS = ["auto", "pwsh", "powershell", "sh", "bash"]


@dataclass
class ExecutionOutcome:
    """Result of running a candidate command."""

    command: str
    return_code: int | None
    output: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.return_code == 0


class CommandExecutor(Protocol):
    """Protocol for command execution backends."""

    def execute(self, command: str) -> ExecutionOutcome:
        """Run a command and return its outcome.

        Raises:
            ExecutionError: If the command could not be started or timed out
        """
        ...


def _kill_process_group(process: subprocess.Popen) -> None:
    """Kill a process started in its own session, children included."""
    if os.name != "posix":
        process.kill()
        return
    try:
        os.killpg(process.pid, signal.SIGKILL)
    except ProcessLookupError:
        # group already gone
        pass


def resolve_shell(shell: str = "auto") -> list[str]:
    """Build the argv prefix for the configured shell.

    Args:
        shell: One of auto, pwsh, powershell, sh, bash

    Returns:
        argv prefix; the command text is appended as the last argument

    Raises:
        ExecutionError: If the shell is unknown or not installed
    """
    shell = (shell or "auto").lower()
    if shell not in SUPPORTED_SHELLS:
        raise ExecutionError(
            f"Unsupported shell: {shell}. Supported shells: {', '.join(SUPPORTED_SHELLS)}"
        )

    if shell == "auto":
        for candidate in ("pwsh", "powershell"):
            if shutil.which(candidate):
                shell = candidate
                break
        else:
            shell = "cmd" if os.name == "nt" else "sh"

    if shell in ("pwsh", "powershell"):
        path = shutil.which(shell)
        if not path:
            raise ExecutionError(f"Shell not found: {shell}")
        return [path, "-NoProfile", "-NonInteractive", "-Command"]
    if shell == "cmd":
        return ["cmd", "/c"]

    path = shutil.which(shell) or "/bin/sh"
    return [path, "-c"]


class ShellExecutor:
    """Run commands through a shell, streaming output to a reporter."""

    def __init__(
        self,
        reporter: Reporter,
        shell: str = "auto",
        timeout: float | None = 120.0,
        cwd: str | None = None,
    ):
        """Initialize the executor.

        Args:
            reporter: Reporter receiving output lines
            shell: Shell to use (auto picks pwsh when installed)
            timeout: Seconds before the process is killed (None disables)
            cwd: Working directory for commands
        """
        self.reporter = reporter
        self.shell = shell
        self.timeout = timeout
        self.cwd = cwd

    def execute(self, command: str) -> ExecutionOutcome:
        if not command or not command.strip():
            raise ExecutionError("Command cannot be empty")

        argv = resolve_shell(self.shell) + [command]
        log_info(logger, "Executing command", shell=argv[0], length=len(command))

        try:
            process = subprocess.Popen(
                argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                stdin=subprocess.DEVNULL,
                text=True,
                cwd=self.cwd,
                start_new_session=os.name == "posix",
            )
        except OSError as e:
            raise ExecutionError(f"Failed to start command: {e}") from e

        timed_out = threading.Event()

        def _kill() -> None:
            timed_out.set()
            _kill_process_group(process)

        timer = None
        if self.timeout:
            timer = threading.Timer(self.timeout, _kill)
            timer.start()

        output: list[str] = []
        try:
            for line in process.stdout or []:
                line = line.rstrip("\n")
                output.append(line)
                self.reporter.output(line)
            return_code = process.wait()
        except KeyboardInterrupt:
            _kill_process_group(process)
            raise
        finally:
            if timer is not None:
                timer.cancel()
            if process.stdout is not None:
                process.stdout.close()

        if timed_out.is_set():
            log_warning(logger, "Command timed out", timeout=self.timeout)
            raise ExecutionError(f"Command timed out after {self.timeout} seconds")

        return ExecutionOutcome(command=command, return_code=return_code, output=output)


class PreviewExecutor:
    """Report commands instead of running them."""

    def __init__(self, reporter: Reporter):
        self.reporter = reporter
        self.commands: list[str] = []

    def execute(self, command: str) -> ExecutionOutcome:
        self.commands.append(command)
        self.reporter.notice(f"(preview) would run: {command}")
        return ExecutionOutcome(command=command, return_code=0)
