"""Process execution for systemctl commands."""

from __future__ import annotations

import shlex
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from sdunit.errors import ExecutionError
from sdunit.utils.logging import get_logger


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one command."""

    command: str
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandExecutor(ABC):
    """Runs command strings synchronously."""

    @abstractmethod
    def run(self, command: str) -> CommandResult:
        """
        Run a command and capture its output.

        Returns:
            CommandResult with stdout trimmed.

        Raises:
            OSError: If the command could not be started.
            subprocess.TimeoutExpired: If the command exceeded its timeout.
        """
        pass

    def run_checked(self, command: str) -> CommandResult:
        """
        Run a command, raising ExecutionError unless it succeeds.

        Raises:
            ExecutionError: Non-zero exit, missing binary or timeout.
        """
        try:
            result = self.run(command)
        except FileNotFoundError as e:
            raise ExecutionError(command, f"executable not found ({e.filename})") from e
        except subprocess.TimeoutExpired as e:
            raise ExecutionError(command, f"timed out after {e.timeout}s") from e
        except OSError as e:
            raise ExecutionError(command, str(e)) from e

        if not result.ok:
            detail = result.stderr.strip() or result.stdout or "no output"
            raise ExecutionError(command, f"exit code {result.returncode}: {detail}", result)
        return result


class SubprocessExecutor(CommandExecutor):
    """Runs commands with subprocess, without a shell."""

    def __init__(self, timeout: Optional[float] = None) -> None:
        self.timeout = timeout
        self._logger = get_logger("sdunit.executor")

    def run(self, command: str) -> CommandResult:
        self._logger.debug(f"Running: {command}")
        proc = subprocess.run(
            shlex.split(command),
            capture_output=True,
            text=True,
            timeout=self.timeout,
        )
        return CommandResult(
            command=command,
            returncode=proc.returncode,
            stdout=proc.stdout.strip(),
            stderr=proc.stderr,
        )


def systemctl_command(mode: str, *args: str) -> str:
    """Build a systemctl command string; user units get --user."""
    parts = ["systemctl"]
    if str(mode) == "user":
        parts.append("--user")
    parts.extend(args)
    return " ".join(shlex.quote(part) for part in parts)
