"""Exception hierarchy for sdunit."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from sdunit.service.executor import CommandResult


class SdunitError(Exception):
    """Base exception for all sdunit errors."""
    pass


class ValidationError(SdunitError, ValueError):
    """Raised when a unit declaration or config value is invalid."""
    pass


class ExecutionError(SdunitError, RuntimeError):
    """Raised when a mutating systemctl command fails."""

    def __init__(self, command: str, message: str, result: Optional[CommandResult] = None) -> None:
        super().__init__(f"Command failed: {command}: {message}")
        self.command = command
        self.result = result


class StateQueryError(SdunitError):
    """Raised when unit state could not be queried at all."""

    def __init__(self, command: str, message: str) -> None:
        super().__init__(f"State query failed: {command}: {message}")
        self.command = command
