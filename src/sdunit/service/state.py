"""Live unit state queries."""

from __future__ import annotations

import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from sdunit.errors import StateQueryError
from sdunit.service.executor import CommandExecutor, systemctl_command
from sdunit.units.spec import Action, ActionRequest
from sdunit.utils.logging import get_logger


class EnablementState(str, Enum):
    """Output of `systemctl is-enabled`."""

    STATIC = "static"
    ENABLED = "enabled"
    ENABLED_RUNTIME = "enabled-runtime"
    DISABLED = "disabled"
    MASKED = "masked"
    MASKED_RUNTIME = "masked-runtime"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def classify(cls, output: str) -> EnablementState:
        try:
            return cls(output.strip())
        except ValueError:
            return cls.UNKNOWN


class ActivityState(str, Enum):
    """Output of `systemctl is-active`."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    FAILED = "failed"
    ACTIVATING = "activating"
    DEACTIVATING = "deactivating"
    RELOADING = "reloading"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def classify(cls, output: str) -> ActivityState:
        try:
            return cls(output.strip())
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class UnitState:
    """Enablement and activity of a unit; each axis is only set when queried."""

    enablement: Optional[EnablementState] = None
    activity: Optional[ActivityState] = None

    def for_action(self, action: Action) -> Optional[str]:
        """The state value relevant to an action, if it was queried."""
        if action in (Action.ENABLE, Action.DISABLE):
            return self.enablement.value if self.enablement else None
        if action in (Action.START, Action.STOP):
            return self.activity.value if self.activity else None
        return None


ENABLEMENT_ACTIONS = (Action.ENABLE, Action.DISABLE)
ACTIVITY_ACTIONS = (Action.START, Action.STOP)


class StateQuery(ABC):
    """Strategy for reading the live state relevant to an action."""

    @abstractmethod
    def query(self, request: ActionRequest) -> UnitState:
        """
        Query the state relevant to ``request.action``.

        Returns an empty UnitState for actions that need no query.

        Raises:
            StateQueryError: If the state could not be read at all.
        """
        pass


class SystemctlStateQuery(StateQuery):
    """Reads unit state with `systemctl is-enabled` / `systemctl is-active`."""

    def __init__(self, executor: CommandExecutor) -> None:
        self._executor = executor
        self._logger = get_logger("sdunit.state")

    def _read(self, command: str) -> str:
        try:
            result = self._executor.run(command)
        except (OSError, subprocess.TimeoutExpired) as e:
            raise StateQueryError(command, str(e)) from e
        # systemctl exits non-zero for 'disabled', 'inactive' and friends,
        # so only the output is meaningful here
        return result.stdout.strip()

    def query(self, request: ActionRequest) -> UnitState:
        if request.action in ENABLEMENT_ACTIONS:
            output = self._read(systemctl_command(request.mode, "is-enabled", request.unit_name))
            state = UnitState(enablement=EnablementState.classify(output))
        elif request.action in ACTIVITY_ACTIONS:
            output = self._read(systemctl_command(request.mode, "is-active", request.unit_name))
            state = UnitState(activity=ActivityState.classify(output))
        else:
            return UnitState()

        self._logger.debug(f"{request.unit_name}: {output or '(no output)'} -> {state}")
        return state
