"""Skip-or-execute decisions for lifecycle actions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sdunit.errors import ValidationError
from sdunit.service.executor import CommandExecutor, systemctl_command
from sdunit.service.state import StateQuery, UnitState
from sdunit.units.spec import Action, ActionRequest, LIFECYCLE_ACTIONS
from sdunit.utils.logging import get_logger

# 'static' satisfies both enable and disable, and stop treats 'unknown' as
# already stopped. Both match systemctl's own reporting; keep as is.
SKIP_STATES: dict[Action, frozenset[str]] = {
    Action.ENABLE: frozenset({"static", "enabled", "enabled-runtime"}),
    Action.DISABLE: frozenset({"static", "disabled", "masked", "masked-runtime"}),
    Action.START: frozenset({"active"}),
    Action.STOP: frozenset({"inactive", "unknown"}),
    Action.RESTART: frozenset(),
    Action.RELOAD: frozenset(),
}


def should_skip(action: Action, state: Optional[str]) -> bool:
    """
    Check whether ``action`` is already satisfied by ``state``.

    Args:
        action: A lifecycle action.
        state: The queried state value (enablement or activity), or None.

    Returns:
        True if running the action would be a no-op.
    """
    if state is None:
        return False
    return str(state) in SKIP_STATES.get(action, frozenset())


@dataclass(frozen=True)
class ActionResult:
    """What happened for one action."""

    unit: str
    action: Action
    command: Optional[str] = None
    skipped: bool = False
    changed: bool = False
    state: Optional[str] = None
    message: str = ""


class ActionReconciler:
    """
    Runs lifecycle actions only when they are not already satisfied.

    Example:
        executor = SubprocessExecutor()
        reconciler = ActionReconciler(SystemctlStateQuery(executor), executor)
        result = reconciler.reconcile(spec.request("start"))
    """

    def __init__(self, state_query: StateQuery, executor: CommandExecutor) -> None:
        self._state_query = state_query
        self._executor = executor
        self._logger = get_logger("sdunit.reconciler")

    def plan(self, request: ActionRequest) -> tuple[str, UnitState, bool]:
        """Query state and return (command, state, skip) without executing."""
        if request.action not in LIFECYCLE_ACTIONS:
            raise ValidationError(f"'{request.action}' is not a lifecycle action")

        command = systemctl_command(request.mode, request.action.value, request.unit_name)
        state = self._state_query.query(request)
        return command, state, should_skip(request.action, state.for_action(request.action))

    def reconcile(self, request: ActionRequest) -> ActionResult:
        """
        Run ``systemctl {action} {unit}`` unless the action is a no-op.

        Raises:
            StateQueryError: If the state query could not run.
            ExecutionError: If the command fails.
        """
        command, state, skip = self.plan(request)
        state_value = state.for_action(request.action)

        if skip:
            self._logger.info(f"{request.unit_name}: {request.action} skipped (state: {state_value})")
            return ActionResult(
                unit=request.unit_name,
                action=request.action,
                command=command,
                skipped=True,
                state=state_value,
                message=f"already {state_value}",
            )

        self._executor.run_checked(command)
        self._logger.info(f"{request.unit_name}: {request.action} done")
        return ActionResult(
            unit=request.unit_name,
            action=request.action,
            command=command,
            changed=True,
            state=state_value,
        )
