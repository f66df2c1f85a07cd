"""systemd state queries, action reconciliation and unit file management."""

from sdunit.service.factory import get_unit_manager
from sdunit.service.reconciler import ActionReconciler, ActionResult, should_skip
from sdunit.service.state import ActivityState, EnablementState, StateQuery, UnitState

__all__ = [
    "ActionReconciler",
    "ActionResult",
    "ActivityState",
    "EnablementState",
    "StateQuery",
    "UnitState",
    "get_unit_manager",
    "should_skip",
]
