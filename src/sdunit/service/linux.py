"""Linux systemd unit manager: unit files on disk plus guarded systemctl actions."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from sdunit.errors import ExecutionError
from sdunit.service.executor import CommandExecutor, SubprocessExecutor, systemctl_command
from sdunit.service.reconciler import ActionReconciler, ActionResult
from sdunit.service.state import (
    ActivityState,
    EnablementState,
    StateQuery,
    SystemctlStateQuery,
    UnitState,
)
from sdunit.units.document import UnitDocument, assemble
from sdunit.units.spec import Action, Mode, UnitSpec
from sdunit.utils.logging import get_logger

DEFAULT_SYSTEM_UNIT_DIR = Path("/etc/systemd/system")
DEFAULT_USER_UNIT_DIR = Path("/etc/systemd/user")


class SystemdUnitManager:
    """
    Converges declared units against systemd.

    File actions (create/delete) write or remove the rendered unit file;
    lifecycle actions go through the ActionReconciler.
    """

    def __init__(
        self,
        executor: Optional[CommandExecutor] = None,
        state_query: Optional[StateQuery] = None,
        system_unit_dir: Path = DEFAULT_SYSTEM_UNIT_DIR,
        user_unit_dir: Path = DEFAULT_USER_UNIT_DIR,
        daemon_reload: bool = True,
    ) -> None:
        self._executor = executor or SubprocessExecutor()
        self._state_query = state_query or SystemctlStateQuery(self._executor)
        self._reconciler = ActionReconciler(self._state_query, self._executor)
        self._unit_dirs = {
            Mode.SYSTEM: Path(system_unit_dir),
            Mode.USER: Path(user_unit_dir),
        }
        self._daemon_reload = daemon_reload
        self._logger = get_logger("sdunit.manager")

    @property
    def reconciler(self) -> ActionReconciler:
        return self._reconciler

    def unit_path(self, spec: UnitSpec) -> Path:
        """Where the unit file (or drop-in) for a spec lives."""
        unit_dir = self._unit_dirs[spec.mode]
        if spec.drop_in:
            return unit_dir / f"{spec.override}.{spec.conf_type.value}.d" / f"{spec.name}.conf"
        return unit_dir / spec.unit_name

    def render(self, spec: UnitSpec) -> UnitDocument:
        return assemble(spec)

    def apply(self, spec: UnitSpec, action: Action | str) -> ActionResult:
        """
        Apply one action to a declared unit.

        Raises:
            ValidationError: If the action is not allowed for the unit.
            StateQueryError: If live state could not be read.
            ExecutionError: If a command or file operation failed.
        """
        request = spec.request(action)
        if request.action == Action.CREATE:
            return self.create(spec)
        if request.action == Action.DELETE:
            return self.delete(spec)
        return self._reconciler.reconcile(request)

    def create(self, spec: UnitSpec) -> ActionResult:
        """Write the unit file if its content differs."""
        path = self.unit_path(spec)
        content = self.render(spec).to_ini()

        try:
            if path.exists() and path.read_text() == content:
                self._logger.debug(f"Unit file up to date: {path}")
                return ActionResult(unit=spec.unit_name, action=Action.CREATE, skipped=True,
                                    message=f"{path} up to date")

            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        except OSError as e:
            raise ExecutionError(f"write {path}", str(e)) from e

        self._logger.info(f"Wrote unit file: {path}")
        self._reload(spec)
        return ActionResult(unit=spec.unit_name, action=Action.CREATE, changed=True,
                            message=f"wrote {path}")

    def delete(self, spec: UnitSpec) -> ActionResult:
        """Remove the unit file if present."""
        path = self.unit_path(spec)

        if not path.exists():
            return ActionResult(unit=spec.unit_name, action=Action.DELETE, skipped=True,
                                message=f"{path} absent")

        try:
            path.unlink()
            # drop-in directories are removed once empty
            if spec.drop_in and not any(path.parent.iterdir()):
                path.parent.rmdir()
        except OSError as e:
            raise ExecutionError(f"remove {path}", str(e)) from e

        self._logger.info(f"Removed unit file: {path}")
        self._reload(spec)
        return ActionResult(unit=spec.unit_name, action=Action.DELETE, changed=True,
                            message=f"removed {path}")

    def _reload(self, spec: UnitSpec) -> None:
        if self._daemon_reload:
            self._executor.run_checked(systemctl_command(spec.mode, "daemon-reload"))

    def status(self, spec: UnitSpec) -> UnitState:
        """Both state axes of a regular unit. Drop-ins report their override target."""
        target = spec
        if spec.drop_in:
            target = UnitSpec(name=spec.override, conf_type=spec.conf_type, mode=spec.mode)

        enablement = self._state_query.query(target.request(Action.ENABLE)).enablement
        activity = self._state_query.query(target.request(Action.START)).activity
        return UnitState(
            enablement=enablement or EnablementState.UNKNOWN,
            activity=activity or ActivityState.UNKNOWN,
        )

    def is_installed(self, spec: UnitSpec) -> bool:
        return self.unit_path(spec).exists()
