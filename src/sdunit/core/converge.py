"""Convergence passes over declared units."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from sdunit.core.config import UnitDeclaration
from sdunit.errors import SdunitError
from sdunit.service.linux import SystemdUnitManager
from sdunit.service.reconciler import ActionResult
from sdunit.units.spec import Action
from sdunit.utils.logging import get_logger


@dataclass
class UnitReport:
    """Results for one declared unit."""

    unit: str
    results: list[ActionResult] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def changed(self) -> bool:
        return any(r.changed for r in self.results)


@dataclass
class ConvergeReport:
    """Results of a convergence pass."""

    units: list[UnitReport] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(u.ok for u in self.units)

    @property
    def changed(self) -> bool:
        return any(u.changed for u in self.units)

    @property
    def failed(self) -> list[UnitReport]:
        return [u for u in self.units if not u.ok]

    def summary(self) -> str:
        changed = sum(1 for u in self.units if u.changed)
        return f"{len(self.units)} unit(s), {changed} changed, {len(self.failed)} failed"


class Converger:
    """
    Applies each declaration's actions in order.

    A failure stops the remaining actions of that unit only; the pass
    continues with the next unit.

    Example:
        converger = Converger(get_unit_manager(config.data.systemd))
        report = converger.converge(config.data.units)
    """

    def __init__(self, manager: SystemdUnitManager) -> None:
        self._manager = manager
        self._logger = get_logger("sdunit.converge")

    def converge_unit(self, declaration: UnitDeclaration) -> UnitReport:
        report = UnitReport(unit=declaration.key)
        for action in declaration.actions:
            try:
                report.results.append(self._manager.apply(declaration.spec, action))
            except SdunitError as e:
                self._logger.error(f"{declaration.key}: {action} failed: {e}")
                report.error = str(e)
                break
        return report

    def converge(self, declarations: Iterable[UnitDeclaration]) -> ConvergeReport:
        report = ConvergeReport()
        for declaration in declarations:
            report.units.append(self.converge_unit(declaration))

        log = self._logger.info if report.ok else self._logger.warning
        log(f"Convergence finished: {report.summary()}")
        return report

    def plan(self, declaration: UnitDeclaration) -> list[tuple[Action, str]]:
        """
        Describe what converging a unit would do, without changing anything.

        Lifecycle actions still query live state.
        """
        steps: list[tuple[Action, str]] = []
        spec = declaration.spec
        for action in declaration.actions:
            if action == Action.CREATE:
                steps.append((action, f"write {self._manager.unit_path(spec)}"))
            elif action == Action.DELETE:
                steps.append((action, f"remove {self._manager.unit_path(spec)}"))
            else:
                command, state, skip = self._manager.reconciler.plan(spec.request(action))
                state_value = state.for_action(action)
                if skip:
                    steps.append((action, f"skip {command} (state: {state_value})"))
                else:
                    steps.append((action, f"run {command}"))
        return steps
