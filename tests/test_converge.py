"""Tests for convergence passes."""

from sdunit.core.config import UnitDeclaration
from sdunit.core.converge import Converger
from sdunit.service.state import ActivityState, UnitState
from sdunit.units.spec import Action, UnitSpec


def declare(name, actions, **kwargs):
    return UnitDeclaration(
        spec=UnitSpec(name=name, conf_type=kwargs.pop("conf_type", "service"), **kwargs),
        actions=tuple(actions),
    )


class TestConverger:

    def test_actions_run_in_order(self, manager, executor, state_query):
        state_query.state = UnitState(activity=ActivityState.INACTIVE)
        report = Converger(manager).converge([declare("web", ["create", "enable", "start"])])

        assert report.ok
        assert report.changed
        assert executor.commands == [
            "systemctl daemon-reload",
            "systemctl enable web.service",
            "systemctl start web.service",
        ]
        assert [r.action for r in report.units[0].results] == [
            Action.CREATE, Action.ENABLE, Action.START,
        ]

    def test_second_pass_is_a_no_op_for_files(self, manager, executor):
        declarations = [declare("web", ["create"])]
        Converger(manager).converge(declarations)
        report = Converger(manager).converge(declarations)

        assert not report.changed
        assert executor.commands == ["systemctl daemon-reload"]

    def test_failure_stops_unit_but_not_pass(self, manager, executor):
        executor.responses["systemctl enable bad.service"] = (1, "")
        report = Converger(manager).converge([
            declare("bad", ["enable", "restart"]),
            declare("good", ["restart"]),
        ])

        assert not report.ok
        assert [u.unit for u in report.failed] == ["bad.service"]
        assert "systemctl restart bad.service" not in executor.commands
        assert "systemctl restart good.service" in executor.commands
        assert report.summary() == "2 unit(s), 1 changed, 1 failed"

    def test_plan_does_not_execute(self, manager, executor, state_query, tmp_path):
        state_query.state = UnitState(activity=ActivityState.ACTIVE)
        steps = Converger(manager).plan(declare("web", ["create", "start", "restart"]))

        assert executor.commands == []
        assert steps == [
            (Action.CREATE, f"write {tmp_path / 'system' / 'web.service'}"),
            (Action.START, "skip systemctl start web.service (state: active)"),
            (Action.RESTART, "run systemctl restart web.service"),
        ]
