"""Tests for systemctl state queries."""

import subprocess

import pytest

from sdunit.errors import StateQueryError
from sdunit.service.executor import CommandExecutor
from sdunit.service.state import (
    ActivityState,
    EnablementState,
    SystemctlStateQuery,
    UnitState,
)
from sdunit.units.spec import Action, UnitSpec

from fakes import FakeExecutor


@pytest.fixture
def spec():
    return UnitSpec(name="web", conf_type="service")


class TestClassify:

    @pytest.mark.parametrize("output, expected", [
        ("enabled", EnablementState.ENABLED),
        ("enabled-runtime\n", EnablementState.ENABLED_RUNTIME),
        ("  static ", EnablementState.STATIC),
        ("masked-runtime", EnablementState.MASKED_RUNTIME),
        ("linked", EnablementState.UNKNOWN),
        ("", EnablementState.UNKNOWN),
    ])
    def test_enablement(self, output, expected):
        assert EnablementState.classify(output) is expected

    @pytest.mark.parametrize("output, expected", [
        ("active", ActivityState.ACTIVE),
        ("inactive", ActivityState.INACTIVE),
        ("failed", ActivityState.FAILED),
        ("garbage", ActivityState.UNKNOWN),
        ("", ActivityState.UNKNOWN),
    ])
    def test_activity(self, output, expected):
        assert ActivityState.classify(output) is expected


class TestSystemctlStateQuery:

    @pytest.mark.parametrize("action", ["enable", "disable"])
    def test_enablement_query(self, spec, action):
        executor = FakeExecutor({"systemctl is-enabled web.service": (1, "disabled")})
        state = SystemctlStateQuery(executor).query(spec.request(action))

        assert executor.commands == ["systemctl is-enabled web.service"]
        assert state == UnitState(enablement=EnablementState.DISABLED)
        assert state.activity is None

    @pytest.mark.parametrize("action", ["start", "stop"])
    def test_activity_query(self, spec, action):
        executor = FakeExecutor({"systemctl is-active web.service": (3, "inactive")})
        state = SystemctlStateQuery(executor).query(spec.request(action))

        assert executor.commands == ["systemctl is-active web.service"]
        assert state.activity is ActivityState.INACTIVE
        assert state.enablement is None

    @pytest.mark.parametrize("action", ["restart", "reload", "create", "delete"])
    def test_no_query(self, spec, action):
        executor = FakeExecutor()
        assert SystemctlStateQuery(executor).query(spec.request(action)) == UnitState()
        assert executor.commands == []

    def test_user_mode(self):
        executor = FakeExecutor()
        spec = UnitSpec(name="agent", conf_type="socket", mode="user")
        SystemctlStateQuery(executor).query(spec.request("start"))
        assert executor.commands == ["systemctl --user is-active agent.socket"]

    def test_missing_systemctl(self, spec):
        class Missing(CommandExecutor):
            def run(self, command):
                raise FileNotFoundError(2, "No such file", "systemctl")

        with pytest.raises(StateQueryError, match="is-enabled web.service"):
            SystemctlStateQuery(Missing()).query(spec.request("enable"))

    def test_timeout(self, spec):
        class Slow(CommandExecutor):
            def run(self, command):
                raise subprocess.TimeoutExpired(command, 5)

        with pytest.raises(StateQueryError):
            SystemctlStateQuery(Slow()).query(spec.request("stop"))

    def test_for_action(self):
        state = UnitState(enablement=EnablementState.STATIC, activity=ActivityState.ACTIVE)
        assert state.for_action(Action.ENABLE) == "static"
        assert state.for_action(Action.STOP) == "active"
        assert state.for_action(Action.RESTART) is None


class TestStateStrings:

    def test_str_is_the_systemctl_value(self):
        assert str(EnablementState.ENABLED_RUNTIME) == "enabled-runtime"
        assert str(ActivityState.UNKNOWN) == "unknown"
