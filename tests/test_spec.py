"""Tests for UnitSpec validation and action permissions."""

import pytest

from sdunit.errors import ValidationError
from sdunit.units.schema import UnitType
from sdunit.units.spec import Action, Mode, UnitSpec


class TestUnitSpecValidation:

    def test_minimal(self):
        spec = UnitSpec(name="web", conf_type="service")
        assert spec.conf_type is UnitType.SERVICE
        assert spec.mode is Mode.SYSTEM
        assert spec.unit_name == "web.service"
        assert spec.aliases == ()

    def test_invalid_conf_type(self):
        with pytest.raises(ValidationError, match="conf_type"):
            UnitSpec(name="web", conf_type="widget")

    def test_invalid_mode(self):
        with pytest.raises(ValidationError, match="mode"):
            UnitSpec(name="web", conf_type="service", mode="global")

    def test_empty_name(self):
        with pytest.raises(ValidationError):
            UnitSpec(name="", conf_type="service")

    @pytest.mark.parametrize("name", ["../x", "a/b"])
    def test_name_with_slash(self, name):
        with pytest.raises(ValidationError, match="must not contain"):
            UnitSpec(name=name, conf_type="service")

    def test_override_with_slash(self):
        with pytest.raises(ValidationError, match="must not contain"):
            UnitSpec(name="limits", conf_type="service", drop_in=True, override="../web")

    @pytest.mark.parametrize("override", [None, "", "   "])
    def test_drop_in_requires_override(self, override):
        with pytest.raises(ValidationError, match="override"):
            UnitSpec(name="limits", conf_type="service", drop_in=True, override=override)

    def test_override_unconstrained_without_drop_in(self):
        spec = UnitSpec(name="web", conf_type="service", override="")
        assert spec.override == ""

    def test_unknown_option(self):
        with pytest.raises(ValidationError, match="not a valid install option"):
            UnitSpec(name="web", conf_type="service", options={"install": {"ExecStart": "/bin/true"}})

    def test_unknown_section(self):
        with pytest.raises(ValidationError, match="unknown section"):
            UnitSpec(name="web", conf_type="service", options={"timer": {"OnCalendar": "daily"}})

    def test_snake_case_options_are_normalised(self):
        spec = UnitSpec(name="web", conf_type="service", options={"install": {"wanted_by": "multi-user.target"}})
        assert dict(spec.section_values("install")) == {"WantedBy": "multi-user.target"}

    def test_stub_section_values_are_accepted(self):
        spec = UnitSpec(name="multi", conf_type="target", options={"target": {"Anything": "goes"}})
        assert spec.section_values("target")["Anything"] == "goes"

    def test_aliases_must_be_a_list(self):
        with pytest.raises(ValidationError):
            UnitSpec(name="web", conf_type="service", aliases="www")

    def test_immutable(self):
        spec = UnitSpec(name="web", conf_type="service", options={"unit": {"After": ["a", "b"]}})
        with pytest.raises(Exception):
            spec.name = "other"
        with pytest.raises(TypeError):
            spec.options["unit"]["After"] = "c"
        assert spec.section_values("unit")["After"] == ("a", "b")


class TestAllowedActions:

    def test_regular_unit_allows_everything(self):
        spec = UnitSpec(name="web", conf_type="service")
        assert set(spec.allowed_actions) == set(Action)

    def test_drop_in_allows_create_and_delete_only(self):
        spec = UnitSpec(name="limits", conf_type="service", drop_in=True, override="web")
        assert set(spec.allowed_actions) == {Action.CREATE, Action.DELETE}
        assert spec.request("create").action is Action.CREATE
        with pytest.raises(ValidationError, match="not allowed"):
            spec.request("start")

    def test_request(self):
        spec = UnitSpec(name="web", conf_type="socket", mode="user")
        request = spec.request("enable")
        assert request.unit_name == "web.socket"
        assert request.mode is Mode.USER
        assert request.action is Action.ENABLE

    def test_invalid_action(self):
        spec = UnitSpec(name="web", conf_type="service")
        with pytest.raises(ValidationError, match="Invalid action"):
            spec.request("explode")


class TestFromDict:

    def test_round_trip(self):
        data = {
            "name": "web",
            "conf_type": "service",
            "mode": "system",
            "aliases": ["www"],
            "unit": {"Description": "Web"},
            "service": {"ExecStart": "/usr/bin/web"},
        }
        spec = UnitSpec.from_dict(data)
        assert spec.aliases == ("www",)
        assert UnitSpec.from_dict(spec.to_dict()) == spec

    def test_missing_conf_type(self):
        with pytest.raises(ValidationError, match="conf_type"):
            UnitSpec.from_dict({"name": "web"})

    def test_unknown_key(self):
        with pytest.raises(ValidationError, match="unknown keys: colour"):
            UnitSpec.from_dict({"name": "web", "conf_type": "service", "colour": "red"})
