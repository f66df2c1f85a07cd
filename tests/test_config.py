"""Tests for the desired-state config file."""

import json
from pathlib import Path

import pytest

from sdunit.core.config import Config, UnitDeclaration
from sdunit.errors import ValidationError
from sdunit.units.spec import Action, UnitSpec


def write_config(path: Path, data: dict) -> Path:
    path.write_text(json.dumps(data))
    return path


@pytest.fixture
def config_file(tmp_path):
    return write_config(tmp_path / "config.json", {
        "systemd": {"system_unit_dir": str(tmp_path / "units"), "daemon_reload": False},
        "logging": {"file": None, "level": "DEBUG"},
        "units": [
            {
                "name": "web",
                "conf_type": "service",
                "actions": ["create", "enable", "start"],
                "unit": {"Description": "Web"},
                "install": {"wanted_by": "multi-user.target"},
                "service": {"ExecStart": "/usr/bin/web"},
            },
            {
                "name": "web",
                "conf_type": "socket",
                "socket": {"ListenStream": 8080},
            },
            {
                "name": "limits",
                "conf_type": "service",
                "drop_in": True,
                "override": "web",
                "overrides": ["LimitNOFILE"],
            },
        ],
    })


class TestLoad:

    def test_load(self, config_file, tmp_path):
        config = Config(config_file)
        data = config.data

        assert data.systemd.system_unit_dir == tmp_path / "units"
        assert data.systemd.daemon_reload is False
        assert data.logging.file is None
        assert data.logging.level == "DEBUG"
        assert [u.key for u in data.units] == ["web.service", "web.socket", "limits.service"]
        assert data.units[0].actions == (Action.CREATE, Action.ENABLE, Action.START)
        assert data.units[1].actions == (Action.CREATE,)
        assert data.units[0].spec.section_values("install")["WantedBy"] == "multi-user.target"

    def test_missing_file_gives_defaults(self, tmp_path):
        config = Config(tmp_path / "absent.json")
        assert config.data.units == []
        assert config.data.systemd.daemon_reload is True

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        with pytest.raises(ValidationError, match="Invalid JSON"):
            Config(path)

    def test_invalid_unit_names_entry(self, tmp_path):
        path = write_config(tmp_path / "config.json", {
            "units": [{"name": "x", "conf_type": "service", "mode": "galaxy"}],
        })
        with pytest.raises(ValidationError, match=r"units\[0\]"):
            Config(path)

    def test_drop_in_with_lifecycle_action_rejected(self, tmp_path):
        path = write_config(tmp_path / "config.json", {
            "units": [{
                "name": "limits", "conf_type": "service", "drop_in": True,
                "override": "web", "actions": ["create", "start"],
            }],
        })
        with pytest.raises(ValidationError, match="not allowed"):
            Config(path)

    def test_duplicate_unit(self, tmp_path):
        entry = {"name": "web", "conf_type": "service"}
        path = write_config(tmp_path / "config.json", {"units": [entry, entry]})
        with pytest.raises(ValidationError, match="more than once"):
            Config(path)

    def test_same_name_in_system_and_user_mode(self, tmp_path):
        path = write_config(tmp_path / "config.json", {
            "units": [
                {"name": "web", "conf_type": "service"},
                {"name": "web", "conf_type": "service", "mode": "user"},
            ],
        })
        units = Config(path).data.units
        assert [u.spec.mode.value for u in units] == ["system", "user"]


class TestLookup:

    def test_get_unit_by_full_name(self, config_file):
        assert Config(config_file).get_unit("web.socket").spec.conf_type.value == "socket"

    def test_ambiguous_short_name(self, config_file):
        with pytest.raises(ValidationError, match="ambiguous"):
            Config(config_file).get_unit("web")

    def test_unknown(self, config_file):
        with pytest.raises(ValidationError, match="No unit declared"):
            Config(config_file).get_unit("db")


class TestBuilder:

    def test_save_and_reload(self, tmp_path):
        path = tmp_path / "nested" / "config.json"
        spec = UnitSpec(name="tick", conf_type="timer", aliases=["tock"],
                        options={"timer": {"OnCalendar": "daily"}})
        (
            Config(path)
            .add_unit(spec, actions=["create", "enable"])
            .log_level("warning")
            .log_file(None)
            .daemon_reload(False)
            .save()
        )

        reloaded = Config(path)
        assert reloaded.data.logging.level == "WARNING"
        assert reloaded.data.logging.file is None
        assert reloaded.data.systemd.daemon_reload is False
        assert reloaded.data.units == [
            UnitDeclaration(spec=spec, actions=(Action.CREATE, Action.ENABLE))
        ]

    def test_remove_unit(self, config_file):
        config = Config(config_file).remove_unit("web")
        assert [u.key for u in config.data.units] == ["limits.service"]

    def test_built_config_is_frozen(self, tmp_path):
        config = Config(tmp_path / "config.json")
        config.build()
        with pytest.raises(RuntimeError):
            config.log_level("DEBUG")
