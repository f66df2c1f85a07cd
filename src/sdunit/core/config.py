"""Desired-state configuration with fluent builder interface."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Optional

from sdunit.errors import ValidationError
from sdunit.service.linux import DEFAULT_SYSTEM_UNIT_DIR, DEFAULT_USER_UNIT_DIR
from sdunit.units.spec import Action, UnitSpec
from sdunit.utils.fluent import FluentBuilder
from sdunit.utils.paths import expand_path, get_config_file, get_log_file


@dataclass
class SystemdSettings:
    """Where unit files go and how systemctl is run."""

    system_unit_dir: Path = DEFAULT_SYSTEM_UNIT_DIR
    user_unit_dir: Path = DEFAULT_USER_UNIT_DIR
    daemon_reload: bool = True
    command_timeout: Optional[float] = 60


@dataclass
class WatchSettings:
    """Settings for `sdunit watch`."""

    debounce_seconds: float = 2.0


@dataclass
class LoggingConfig:
    """Logging configuration."""

    file: Optional[Path] = field(default_factory=get_log_file)
    level: str = "INFO"


@dataclass(frozen=True)
class UnitDeclaration:
    """A unit spec plus the actions to converge it with, in order."""

    spec: UnitSpec
    actions: tuple[Action, ...] = (Action.CREATE,)

    def __post_init__(self) -> None:
        actions = tuple(self.spec.request(a).action for a in self.actions)
        object.__setattr__(self, "actions", actions)

    @property
    def key(self) -> str:
        """Full unit name, e.g. 'web.service'."""
        return self.spec.unit_name

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UnitDeclaration:
        if not isinstance(data, dict):
            raise ValidationError("Unit declaration must be an object")
        actions = data.get("actions", [Action.CREATE.value])
        if isinstance(actions, str) or not isinstance(actions, list):
            raise ValidationError(f"Unit '{data.get('name')}': 'actions' must be a list")
        return cls(spec=UnitSpec.from_dict(data), actions=tuple(actions))

    def to_dict(self) -> dict[str, Any]:
        data = self.spec.to_dict()
        data["actions"] = [a.value for a in self.actions]
        return data


@dataclass
class ConfigData:
    """Complete configuration data structure."""

    systemd: SystemdSettings = field(default_factory=SystemdSettings)
    watch: WatchSettings = field(default_factory=WatchSettings)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    units: list[UnitDeclaration] = field(default_factory=list)


class Config(FluentBuilder["Config"]):
    """
    Fluent configuration builder for sdunit.

    Example:
        config = (
            Config(Path("units.json"))
            .add_unit(UnitSpec(name="web", conf_type="service",
                               options={"service": {"ExecStart": "/usr/bin/web"}}),
                      actions=["create", "enable", "start"])
            .log_level("DEBUG")
            .save()
        )
    """

    def __init__(self, config_path: Optional[Path] = None) -> None:
        super().__init__()
        self._config_path = Path(config_path) if config_path else get_config_file()
        self._data = ConfigData()
        self._load_existing()

    @property
    def path(self) -> Path:
        return self._config_path

    def _load_existing(self) -> None:
        """Load existing config if present."""
        if not self._config_path.exists():
            return
        try:
            with open(self._config_path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON in {self._config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ValidationError(f"{self._config_path}: top level must be an object")
        self._from_dict(data)

    def _from_dict(self, data: dict[str, Any]) -> None:
        """Populate config from dictionary (for loading from JSON)."""
        if "systemd" in data:
            sd = data["systemd"]
            self._data.systemd.system_unit_dir = Path(
                sd.get("system_unit_dir", DEFAULT_SYSTEM_UNIT_DIR)
            )
            self._data.systemd.user_unit_dir = Path(sd.get("user_unit_dir", DEFAULT_USER_UNIT_DIR))
            self._data.systemd.daemon_reload = sd.get("daemon_reload", True)
            self._data.systemd.command_timeout = sd.get("command_timeout", 60)

        if "watch" in data:
            self._data.watch.debounce_seconds = float(data["watch"].get("debounce_seconds", 2.0))

        if "logging" in data:
            log = data["logging"]
            log_file = log.get("file", str(get_log_file()))
            self._data.logging.file = expand_path(log_file) if log_file else None
            self._data.logging.level = log.get("level", "INFO")

        units = data.get("units", [])
        if not isinstance(units, list):
            raise ValidationError("'units' must be a list")
        for index, entry in enumerate(units):
            try:
                self._add_declaration(UnitDeclaration.from_dict(entry))
            except ValidationError as e:
                raise ValidationError(f"{self._config_path}: units[{index}]: {e}") from e

    def _to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for JSON serialization."""
        return {
            "systemd": {
                "system_unit_dir": str(self._data.systemd.system_unit_dir),
                "user_unit_dir": str(self._data.systemd.user_unit_dir),
                "daemon_reload": self._data.systemd.daemon_reload,
                "command_timeout": self._data.systemd.command_timeout,
            },
            "watch": {
                "debounce_seconds": self._data.watch.debounce_seconds,
            },
            "logging": {
                "file": str(self._data.logging.file) if self._data.logging.file else None,
                "level": self._data.logging.level,
            },
            "units": [u.to_dict() for u in self._data.units],
        }

    def _add_declaration(self, declaration: UnitDeclaration) -> None:
        spec = declaration.spec
        if any(u.key == declaration.key and u.spec.mode == spec.mode
               and u.spec.drop_in == spec.drop_in and u.spec.override == spec.override
               for u in self._data.units):
            raise ValidationError(
                f"Unit '{declaration.key}' ({spec.mode}) is declared more than once"
            )
        self._data.units.append(declaration)

    # Fluent setters

    def add_unit(self, spec: UnitSpec, actions: Iterable[Action | str] = (Action.CREATE,)) -> Config:
        """Declare a unit."""
        self._check_not_built()
        self._add_declaration(UnitDeclaration(spec=spec, actions=tuple(actions)))
        return self

    def remove_unit(self, name: str) -> Config:
        """Remove all declarations matching a name or full unit name."""
        self._check_not_built()
        self._data.units = [u for u in self._data.units if not _matches(u, name)]
        return self

    def unit_dirs(self, system: str | Path, user: str | Path) -> Config:
        self._check_not_built()
        self._data.systemd.system_unit_dir = Path(system)
        self._data.systemd.user_unit_dir = Path(user)
        return self

    def daemon_reload(self, enabled: bool = True) -> Config:
        self._check_not_built()
        self._data.systemd.daemon_reload = enabled
        return self

    def log_level(self, level: str) -> Config:
        """Set the log level."""
        self._check_not_built()
        self._data.logging.level = level.upper()
        return self

    def log_file(self, path: Optional[str | Path]) -> Config:
        """Set the log file; None disables file logging."""
        self._check_not_built()
        self._data.logging.file = expand_path(path) if path else None
        return self

    def debounce(self, seconds: float) -> Config:
        self._check_not_built()
        self._data.watch.debounce_seconds = seconds
        return self

    def save(self) -> Config:
        """Save configuration to file."""
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._config_path, "w") as f:
            json.dump(self._to_dict(), f, indent=2)
        return self

    def build(self) -> ConfigData:
        """Build and return the configuration data."""
        self._mark_built()
        return self._data

    @property
    def data(self) -> ConfigData:
        """Get the configuration data without marking as built."""
        return self._data

    # Convenience methods

    def find_units(self, name: str) -> list[UnitDeclaration]:
        """Declarations matching a name ('web') or full unit name ('web.service')."""
        return [u for u in self._data.units if _matches(u, name)]

    def get_unit(self, name: str) -> UnitDeclaration:
        """
        Get exactly one declaration by name.

        Raises:
            ValidationError: If no declaration, or more than one, matches.
        """
        matches = self.find_units(name)
        if not matches:
            raise ValidationError(f"No unit declared with name '{name}'")
        if len(matches) > 1:
            keys = ", ".join(u.key for u in matches)
            raise ValidationError(f"'{name}' is ambiguous ({keys}); use the full unit name")
        return matches[0]

    def __repr__(self) -> str:
        return f"Config(path={self._config_path}, units={len(self._data.units)})"


def _matches(declaration: UnitDeclaration, name: str) -> bool:
    return name in (declaration.spec.name, declaration.spec.unit_name)


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file."""
    return Config(config_path)
