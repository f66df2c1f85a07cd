"""Unit declarations: the validated, immutable input to assembly and reconciliation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Union

from sdunit.errors import ValidationError
from sdunit.units.schema import (
    INSTALL_SECTION,
    UNIT_SECTION,
    UnitType,
    canonical_option,
    is_stub_section,
    parse_unit_type,
)

OptionValue = Union[str, int, float, bool, list, tuple]


class Mode(str, Enum):
    """Which systemd instance owns the unit."""

    SYSTEM = "system"
    USER = "user"

    def __str__(self) -> str:
        return self.value


class Action(str, Enum):
    """Actions a declared unit can be converged with."""

    CREATE = "create"
    DELETE = "delete"
    ENABLE = "enable"
    DISABLE = "disable"
    START = "start"
    STOP = "stop"
    RESTART = "restart"
    RELOAD = "reload"

    def __str__(self) -> str:
        return self.value


ALL_ACTIONS: tuple[Action, ...] = tuple(Action)
FILE_ACTIONS: tuple[Action, ...] = (Action.CREATE, Action.DELETE)
LIFECYCLE_ACTIONS: tuple[Action, ...] = tuple(a for a in Action if a not in FILE_ACTIONS)


def parse_mode(value: str | Mode) -> Mode:
    if isinstance(value, Mode):
        return value
    try:
        return Mode(str(value).lower())
    except ValueError:
        raise ValidationError(f"Invalid mode: {value!r}. Expected 'system' or 'user'") from None


def parse_action(value: str | Action) -> Action:
    if isinstance(value, Action):
        return value
    try:
        return Action(str(value).lower())
    except ValueError:
        raise ValidationError(
            f"Invalid action: {value!r}. "
            f"Expected one of: {', '.join(a.value for a in Action)}"
        ) from None


def _check_value(section: str, option: str, value: Any) -> None:
    scalars = (str, int, float, bool)
    if isinstance(value, (list, tuple)):
        if not all(isinstance(v, scalars) for v in value):
            raise ValidationError(f"Option {section}.{option} contains a non-scalar element")
    elif value is not None and not isinstance(value, scalars):
        raise ValidationError(
            f"Option {section}.{option} has unsupported type {type(value).__name__}"
        )


def _freeze_value(value: Any) -> Any:
    return tuple(value) if isinstance(value, list) else value


@dataclass(frozen=True)
class UnitSpec:
    """
    A single declared unit.

    Options are keyed by section identifier ('unit', 'install' or the
    conf_type value) and then by canonical systemd option name. Instances
    are validated on construction and read-only afterwards.
    """

    name: str
    conf_type: UnitType
    mode: Mode = Mode.SYSTEM
    drop_in: bool = False
    override: Optional[str] = None
    aliases: tuple[str, ...] = ()
    overrides: tuple[str, ...] = ()
    options: Mapping[str, Mapping[str, OptionValue]] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        if not self.name or not isinstance(self.name, str):
            raise ValidationError("Unit name cannot be empty")
        if "/" in self.name:
            raise ValidationError(f"Unit name '{self.name}' must not contain '/'")

        # frozen dataclass: normalise fields through object.__setattr__
        object.__setattr__(self, "conf_type", parse_unit_type(self.conf_type))
        object.__setattr__(self, "mode", parse_mode(self.mode))

        if not isinstance(self.drop_in, bool):
            raise ValidationError(f"drop_in must be a boolean, got {self.drop_in!r}")
        if self.drop_in and not (isinstance(self.override, str) and self.override.strip()):
            raise ValidationError(
                f"Unit '{self.name}': drop-in units require a non-empty 'override'"
            )
        if self.override is not None and not isinstance(self.override, str):
            raise ValidationError(f"override must be a string, got {self.override!r}")
        if self.override is not None and "/" in self.override:
            raise ValidationError(f"override '{self.override}' must not contain '/'")

        object.__setattr__(self, "aliases", self._string_tuple("aliases", self.aliases))
        object.__setattr__(self, "overrides", self._string_tuple("overrides", self.overrides))
        object.__setattr__(self, "options", self._normalise_options(self.options))

    def _string_tuple(self, field_name: str, values: Iterable[str]) -> tuple[str, ...]:
        if isinstance(values, str):
            raise ValidationError(f"{field_name} must be a list of strings, not a string")
        result = tuple(values or ())
        for value in result:
            if not isinstance(value, str) or not value:
                raise ValidationError(f"{field_name} entries must be non-empty strings")
        return result

    def _normalise_options(
        self, options: Mapping[str, Mapping[str, Any]]
    ) -> Mapping[str, Mapping[str, OptionValue]]:
        allowed_sections = (UNIT_SECTION, INSTALL_SECTION, self.conf_type.value)
        normalised: dict[str, Mapping[str, OptionValue]] = {}

        for section, values in (options or {}).items():
            if section not in allowed_sections:
                raise ValidationError(
                    f"Unit '{self.name}': unknown section '{section}' "
                    f"(expected one of: {', '.join(allowed_sections)})"
                )
            if not isinstance(values, Mapping):
                raise ValidationError(f"Unit '{self.name}': section '{section}' must be a mapping")

            if is_stub_section(section):
                # stub types never render a type-specific section
                normalised[section] = MappingProxyType(
                    {k: _freeze_value(v) for k, v in values.items()}
                )
                continue

            section_values: dict[str, OptionValue] = {}
            for key, value in values.items():
                option = canonical_option(section, key)
                if option is None:
                    raise ValidationError(
                        f"Unit '{self.name}': '{key}' is not a valid {section} option"
                    )
                _check_value(section, option, value)
                section_values[option] = _freeze_value(value)
            normalised[section] = MappingProxyType(section_values)

        return MappingProxyType(normalised)

    @property
    def unit_name(self) -> str:
        """Full unit name, e.g. 'web.service'."""
        return f"{self.name}.{self.conf_type.value}"

    @property
    def allowed_actions(self) -> tuple[Action, ...]:
        """Drop-ins only support file actions."""
        return FILE_ACTIONS if self.drop_in else ALL_ACTIONS

    def section_values(self, section: str) -> Mapping[str, OptionValue]:
        """Assigned option values for one section (empty if none)."""
        return self.options.get(section, MappingProxyType({}))

    def request(self, action: str | Action) -> ActionRequest:
        """Build an ActionRequest, enforcing the drop-in action restriction."""
        action = parse_action(action)
        if action not in self.allowed_actions:
            raise ValidationError(
                f"Action '{action}' is not allowed for drop-in unit '{self.name}' "
                f"(allowed: {', '.join(a.value for a in self.allowed_actions)})"
            )
        return ActionRequest(
            name=self.name,
            conf_type=self.conf_type,
            mode=self.mode,
            action=action,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> UnitSpec:
        """
        Build a UnitSpec from a config entry.

        Section option blocks sit at the top level of the entry, keyed by
        section identifier ('unit', 'install', 'service', ...).
        """
        if not isinstance(data, Mapping):
            raise ValidationError("Unit declaration must be a mapping")
        if "name" not in data:
            raise ValidationError("Unit declaration is missing 'name'")
        if "conf_type" not in data:
            raise ValidationError(f"Unit '{data['name']}' is missing 'conf_type'")

        conf_type = parse_unit_type(data["conf_type"])
        section_keys = (UNIT_SECTION, INSTALL_SECTION, conf_type.value)
        known = {"name", "conf_type", "mode", "drop_in", "override", "aliases", "overrides", "actions"}

        unknown = set(data) - known - set(section_keys)
        if unknown:
            raise ValidationError(
                f"Unit '{data['name']}': unknown keys: {', '.join(sorted(unknown))}"
            )

        return cls(
            name=data["name"],
            conf_type=conf_type,
            mode=data.get("mode", Mode.SYSTEM),
            drop_in=data.get("drop_in", False),
            override=data.get("override"),
            aliases=data.get("aliases", ()),
            overrides=data.get("overrides", ()),
            options={k: data[k] for k in section_keys if k in data},
        )

    def to_dict(self) -> dict[str, Any]:
        """Inverse of from_dict (without 'actions')."""
        data: dict[str, Any] = {
            "name": self.name,
            "conf_type": self.conf_type.value,
            "mode": self.mode.value,
        }
        if self.drop_in:
            data["drop_in"] = True
            data["override"] = self.override
        if self.aliases:
            data["aliases"] = list(self.aliases)
        if self.overrides:
            data["overrides"] = list(self.overrides)
        for section, values in self.options.items():
            data[section] = {
                k: list(v) if isinstance(v, tuple) else v for k, v in values.items()
            }
        return data


@dataclass(frozen=True)
class ActionRequest:
    """One lifecycle action against one unit."""

    name: str
    conf_type: UnitType
    mode: Mode
    action: Action

    @property
    def unit_name(self) -> str:
        return f"{self.name}.{self.conf_type.value}"
