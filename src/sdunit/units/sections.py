"""Line renderers for a single unit-file section."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from sdunit.units.schema import INSTALL_SECTION

ALIAS_OPTION = "Alias"


def format_value(value: Any) -> str:
    """Render an option value the way systemd expects it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return " ".join(format_value(v) for v in value)
    return str(value)


def render_options(options: Sequence[str], values: Mapping[str, Any]) -> list[str]:
    """
    Render assigned options as 'Name=Value' lines.

    Args:
        options: Permitted option names, in declaration order.
        values: Assigned values keyed by option name. None means unassigned.

    Returns:
        One line per assigned option, in the order of ``options``.
    """
    return [
        f"{option}={format_value(values[option])}"
        for option in options
        if values.get(option) is not None
    ]


def render_overrides(
    section: str,
    options: Sequence[str],
    overrides: Sequence[str],
    drop_in: bool,
) -> list[str]:
    """
    Render 'Name=' lines that clear inherited values in a drop-in.

    Only names valid for the section are kept; Alias is additionally
    accepted for the install section.
    """
    if not drop_in:
        return []

    return [
        f"{name}="
        for name in overrides
        if name in options or (section == INSTALL_SECTION and name == ALIAS_OPTION)
    ]


def render_aliases(section: str, aliases: Sequence[str], conf_type: str) -> list[str]:
    """Render the single 'Alias=' line of the install section."""
    if section != INSTALL_SECTION or not aliases:
        return []
    return [f"{ALIAS_OPTION}=" + " ".join(f"{alias}.{conf_type}" for alias in aliases)]
