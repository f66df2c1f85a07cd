"""Assembly of a complete unit file from a UnitSpec."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from sdunit.units.schema import (
    INSTALL_SECTION,
    UNIT_SECTION,
    is_stub_section,
    section_label,
    section_options,
)
from sdunit.units.sections import render_aliases, render_options, render_overrides
from sdunit.units.spec import UnitSpec


@dataclass(frozen=True)
class Section:
    """One rendered section of a unit file."""

    name: str
    label: str
    lines: tuple[str, ...] = ()

    def to_ini(self) -> str:
        return "\n".join([f"[{self.label}]", *self.lines])


class UnitDocument:
    """
    Ordered mapping of section identifier to Section.

    Sections keep the fixed order they were added in; an empty section is
    kept with zero lines.
    """

    def __init__(self, sections: list[Section] | None = None) -> None:
        self._sections: dict[str, Section] = {}
        for section in sections or []:
            self._sections[section.name] = section

    def __getitem__(self, name: str) -> Section:
        return self._sections[name]

    def __contains__(self, name: object) -> bool:
        return name in self._sections

    def __iter__(self) -> Iterator[str]:
        return iter(self._sections)

    def __len__(self) -> int:
        return len(self._sections)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UnitDocument):
            return NotImplemented
        return list(self._sections.values()) == list(other._sections.values())

    def sections(self) -> list[Section]:
        return list(self._sections.values())

    def to_dict(self) -> dict[str, list[str]]:
        """Section name -> lines, for JSON output."""
        return {name: list(section.lines) for name, section in self._sections.items()}

    def to_ini(self) -> str:
        """Serialize as INI text with a trailing newline."""
        return "\n\n".join(section.to_ini() for section in self._sections.values()) + "\n"

    def __repr__(self) -> str:
        return f"UnitDocument(sections={list(self._sections)})"


def build_section(spec: UnitSpec, section: str) -> Section:
    """Overrides, then alias, then option lines for one section."""
    options = section_options(section)
    lines = [
        *render_overrides(section, options, spec.overrides, spec.drop_in),
        *render_aliases(section, spec.aliases, spec.conf_type.value),
        *render_options(options, spec.section_values(section)),
    ]
    return Section(name=section, label=section_label(section), lines=tuple(lines))


def assemble(spec: UnitSpec) -> UnitDocument:
    """Build the unit file document for a spec."""
    sections = []
    for section in (UNIT_SECTION, INSTALL_SECTION, spec.conf_type.value):
        # some unit types have no type-specific section
        if is_stub_section(section):
            continue
        sections.append(build_section(spec, section))
    return UnitDocument(sections)
