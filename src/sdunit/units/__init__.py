"""Unit declarations and unit-file assembly."""

from sdunit.units.document import Section, UnitDocument, assemble
from sdunit.units.schema import UnitType, UnitTypeDescriptor, get_descriptor
from sdunit.units.spec import Action, ActionRequest, Mode, UnitSpec

__all__ = [
    "Action",
    "ActionRequest",
    "Mode",
    "Section",
    "UnitDocument",
    "UnitSpec",
    "UnitType",
    "UnitTypeDescriptor",
    "assemble",
    "get_descriptor",
]
