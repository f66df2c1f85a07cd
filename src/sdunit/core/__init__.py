"""Core configuration and convergence logic."""

from sdunit.core.config import Config, ConfigData, UnitDeclaration
from sdunit.core.converge import ConvergeReport, Converger

__all__ = ["Config", "ConfigData", "ConvergeReport", "Converger", "UnitDeclaration"]
