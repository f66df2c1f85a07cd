"""
sdunit - desired-state management of systemd unit files

Renders unit files and drop-ins from declarations and converges their
lifecycle (enable/disable/start/stop/restart/reload) without repeating
work systemd reports as already done.
"""

__version__ = "1.0.0"

from sdunit.core.config import Config
from sdunit.core.converge import Converger
from sdunit.units import UnitSpec, assemble

__all__ = ["Config", "Converger", "UnitSpec", "assemble", "__version__"]
