"""Utility functions and classes."""

from sdunit.utils.logging import get_logger, setup_logging
from sdunit.utils.paths import expand_path

__all__ = ["expand_path", "get_logger", "setup_logging"]
