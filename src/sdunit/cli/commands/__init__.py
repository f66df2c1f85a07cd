"""CLI subcommands."""

from __future__ import annotations

import argparse

from sdunit.core.config import Config
from sdunit.utils.logging import setup_logging


def load_config(args: argparse.Namespace) -> Config:
    """Load the desired-state file named on the command line and set up logging."""
    config = Config(args.config)
    level = "WARNING" if getattr(args, "quiet", False) else config.data.logging.level
    setup_logging(log_file=config.data.logging.file, level=level)
    return config
