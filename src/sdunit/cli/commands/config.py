"""Configuration commands."""

from __future__ import annotations

import argparse

from sdunit.cli.commands import load_config
from sdunit.cli.formatters import print_error, print_info, print_json
from sdunit.errors import SdunitError


def cmd_config(args: argparse.Namespace) -> int:
    """Show the desired-state file."""
    try:
        config = load_config(args)
    except SdunitError as e:
        print_error(str(e))
        return 1

    if not config.path.exists():
        print_error(f"Config file not found: {config.path}")
        print_info("Create one with: sdunit config --init")
        return 1

    if args.json:
        print_json(config._to_dict())
    else:
        print(f"Config file: {config.path}")
        print()
        print(config.path.read_text())
    return 0


def cmd_config_init(args: argparse.Namespace) -> int:
    """Write an empty desired-state file."""
    try:
        config = load_config(args)
    except SdunitError as e:
        print_error(str(e))
        return 1

    if config.path.exists():
        print_info(f"Config file already exists: {config.path}")
        return 0

    config.save()
    print_info(f"Created {config.path}")
    return 0


def register_commands(subparsers: argparse._SubParsersAction) -> None:
    """Register configuration commands."""
    config_parser = subparsers.add_parser("config", help="Show the desired-state file")
    config_parser.add_argument("--json", action="store_true", help="Output as normalised JSON")
    config_parser.add_argument("--init", action="store_true", help="Create an empty config file")
    config_parser.set_defaults(func=lambda args: cmd_config_init(args) if args.init else cmd_config(args))
