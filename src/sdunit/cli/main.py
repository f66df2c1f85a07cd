"""Main CLI entry point."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from sdunit import __version__


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="sdunit",
        description="Desired-state manager for systemd unit files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  sdunit apply              Converge all declared units
  sdunit apply --dry-run    Show what apply would do
  sdunit render web         Print the unit file for 'web'
  sdunit action web start   Start 'web' unless already active
  sdunit status             Show live state of declared units
  sdunit watch              Re-converge on config changes

Config: ~/.sdunit/config.json
Logs:   ~/.sdunit/sdunit.log
""",
    )

    parser.add_argument(
        "-v", "--version",
        action="version",
        version=f"sdunit {__version__}",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Desired-state file (default: ~/.sdunit/config.json)",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Only log warnings and errors",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        metavar="<command>",
        title="Commands",
    )

    from sdunit.cli.commands import config, units, watch

    units.register_commands(subparsers)
    config.register_commands(subparsers)
    watch.register_commands(subparsers)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
