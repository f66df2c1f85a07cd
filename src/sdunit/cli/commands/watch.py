"""Watch mode: re-converge whenever the desired-state file changes."""

from __future__ import annotations

import argparse
import threading

from sdunit.cli.commands import load_config
from sdunit.cli.formatters import print_error, print_info
from sdunit.core.config import Config
from sdunit.core.converge import Converger
from sdunit.core.shutdown import ShutdownHandler
from sdunit.core.watcher import ConfigWatcher
from sdunit.errors import SdunitError
from sdunit.service.factory import get_unit_manager
from sdunit.utils.logging import get_logger


class Reconverger:
    """Reloads the config and runs one convergence pass at a time."""

    def __init__(self, config_path) -> None:
        self._config_path = config_path
        self._lock = threading.Lock()
        self._logger = get_logger("sdunit.watch")

    def __call__(self) -> bool:
        with self._lock:
            try:
                config = Config(self._config_path)
                converger = Converger(get_unit_manager(config.data.systemd))
                return converger.converge(config.data.units).ok
            except SdunitError as e:
                # a half-edited file should not stop the watcher
                self._logger.error(f"Config rejected, keeping previous state: {e}")
                return False


def cmd_watch(args: argparse.Namespace) -> int:
    """Converge now, then again on every change to the config file."""
    try:
        config = load_config(args)
        get_unit_manager(config.data.systemd)
    except (SdunitError, NotImplementedError) as e:
        print_error(str(e))
        return 1

    reconverge = Reconverger(config.path)
    reconverge()

    shutdown = ShutdownHandler().install()
    debounce = args.debounce if args.debounce is not None else config.data.watch.debounce_seconds
    print_info(f"Watching {config.path} (Ctrl+C to stop)")

    with ConfigWatcher(config.path, reconverge, debounce_seconds=debounce):
        shutdown.wait_for_shutdown()
    return 0


def register_commands(subparsers: argparse._SubParsersAction) -> None:
    watch_parser = subparsers.add_parser(
        "watch",
        help="Re-converge when the config file changes",
    )
    watch_parser.add_argument(
        "--debounce",
        type=float,
        default=None,
        help="Seconds of quiet before re-converging",
    )
    watch_parser.set_defaults(func=cmd_watch)
