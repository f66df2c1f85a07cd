"""Signal handling for long-running commands."""

from __future__ import annotations

import signal
import threading
from typing import Optional

from sdunit.utils.logging import get_logger


class ShutdownHandler:
    """
    Turns SIGINT/SIGTERM into an event the main thread can wait on.

    Example:
        shutdown = ShutdownHandler().install()
        shutdown.wait_for_shutdown()
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._installed = False
        self.logger = get_logger("sdunit.shutdown")

    def install(self) -> ShutdownHandler:
        """Install signal handlers (main thread only)."""
        if self._installed:
            return self

        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)
        self._installed = True
        return self

    def _signal_handler(self, signum: int, frame) -> None:
        self.logger.info(f"Received {signal.Signals(signum).name}, shutting down...")
        self.trigger_shutdown()

    def trigger_shutdown(self) -> None:
        self._event.set()

    def wait_for_shutdown(self, timeout: Optional[float] = None) -> bool:
        """Block until shutdown is triggered; False on timeout."""
        return self._event.wait(timeout)
