"""Debounced watcher for the desired-state file."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Callable, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from sdunit.utils.logging import get_logger


class ConfigFileHandler(FileSystemEventHandler):
    """
    Fires a callback once the config file has been quiet for a while.

    Editors often write a file several times (or replace it via rename)
    on a single save, so events are coalesced with a timer.
    """

    def __init__(
        self,
        config_path: Path,
        callback: Callable[[], None],
        debounce_seconds: float = 2.0,
    ) -> None:
        super().__init__()
        self._config_path = config_path
        self._callback = callback
        self.debounce_seconds = debounce_seconds
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()
        self.logger = get_logger("sdunit.watcher")

    def _is_config_event(self, event: FileSystemEvent) -> bool:
        paths = [event.src_path, getattr(event, "dest_path", "")]
        return any(p and Path(p).name == self._config_path.name for p in paths)

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type in ("opened", "closed_no_write"):
            return
        if not self._is_config_event(event):
            return

        self.logger.debug(f"Config event: {event.event_type} {event.src_path}")
        with self._lock:
            if self._timer:
                self._timer.cancel()
            self._timer = threading.Timer(self.debounce_seconds, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def _fire(self) -> None:
        with self._lock:
            self._timer = None
        try:
            self._callback()
        except Exception as e:
            # keep watching; the next save gets another chance
            self.logger.error(f"Reconverge failed: {e}", exc_info=True)

    def cancel(self) -> None:
        """Cancel any pending timer."""
        with self._lock:
            if self._timer:
                self._timer.cancel()
                self._timer = None


class ConfigWatcher:
    """
    Watches the config file and calls back after it changes.

    The parent directory is watched so that atomic replace-by-rename saves
    are seen.

    Example:
        watcher = ConfigWatcher(config.path, reconverge, debounce_seconds=2)
        with watcher:
            shutdown.wait_for_shutdown()
    """

    def __init__(
        self,
        config_path: Path,
        callback: Callable[[], None],
        debounce_seconds: float = 2.0,
    ) -> None:
        self._config_path = Path(config_path).expanduser().resolve()
        self._handler = ConfigFileHandler(self._config_path, callback, debounce_seconds)
        self._observer: Optional[Observer] = None
        self.logger = get_logger("sdunit.watcher")

    def start(self) -> ConfigWatcher:
        """Start watching (returns self for chaining)."""
        if self._observer is not None:
            return self

        self._observer = Observer()
        self._observer.schedule(self._handler, str(self._config_path.parent), recursive=False)
        self._observer.start()
        self.logger.info(f"Watching: {self._config_path}")
        return self

    def stop(self) -> None:
        if self._observer is None:
            return

        self._handler.cancel()
        self._observer.stop()
        self._observer.join(timeout=5)
        self._observer = None
        self.logger.info("Config watcher stopped")

    @property
    def is_running(self) -> bool:
        return self._observer is not None

    def __enter__(self) -> ConfigWatcher:
        return self.start()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()
