"""Tests for the config file watcher."""

import threading
from pathlib import Path
from unittest.mock import MagicMock, patch

from watchdog.events import FileModifiedEvent, FileMovedEvent

from sdunit.cli.commands.watch import Reconverger
from sdunit.core.watcher import ConfigFileHandler, ConfigWatcher


class TestConfigFileHandler:

    def test_debounces_config_events(self):
        fired = threading.Event()
        calls = []

        def callback():
            calls.append(1)
            fired.set()

        handler = ConfigFileHandler(Path("/etc/sdunit/config.json"), callback, debounce_seconds=0.05)
        for _ in range(3):
            handler.on_any_event(FileModifiedEvent("/etc/sdunit/config.json"))

        assert fired.wait(2)
        handler.cancel()
        assert calls == [1]

    def test_ignores_other_files(self):
        callback = MagicMock()
        handler = ConfigFileHandler(Path("/etc/sdunit/config.json"), callback, debounce_seconds=0.01)
        handler.on_any_event(FileModifiedEvent("/etc/sdunit/other.json"))
        assert handler._timer is None

    def test_rename_into_place(self):
        callback = MagicMock()
        handler = ConfigFileHandler(Path("/etc/sdunit/config.json"), callback, debounce_seconds=10)
        handler.on_any_event(FileMovedEvent("/etc/sdunit/.config.json.swp", "/etc/sdunit/config.json"))
        assert handler._timer is not None
        handler.cancel()

    def test_callback_errors_are_logged(self):
        handler = ConfigFileHandler(Path("config.json"), MagicMock(side_effect=RuntimeError("boom")))
        handler._fire()


class TestConfigWatcher:

    def test_start_stop(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{}")
        watcher = ConfigWatcher(path, MagicMock(), debounce_seconds=0.01)

        with watcher:
            assert watcher.is_running
        assert not watcher.is_running


class TestReconverger:

    def test_rejected_config_keeps_watching(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text('{"units": [{"name": "x"}]}')
        assert Reconverger(path)() is False

    def test_reconverges_from_disk(self, tmp_path, manager, executor):
        path = tmp_path / "config.json"
        path.write_text('{"units": [{"name": "web", "conf_type": "service", "actions": ["restart"]}]}')
        with patch("sdunit.cli.commands.watch.get_unit_manager", return_value=manager):
            assert Reconverger(path)() is True
        assert executor.commands == ["systemctl restart web.service"]
