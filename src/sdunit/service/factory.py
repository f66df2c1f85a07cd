"""Factory for the platform unit manager."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Optional

from sdunit.service.executor import CommandExecutor, SubprocessExecutor

if TYPE_CHECKING:
    from sdunit.core.config import SystemdSettings
    from sdunit.service.linux import SystemdUnitManager


def get_unit_manager(
    settings: Optional[SystemdSettings] = None,
    executor: Optional[CommandExecutor] = None,
) -> SystemdUnitManager:
    """
    Get a unit manager for the current platform.

    Raises:
        NotImplementedError: If the platform has no systemd.
    """
    if not is_supported():
        raise NotImplementedError(
            f"Unit management requires systemd; not supported on platform: {sys.platform}"
        )

    from sdunit.core.config import SystemdSettings
    from sdunit.service.linux import SystemdUnitManager

    settings = settings or SystemdSettings()
    return SystemdUnitManager(
        executor=executor or SubprocessExecutor(timeout=settings.command_timeout),
        system_unit_dir=settings.system_unit_dir,
        user_unit_dir=settings.user_unit_dir,
        daemon_reload=settings.daemon_reload,
    )


def is_supported() -> bool:
    """Check if unit management is supported on this platform."""
    return sys.platform.startswith("linux")
