"""Path expansion utilities."""

from pathlib import Path
from typing import Union


def expand_path(path: Union[str, Path]) -> Path:
    """Expand ~ in a path and make it absolute."""
    return Path(path).expanduser().resolve()


def ensure_parent_exists(path: Union[str, Path]) -> Path:
    """Ensure the parent directory of a path exists, creating it if necessary."""
    path = expand_path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """Get the sdunit configuration directory (~/.sdunit)."""
    return Path("~/.sdunit").expanduser()


def get_config_file() -> Path:
    """Get the path to the default desired-state file."""
    return get_config_dir() / "config.json"


def get_log_file() -> Path:
    """Get the default log file path."""
    return get_config_dir() / "sdunit.log"
