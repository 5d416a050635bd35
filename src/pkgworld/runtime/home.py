"""Runtime home directory and world file location.

Provides the canonical functions for locating:
- The user-global ~/.pkgworld/ directory (cross-platform)
- The optional ~/.pkgworld/config.yaml settings file
- The world file itself
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.yaml"
WORLD_FILENAME = "world"


class ConfigError(RuntimeError):
    """Raised when config.yaml cannot be parsed or validated."""


def _is_windows() -> bool:
    """Return True when running on Windows."""
    return os.name == "nt"


def get_pkgworld_home() -> Path:
    """Return the path to the user-global ~/.pkgworld/ directory.

    Resolution order:
    1. PKGWORLD_HOME environment variable (all platforms)
    2. ~/.pkgworld/ on macOS/Linux (Path.home() / ".pkgworld")
    3. %LOCALAPPDATA%\\pkgworld\\ on Windows (via platformdirs)

    Returns:
        Path: Absolute path to the global runtime directory.
    """
    if env_home := os.environ.get("PKGWORLD_HOME"):
        return Path(env_home)

    if _is_windows():
        from platformdirs import user_data_dir

        return Path(user_data_dir("pkgworld"))

    return Path.home() / ".pkgworld"


def load_config(home: Path) -> dict[str, Any]:
    """Load settings from ``<home>/config.yaml``.

    Returns an empty dict when the file does not exist.

    Raises:
        ConfigError: If the file is not valid YAML or not a mapping.
    """
    config_file = home / CONFIG_FILENAME
    if not config_file.exists():
        return {}

    yaml = YAML(typ="safe", pure=True)
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.load(f)
    except YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_file}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid {config_file}: expected a mapping at top level")
    return data


def resolve_world_file(explicit: Path | None = None) -> Path:
    """Return the world file to operate on.

    Resolution order:
    1. ``explicit`` (e.g. the ``--world-file`` CLI option)
    2. PKGWORLD_WORLD_FILE environment variable
    3. ``world_file`` key in config.yaml (relative to the home directory)
    4. ``<home>/world``
    """
    if explicit is not None:
        return explicit

    if env_file := os.environ.get("PKGWORLD_WORLD_FILE"):
        return Path(env_file)

    home = get_pkgworld_home()
    configured = load_config(home).get("world_file")
    if configured is not None:
        if not isinstance(configured, str) or not configured.strip():
            raise ConfigError("Invalid world_file in config.yaml: expected a path string")
        path = Path(configured).expanduser()
        if not path.is_absolute():
            path = home / path
        logger.debug(f"Using world file from config.yaml: {path}")
        return path

    return home / WORLD_FILENAME
