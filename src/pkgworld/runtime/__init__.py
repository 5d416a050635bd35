"""Runtime configuration: home directory and world file resolution."""

from .home import (
    CONFIG_FILENAME,
    WORLD_FILENAME,
    ConfigError,
    get_pkgworld_home,
    load_config,
    resolve_world_file,
)

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "WORLD_FILENAME",
    "get_pkgworld_home",
    "load_config",
    "resolve_world_file",
]
