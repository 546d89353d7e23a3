"""Configuration loading, resolution and preflight checks."""

from kickstart.config.loader import (
    home_config_exists,
    load_config,
    local_config_exists,
    save_config,
)
from kickstart.config.resolver import ConfigResolver
from kickstart.config.schema import (
    DEFAULT_CONFIG,
    CliOptions,
    KickstartConfig,
    ProjectConfig,
)

__all__ = [
    "CliOptions",
    "ConfigResolver",
    "DEFAULT_CONFIG",
    "KickstartConfig",
    "ProjectConfig",
    "home_config_exists",
    "load_config",
    "local_config_exists",
    "save_config",
]
