"""Layered YAML defaults for ``kickstart create``.

Two optional files feed the defaults, the global one first and the project
one on top of it:

    ~/.kickstart/config.yaml
    ./.kickstart/config.yaml

A file that is unreadable, not YAML, or not a mapping is skipped with a
warning; a broken config file never stops a scaffold.
"""

from __future__ import annotations

import logging
from dataclasses import fields
from pathlib import Path

import yaml

from kickstart.config.schema import DEFAULT_CONFIG, KickstartConfig

logger = logging.getLogger(__name__)

CONFIG_DIRNAME = ".kickstart"
CONFIG_FILENAME = "config.yaml"
CONFIG_HEADER = "# kickstart defaults (kickstart config --show prints the merged result)\n"

KNOWN_KEYS: frozenset[str] = frozenset(f.name for f in fields(KickstartConfig))


def get_home_config_path() -> Path:
    return Path.home() / CONFIG_DIRNAME / CONFIG_FILENAME


def get_local_config_path() -> Path:
    return Path.cwd() / CONFIG_DIRNAME / CONFIG_FILENAME


def home_config_exists() -> bool:
    return get_home_config_path().is_file()


def local_config_exists() -> bool:
    return get_local_config_path().is_file()


def config_layers() -> list[tuple[str, Path]]:
    """Config files in the order they are applied (later wins)."""
    return [("global", get_home_config_path()), ("local", get_local_config_path())]


def load_yaml_config(path: Path) -> dict[str, object] | None:
    """Read one config file.

    Returns None when the file is missing or empty, and also when it cannot
    be used; the latter is logged.
    """
    if not path.is_file():
        return None
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        logger.warning("Cannot read %s: %s", path, e)
        return None
    except yaml.YAMLError as e:
        logger.warning("Ignoring %s: not valid YAML (%s)", path, e)
        return None

    if data is None:
        return None
    if not isinstance(data, dict):
        logger.warning("Ignoring %s: expected a mapping, got %s", path, type(data).__name__)
        return None

    unknown = sorted(str(key) for key in data if key not in KNOWN_KEYS)
    if unknown:
        logger.warning("Unknown keys in %s: %s", path, ", ".join(unknown))
    return {str(key): value for key, value in data.items()}


def load_config() -> KickstartConfig:
    """Built-in defaults overlaid with each config layer that is present."""
    config = DEFAULT_CONFIG
    for label, path in config_layers():
        data = load_yaml_config(path)
        if not data:
            continue
        logger.debug("Applying %s config %s", label, path)
        config = config.merge(KickstartConfig.from_dict(data))
    return config


def save_config(config: KickstartConfig, path: Path) -> None:
    """Write the values ``config`` sets (None fields are left out)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    body = yaml.safe_dump(config.to_dict(), default_flow_style=False, sort_keys=False)
    path.write_text(CONFIG_HEADER + body, encoding="utf-8")
    logger.info("Saved config to %s", path)
