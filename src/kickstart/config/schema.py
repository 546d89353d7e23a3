"""Configuration schema: user defaults, raw CLI intent and the resolved plan."""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Literal, cast

from kickstart.package_managers import PACKAGE_MANAGER_NAMES, PackageManager
from kickstart.templates.base import TemplateConfig

Environment = Literal["development", "production"]
ENVIRONMENTS: tuple[str, ...] = ("development", "production")

DEFAULT_INSTALL_TIMEOUT = 600  # seconds


@dataclass
class KickstartConfig:
    """User defaults loaded from config.yaml.

    None values indicate "not set" and fall through to the next layer.
    """

    template: str | None = None
    environment: Environment | None = None
    package_manager: str | None = None
    skip_install: bool | None = None
    skip_git: bool | None = None
    install_timeout: int | None = None
    parallel: bool | None = None

    def merge(self, other: KickstartConfig) -> KickstartConfig:
        """Merge another config into this one.

        Values from `other` take precedence when they are not None.
        Returns a new KickstartConfig instance.
        """
        values = {}
        for f in fields(self):
            theirs = getattr(other, f.name)
            values[f.name] = theirs if theirs is not None else getattr(self, f.name)
        return KickstartConfig(**values)

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary, excluding None values."""
        result: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                result[f.name] = value
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> KickstartConfig:
        """Create a KickstartConfig from a dictionary.

        Unknown keys and values of the wrong shape are ignored.
        """
        template_raw = data.get("template")
        template = str(template_raw) if template_raw else None

        environment: Environment | None = None
        if data.get("environment") in ENVIRONMENTS:
            environment = cast(Environment, data["environment"])

        package_manager: str | None = None
        pm_raw = data.get("package_manager")
        if isinstance(pm_raw, str) and pm_raw.lower() in PACKAGE_MANAGER_NAMES:
            package_manager = pm_raw.lower()

        skip_install_raw = data.get("skip_install")
        skip_install = bool(skip_install_raw) if skip_install_raw is not None else None
        skip_git_raw = data.get("skip_git")
        skip_git = bool(skip_git_raw) if skip_git_raw is not None else None
        parallel_raw = data.get("parallel")
        parallel = bool(parallel_raw) if parallel_raw is not None else None

        install_timeout: int | None = None
        timeout_raw = data.get("install_timeout")
        if timeout_raw is not None:
            try:
                install_timeout = int(timeout_raw)
            except (TypeError, ValueError):
                install_timeout = None

        return cls(
            template=template,
            environment=environment,
            package_manager=package_manager,
            skip_install=skip_install,
            skip_git=skip_git,
            install_timeout=install_timeout,
            parallel=parallel,
        )


# Default configuration values (used when not specified anywhere)
DEFAULT_CONFIG = KickstartConfig(
    environment="development",
    skip_install=False,
    skip_git=False,
    install_timeout=DEFAULT_INSTALL_TIMEOUT,
    parallel=False,
)


@dataclass(frozen=True)
class CliOptions:
    """Raw user intent from the command line. Every field is optional."""

    template: str | None = None
    environment: str | None = None
    yes: bool = False
    skip_install: bool | None = None
    skip_git: bool | None = None
    package_manager: str | None = None
    overwrite: bool = False
    install_timeout: int | None = None
    api_key: str | None = None
    webhook_secret: str | None = None


@dataclass(frozen=True)
class ProjectConfig:
    """Fully resolved generation plan.

    Produced once per run by the resolver; every later stage reads from it
    and nothing writes to it.
    """

    name: str
    path: Path  # absolute
    template: TemplateConfig
    environment: Environment
    package_manager: PackageManager
    skip_install: bool = False
    skip_git: bool = False
    overwrite: bool = False
    install_timeout: int | None = DEFAULT_INSTALL_TIMEOUT
    api_key: str | None = None
    webhook_secret: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Summarize for display. Credentials are reported as set/unset only."""
        return {
            "name": self.name,
            "path": str(self.path),
            "template": self.template.id,
            "framework": self.template.framework,
            "environment": self.environment,
            "package_manager": self.package_manager.name,
            "api_key": "set" if self.api_key else "not set",
        }
