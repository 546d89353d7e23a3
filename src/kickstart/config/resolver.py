"""Resolve raw CLI intent into an immutable ProjectConfig.

Each value is taken from the first layer that provides it:

1. Explicit CLI option
2. Interactive prompt answer (only without ``--yes`` and with a prompter)
3. User config file (~/.kickstart, ./.kickstart)
4. Detected environment value
5. Built-in default

Everything downstream reads the resolved config and never asks again.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from kickstart.config.naming import directory_name, validate_project_name
from kickstart.config.schema import (
    DEFAULT_CONFIG,
    DEFAULT_INSTALL_TIMEOUT,
    ENVIRONMENTS,
    CliOptions,
    Environment,
    KickstartConfig,
    ProjectConfig,
)
from kickstart.errors import (
    AbortedByUserError,
    InvalidEnvironmentError,
    InvalidProjectNameError,
    UnknownPackageManagerError,
)
from kickstart.package_managers import (
    PACKAGE_MANAGER_NAMES,
    PackageManager,
    get_package_manager_by_name,
)
from kickstart.scaffold.generator import is_empty_dir

if TYPE_CHECKING:
    from kickstart.config.wizard import Prompter
    from kickstart.detection import EnvironmentDetector
    from kickstart.templates import TemplateConfig, TemplateRegistry

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_NAME = "my-app"
DEFAULT_TEMPLATE_ID = "nextjs-ecommerce"
DEFAULT_ENVIRONMENT: Environment = "development"


class ConfigResolver:
    """Merges options, prompts, user defaults and detection into a plan."""

    def __init__(
        self,
        registry: TemplateRegistry,
        detector: EnvironmentDetector,
        prompter: Prompter | None = None,
        defaults: KickstartConfig | None = None,
    ) -> None:
        self._registry = registry
        self._detector = detector
        self._prompter = prompter
        self._defaults = defaults if defaults is not None else DEFAULT_CONFIG

    def resolve(
        self,
        options: CliOptions,
        project_name: str | None = None,
        cwd: Path | None = None,
        destination: Path | None = None,
    ) -> ProjectConfig:
        """Build the ProjectConfig for one run.

        Args:
            options: Raw CLI options.
            project_name: Project name argument, if given.
            cwd: Invoking directory. Package-manager detection runs here and
                the project directory is created under it.
            destination: Explicit target directory (overrides ``cwd/<name>``).

        Raises:
            InvalidTemplateError: If the template is not registered.
            InvalidProjectNameError: If the name is empty or unsafe.
            AbortedByUserError: If the user declines the final confirmation.
        """
        cwd = Path(os.path.abspath(cwd or Path.cwd()))
        interactive = not options.yes and self._prompter is not None

        name = self._resolve_name(project_name, interactive)
        template = self._resolve_template(options, interactive)
        environment = self._resolve_environment(options)
        package_manager = self._resolve_package_manager(options, cwd)

        if destination is not None:
            path = Path(os.path.abspath(cwd / destination.expanduser()))
        else:
            path = cwd / directory_name(name)

        overwrite = options.overwrite
        if (
            interactive
            and not overwrite
            and path.exists()
            and not is_empty_dir(path)
            and self._prompter is not None
        ):
            overwrite = self._prompter.confirm_overwrite(path)

        config = ProjectConfig(
            name=name,
            path=path,
            template=template,
            environment=environment,
            package_manager=package_manager,
            skip_install=_first_bool(
                options.skip_install, self._defaults.skip_install, False
            ),
            skip_git=_first_bool(options.skip_git, self._defaults.skip_git, False),
            overwrite=overwrite,
            install_timeout=self._resolve_timeout(options),
            api_key=options.api_key or None,
            webhook_secret=options.webhook_secret or None,
        )
        logger.debug("Resolved project config: %s", config.to_dict())

        if interactive and self._prompter is not None:
            if not self._prompter.confirm_config(config):
                raise AbortedByUserError()
        return config

    def _resolve_name(self, project_name: str | None, interactive: bool) -> str:
        if project_name is not None:
            name = project_name
        elif interactive and self._prompter is not None:
            name = self._prompter.project_name(DEFAULT_PROJECT_NAME)
        else:
            name = DEFAULT_PROJECT_NAME

        problems = validate_project_name(name)
        if problems:
            raise InvalidProjectNameError(name, problems)
        return name

    def _resolve_template(self, options: CliOptions, interactive: bool) -> TemplateConfig:
        if options.template is not None:
            return self._registry.get(options.template)
        if interactive and self._prompter is not None:
            return self._prompter.select_template(
                self._registry, default=self._defaults.template
            )
        return self._registry.get(self._defaults.template or DEFAULT_TEMPLATE_ID)

    def _resolve_environment(self, options: CliOptions) -> Environment:
        value = options.environment or self._defaults.environment or DEFAULT_ENVIRONMENT
        if value not in ENVIRONMENTS:
            raise InvalidEnvironmentError(value, ENVIRONMENTS)
        return "production" if value == "production" else "development"

    def _resolve_package_manager(self, options: CliOptions, cwd: Path) -> PackageManager:
        name = options.package_manager or self._defaults.package_manager
        if name:
            pm = get_package_manager_by_name(name)
            if pm is None:
                raise UnknownPackageManagerError(name, PACKAGE_MANAGER_NAMES)
            return pm
        return self._detector.detect_package_manager(cwd)

    def _resolve_timeout(self, options: CliOptions) -> int | None:
        timeout = options.install_timeout
        if timeout is None:
            timeout = self._defaults.install_timeout
        if timeout is None:
            return DEFAULT_INSTALL_TIMEOUT
        # Zero or negative means "wait forever".
        return timeout if timeout > 0 else None


def _first_bool(*values: bool | None) -> bool:
    for value in values:
        if value is not None:
            return value
    return False
