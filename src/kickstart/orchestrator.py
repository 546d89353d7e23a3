"""Pipeline orchestrator: resolve, scaffold, install, git."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from kickstart.config.resolver import ConfigResolver
from kickstart.config.schema import CliOptions, KickstartConfig, ProjectConfig
from kickstart.detection import FRAMEWORK_PATHS, EnvironmentDetector
from kickstart.errors import KickstartError
from kickstart.git import GitInitializer, GitInitResult
from kickstart.install import DependencyInstaller, InstallResult
from kickstart.scaffold import ScaffoldGenerator, ScaffoldResult, build_variables

if TYPE_CHECKING:
    from kickstart.config.wizard import Prompter
    from kickstart.templates import TemplateRegistry

logger = logging.getLogger(__name__)


class Stage(Enum):
    """Pipeline states. ABORTED is terminal and only follows a fatal error."""

    RESOLVING = "resolving"
    SCAFFOLDING = "scaffolding"
    INSTALLING = "installing"
    GIT_INIT = "git_init"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class RunReport:
    """Everything that happened during one run."""

    state: Stage = Stage.RESOLVING
    config: ProjectConfig | None = None
    scaffold: ScaffoldResult | None = None
    install: InstallResult | None = None
    git: GitInitResult | None = None
    error: KickstartError | None = None
    history: list[Stage] = field(default_factory=lambda: [Stage.RESOLVING])

    @property
    def exit_code(self) -> int:
        """0 unless a fatal error aborted the run."""
        if self.error is not None:
            return self.error.exit_code
        return 0

    @property
    def ok(self) -> bool:
        return self.state is Stage.DONE

    def advance(self, stage: Stage) -> None:
        logger.debug("Stage %s -> %s", self.state.value, stage.value)
        self.state = stage
        self.history.append(stage)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "state": self.state.value,
            "exit_code": self.exit_code,
        }
        if self.config is not None:
            result["config"] = self.config.to_dict()
        if self.scaffold is not None:
            result["files"] = len(self.scaffold.files)
        if self.install is not None:
            result["install"] = self.install.status.value
        if self.git is not None:
            result["git"] = self.git.status.value
        if self.error is not None:
            result["error"] = str(self.error)
        return result


class Orchestrator:
    """Runs the create pipeline.

    Resolution and scaffolding are fatal on error; install and git are best
    effort and never change the exit code. Install and git share a thread
    pool: with one worker they run in order (install first, so the lock file
    lands in the initial commit), with two they run concurrently.
    """

    def __init__(
        self,
        registry: TemplateRegistry,
        detector: EnvironmentDetector,
        scaffolder: ScaffoldGenerator,
        installer: DependencyInstaller,
        git: GitInitializer,
        prompter: Prompter | None = None,
        defaults: KickstartConfig | None = None,
        parallel: bool = False,
    ) -> None:
        self._resolver = ConfigResolver(registry, detector, prompter, defaults)
        self._scaffolder = scaffolder
        self._installer = installer
        self._git = git
        self._parallel = parallel

    def run(
        self,
        options: CliOptions,
        project_name: str | None = None,
        cwd: Path | None = None,
        destination: Path | None = None,
    ) -> RunReport:
        """Execute the pipeline and report on it. Never raises KickstartError."""
        report = RunReport()

        try:
            config = self._resolver.resolve(
                options, project_name=project_name, cwd=cwd, destination=destination
            )
            report.config = config

            report.advance(Stage.SCAFFOLDING)
            env_file = FRAMEWORK_PATHS[config.template.framework_variant].env_file
            report.scaffold = self._scaffolder.generate(
                config.template,
                config.path,
                build_variables(config),
                overwrite=config.overwrite,
                env_file=env_file,
            )
        except KickstartError as e:
            logger.debug("Aborting in %s: %s", report.state.value, e)
            report.error = e
            report.advance(Stage.ABORTED)
            return report

        logger.info("Scaffolded %d files into %s", len(report.scaffold.files), config.path)

        report.advance(Stage.INSTALLING)
        with ThreadPoolExecutor(max_workers=2 if self._parallel else 1) as pool:
            install_future = pool.submit(
                self._installer.install,
                config.path,
                config.package_manager,
                skip=config.skip_install,
                timeout=config.install_timeout,
            )
            git_future = pool.submit(self._git.init, config.path, skip=config.skip_git)

            # Signals only reach the main thread; stop the child before the
            # pool waits on its worker.
            try:
                report.install = install_future.result()
                report.advance(Stage.GIT_INIT)
                report.git = git_future.result()
            except BaseException:
                logger.debug("Interrupted in %s, cancelling install", report.state.value)
                self._installer.cancel()
                pool.shutdown(wait=True, cancel_futures=True)
                raise

        report.advance(Stage.DONE)
        return report
