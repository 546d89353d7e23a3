"""Command-line interface for kickstart."""

import logging
import os
from pathlib import Path
from typing import NoReturn

import click
from rich.logging import RichHandler
from rich.markup import escape

from kickstart import __version__
from kickstart.config import CliOptions, load_config
from kickstart.config.loader import (
    get_home_config_path,
    get_local_config_path,
    home_config_exists,
    local_config_exists,
)
from kickstart.config.preflight import run_all_checks
from kickstart.config.schema import ENVIRONMENTS
from kickstart.config.wizard import Prompter, run_config_wizard, show_current_config
from kickstart.console import console, err_console
from kickstart.detection import EnvironmentDetector, get_framework_paths
from kickstart.errors import KickstartError
from kickstart.git import GitInitializer
from kickstart.install import DependencyInstaller
from kickstart.integrate import Integrator
from kickstart.messages import show_integration, show_success, show_welcome
from kickstart.orchestrator import Orchestrator
from kickstart.package_managers import PACKAGE_MANAGER_NAMES
from kickstart.scaffold import ScaffoldGenerator
from kickstart.templates import default_registry

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "KICKSTART_LOG_LEVEL"


def configure_logging(verbosity: int = 0) -> None:
    """Route library logging through rich on stderr.

    ``-v`` shows INFO, ``-vv`` DEBUG. Without flags the level comes from
    KICKSTART_LOG_LEVEL, defaulting to WARNING.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        name = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
        level = logging.getLevelNamesMapping().get(name, logging.WARNING)

    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, RichHandler):
            root.removeHandler(handler)
    root.addHandler(
        RichHandler(console=err_console, show_time=False, show_path=False)
    )
    root.setLevel(level)


def _fail(error: KickstartError) -> NoReturn:
    err_console.print(f"[red]Error:[/red] {escape(str(error))}")
    raise SystemExit(error.exit_code)


def version_callback(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    """Print version and exit."""
    if not value or ctx.resilient_parsing:
        return
    console.print(f"kickstart [bold cyan]{__version__}[/bold cyan]")
    ctx.exit()


@click.group(invoke_without_command=True)
@click.option(
    "--version",
    is_flag=True,
    callback=version_callback,
    expose_value=False,
    is_eager=True,
    help="Show version and exit.",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Show log output (-v info, -vv debug).",
)
@click.pass_context
def main(ctx: click.Context, verbose: int) -> None:
    """Kickstart - scaffold payment-ready JavaScript projects."""
    configure_logging(verbose)

    if ctx.invoked_subcommand is None:
        console.print("[bold]kickstart[/bold] - project bootstrapping for ZendFi apps")
        console.print("\nRun [cyan]kickstart --help[/cyan] for available commands.")


@main.command()
@click.argument("name", required=False)
@click.option("--template", "-t", help="Template to use (see 'kickstart templates').")
@click.option(
    "--env",
    "environment",
    type=click.Choice(ENVIRONMENTS),
    help="Target environment.",
)
@click.option("--yes", "-y", is_flag=True, help="Skip prompts and use defaults.")
@click.option("--skip-install", is_flag=True, help="Don't install dependencies.")
@click.option("--skip-git", is_flag=True, help="Don't initialize a git repository.")
@click.option(
    "--package-manager",
    type=click.Choice(PACKAGE_MANAGER_NAMES),
    help="Package manager to use (detected by default).",
)
@click.option(
    "--overwrite",
    is_flag=True,
    help="Replace the target directory if it is not empty.",
)
@click.option(
    "--timeout",
    "install_timeout",
    type=int,
    help="Install timeout in seconds (0 waits forever).",
)
@click.option(
    "--parallel",
    is_flag=True,
    help="Install dependencies and initialize git concurrently.",
)
@click.option("--api-key", help="ZendFi API key to write to the env file.")
@click.option("--webhook-secret", help="ZendFi webhook secret to write to the env file.")
@click.option(
    "--dir",
    "directory",
    type=click.Path(path_type=Path, file_okay=False),
    help="Target directory (defaults to ./<name>).",
)
def create(
    name: str | None,
    template: str | None,
    environment: str | None,
    yes: bool,
    skip_install: bool,
    skip_git: bool,
    package_manager: str | None,
    overwrite: bool,
    install_timeout: int | None,
    parallel: bool,
    api_key: str | None,
    webhook_secret: str | None,
    directory: Path | None,
) -> None:
    """Create a new project from a template."""
    defaults = load_config()

    options = CliOptions(
        template=template,
        environment=environment,
        yes=yes,
        skip_install=True if skip_install else None,
        skip_git=True if skip_git else None,
        package_manager=package_manager,
        overwrite=overwrite,
        install_timeout=install_timeout,
        api_key=api_key,
        webhook_secret=webhook_secret,
    )

    orchestrator = Orchestrator(
        registry=default_registry(),
        detector=EnvironmentDetector(),
        scaffolder=ScaffoldGenerator(),
        installer=DependencyInstaller(),
        git=GitInitializer(),
        prompter=None if yes else Prompter(),
        defaults=defaults,
        parallel=parallel or bool(defaults.parallel),
    )

    if not yes:
        show_welcome()

    report = orchestrator.run(
        options, project_name=name, cwd=Path.cwd(), destination=directory
    )
    logger.debug("Run report: %s", report.to_dict())
    if report.error is not None:
        _fail(report.error)

    show_success(report)


@main.command()
@click.option("--verbose", "-v", is_flag=True, help="Show template details.")
def templates(verbose: bool) -> None:
    """List available templates."""
    registry = default_registry()

    console.print("[bold]Available Templates:[/bold]\n")
    for template in registry:
        console.print(f"  [cyan]{template.id}[/cyan] - {template.name}")
        if verbose:
            console.print(f"    {template.description}")
            console.print(f"    [dim]Framework: {template.framework}[/dim]")
            console.print(f"    [dim]Features: {', '.join(template.features)}[/dim]")
            if template.requires_auth:
                console.print("    [dim]Requires authentication setup[/dim]")
            console.print()


@main.command()
@click.argument(
    "path",
    required=False,
    type=click.Path(path_type=Path, file_okay=False, exists=True),
)
@click.option(
    "--require-manifest",
    is_flag=True,
    help="Fail if the directory has no package.json.",
)
def detect(path: Path | None, require_manifest: bool) -> None:
    """Detect the framework and toolchain of an existing project."""
    path = path or Path.cwd()
    try:
        info = EnvironmentDetector().detect(path, require_manifest=require_manifest)
    except KickstartError as e:
        _fail(e)

    paths = get_framework_paths(info.framework, info.has_typescript)
    console.print(f"[bold]Project:[/bold] {path}")
    console.print(f"  [dim]Framework:[/dim]       {info.name}")
    if info.version:
        console.print(f"  [dim]Version:[/dim]         {info.version}")
    console.print(f"  [dim]TypeScript:[/dim]      {'yes' if info.has_typescript else 'no'}")
    console.print(f"  [dim]Package manager:[/dim] {info.package_manager.name}")
    console.print(f"  [dim]Env file:[/dim]        {paths.env_file}")


@main.command()
@click.argument(
    "path",
    required=False,
    type=click.Path(path_type=Path, file_okay=False, exists=True),
)
@click.option("--yes", "-y", is_flag=True, help="Don't ask for confirmation.")
@click.option("--skip-install", is_flag=True, help="Don't install @zendfi/sdk.")
def integrate(path: Path | None, yes: bool, skip_install: bool) -> None:
    """Add ZendFi to an existing project."""
    path = (path or Path.cwd()).resolve()
    integrator = Integrator(EnvironmentDetector(), DependencyInstaller())

    try:
        info = integrator.detect(path)
    except KickstartError as e:
        _fail(e)

    console.print(
        f"[bold]Detected:[/bold] {info.name} "
        f"[dim]({info.package_manager.name}"
        f"{', TypeScript' if info.has_typescript else ''})[/dim]"
    )
    if not yes and not click.confirm("Continue with ZendFi setup?", default=True):
        console.print("[yellow]Setup cancelled.[/yellow]")
        return

    result = integrator.integrate(path, skip_install=skip_install, info=info)
    show_integration(result)


@main.command()
def preflight() -> None:
    """Check that a JavaScript runtime, package managers and git are available."""
    if not run_all_checks():
        raise SystemExit(1)


@main.command()
@click.option(
    "--global",
    "-g",
    "global_config",
    is_flag=True,
    help="Create or update global config (~/.kickstart/config.yaml).",
)
@click.option(
    "--local",
    "-l",
    "local_config",
    is_flag=True,
    help="Create or update local config (./.kickstart/config.yaml).",
)
@click.option(
    "--show",
    is_flag=True,
    help="Show current effective configuration and exit.",
)
def config(global_config: bool, local_config: bool, show: bool) -> None:
    """Show or edit default options for 'kickstart create'.

    Config locations:
      - Global: ~/.kickstart/config.yaml (user defaults)
      - Local: ./.kickstart/config.yaml (project overrides)
    """
    if show or not (global_config or local_config):
        show_current_config()
        if not show:
            console.print("\nUse [cyan]--global[/cyan] or [cyan]--local[/cyan] to edit.")
        return

    local = local_config and not global_config
    exists = local_config_exists() if local else home_config_exists()
    if exists:
        path = get_local_config_path() if local else get_home_config_path()
        console.print(f"[yellow]Config already exists at {path}[/yellow]")
        if not click.confirm("Overwrite with new configuration?", default=False):
            console.print("\nNo changes made.")
            return
    run_config_wizard(local=local)
