"""Interactive prompts for project creation and the config wizard."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.table import Table

from kickstart.config.loader import (
    config_layers,
    get_home_config_path,
    get_local_config_path,
    load_config,
    load_yaml_config,
    save_config,
)
from kickstart.config.naming import validate_project_name
from kickstart.config.schema import DEFAULT_CONFIG, ENVIRONMENTS, Environment, KickstartConfig
from kickstart.console import console
from kickstart.package_managers import PACKAGE_MANAGER_NAMES

if TYPE_CHECKING:
    from kickstart.config.schema import ProjectConfig
    from kickstart.templates import TemplateConfig, TemplateRegistry


class Prompter:
    """Asks the user for the values the command line left out."""

    def project_name(self, default: str) -> str:
        """Prompt until a valid project name is entered."""
        while True:
            name: str = click.prompt("What is your project named?", default=default)
            problems = validate_project_name(name)
            if not problems:
                return name
            console.print(f"[red]{problems[0]}[/red]")

    def select_template(
        self, registry: TemplateRegistry, default: str | None = None
    ) -> TemplateConfig:
        """Prompt for a template by number or identifier."""
        templates = registry.list()
        console.print("\n[bold]Which template would you like to use?[/bold]")
        for i, template in enumerate(templates, 1):
            console.print(
                f"  {i}. [cyan]{template.id}[/cyan] - {template.name} "
                f"[dim]({template.description})[/dim]"
            )

        default_choice = "1"
        if default is not None and default in registry:
            default_choice = str(registry.ids().index(default) + 1)

        while True:
            choice: str = click.prompt("Template", default=default_choice)
            choice = choice.strip()
            if choice.isdigit() and 1 <= int(choice) <= len(templates):
                return templates[int(choice) - 1]
            if choice in registry:
                return registry.get(choice)
            console.print(f"[red]Unknown template: {choice}[/red]")

    def confirm_overwrite(self, path: Path) -> bool:
        """Ask whether a non-empty destination may be replaced."""
        return click.confirm(
            f"Directory {path.name} already exists and is not empty. Overwrite?",
            default=False,
        )

    def confirm_config(self, config: ProjectConfig) -> bool:
        """Show the resolved configuration and ask to continue."""
        show_project_config(config)
        return click.confirm("\nContinue with this configuration?", default=True)


def show_project_config(config: ProjectConfig) -> None:
    """Print a resolved project configuration."""
    console.print("\n[bold]Project Configuration:[/bold]")
    console.print(f"  [dim]Name:[/dim]            {config.name}")
    console.print(f"  [dim]Template:[/dim]        {config.template.name}")
    console.print(f"  [dim]Framework:[/dim]       {config.template.framework}")
    console.print(f"  [dim]Environment:[/dim]     {config.environment}")
    console.print(f"  [dim]Package manager:[/dim] {config.package_manager.name}")
    console.print(f"  [dim]Path:[/dim]            {config.path}")
    if config.api_key:
        console.print("  [dim]API key:[/dim]         [green]set[/green]")
    else:
        console.print(
            "  [dim]API key:[/dim]         "
            "[yellow]not set (add it to the env file later)[/yellow]"
        )


def run_config_wizard(local: bool = False) -> KickstartConfig:
    """Run interactive wizard to create the global or local defaults file.

    Returns the created KickstartConfig.
    """
    scope = "local" if local else "global"
    console.print(f"\n[bold]Let's create your {scope} defaults.[/bold]")
    console.print("[dim]Leave a value blank to keep it unset.[/dim]\n")

    config = KickstartConfig()

    template: str = click.prompt("Default template", default="", show_default=False)
    config.template = template or None

    environment: str = click.prompt(
        "Default environment",
        type=click.Choice(ENVIRONMENTS),
        default="development",
    )
    config.environment = _as_environment(environment)

    pm: str = click.prompt(
        "Preferred package manager (blank to auto-detect)",
        default="",
        show_default=False,
    )
    config.package_manager = pm.lower() if pm.lower() in PACKAGE_MANAGER_NAMES else None

    config.skip_git = not click.confirm("Initialize a git repository?", default=True)
    config.skip_install = not click.confirm("Install dependencies?", default=True)
    timeout: int = click.prompt("Install timeout (seconds)", default=600, type=int)
    config.install_timeout = timeout

    console.print("\n[bold]Review Configuration:[/bold]")
    for key, value in config.to_dict().items():
        console.print(f"  {key}: {value}")

    if click.confirm("\nSave configuration?", default=True):
        path = get_local_config_path() if local else get_home_config_path()
        save_config(config, path)
        console.print(f"\n[green]Configuration saved to {path}[/green]")
    else:
        console.print("\n[yellow]Configuration not saved.[/yellow]")

    return config


def _as_environment(value: str) -> Environment:
    return "production" if value == "production" else "development"


def config_sources() -> dict[str, str]:
    """Map each configured key to the layer that last set it."""
    sources = {key: "default" for key in DEFAULT_CONFIG.to_dict()}
    for label, path in config_layers():
        data = load_yaml_config(path)
        if data:
            for key in KickstartConfig.from_dict(data).to_dict():
                sources[key] = label
    return sources


def show_current_config() -> None:
    """Display the effective configuration and where each value came from."""
    config = load_config()
    sources = config_sources()

    table = Table(title="Effective configuration", show_header=True)
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    table.add_column("Source", style="dim")
    for key, value in config.to_dict().items():
        table.add_row(key, str(value), sources.get(key, "default"))
    console.print()
    console.print(table)

    for label, path in config_layers():
        state = "[green]found[/green]" if path.is_file() else "[dim]not found[/dim]"
        console.print(f"  {label}: {path} {state}")
