"""Console output for the create and integrate commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.text import Text

from kickstart.console import console
from kickstart.git import GitInitResult, GitStatus
from kickstart.install import InstallResult, InstallStatus

if TYPE_CHECKING:
    from kickstart.integrate import IntegrationResult
    from kickstart.orchestrator import RunReport

DOCS_URL = "https://zendfi.tech/docs"


def show_welcome() -> None:
    console.print("\n[bold magenta]kickstart[/bold magenta] [dim]- payment-ready apps in minutes[/dim]")


def show_install_result(result: InstallResult) -> None:
    """Print one line for the install step, with stderr on failure."""
    if result.succeeded:
        seconds = result.duration_ms / 1000
        console.print(
            f"[green]✓[/green] Installed dependencies with {result.package_manager} "
            f"[dim]({seconds:.1f}s)[/dim]"
        )
    elif result.status is InstallStatus.SKIPPED:
        console.print("[yellow]⚠[/yellow] Skipped dependency installation")
    else:
        label = "timed out" if result.status is InstallStatus.TIMED_OUT else "failed"
        console.print(f"[red]✗[/red] Dependency installation {label}: {result.message}")
        if result.stderr_tail:
            console.print(Text(result.stderr_tail, style="dim"))
        if result.command:
            console.print(
                f"  [dim]Run [cyan]{' '.join(result.command)}[/cyan] "
                "inside the project to retry.[/dim]"
            )


def show_git_result(result: GitInitResult) -> None:
    if result.succeeded:
        console.print("[green]✓[/green] Initialized a git repository")
    elif result.status is GitStatus.SKIPPED:
        console.print(f"[yellow]⚠[/yellow] {result.message}")
    else:
        console.print(f"[yellow]⚠[/yellow] {result.message} (continuing)")


def show_success(report: RunReport) -> None:
    """Print the outcome of a completed run and what to do next."""
    config = report.config
    if not report.ok or config is None or report.scaffold is None:
        return

    if report.install is not None:
        show_install_result(report.install)
    if report.git is not None:
        show_git_result(report.git)

    pm = config.package_manager
    console.print(
        f"\n[bold green]Success![/bold green] Created [cyan]{config.name}[/cyan] "
        f"at [dim]{config.path}[/dim]"
    )

    console.print("\n[bold]Inside that directory, you can run:[/bold]")
    console.print(f"\n  [cyan]{pm.run_command('dev')}[/cyan]")
    console.print("    [dim]Starts the development server[/dim]")
    console.print(f"\n  [cyan]{pm.run_command('build')}[/cyan]")
    console.print("    [dim]Builds the app for production[/dim]")
    if config.template.framework_variant.is_nextjs:
        console.print(f"\n  [cyan]{pm.run_command('start')}[/cyan]")
        console.print("    [dim]Runs the production build[/dim]")

    console.print("\n[bold]We suggest that you begin by typing:[/bold]")
    console.print(f"\n  [cyan]cd {config.path.name}[/cyan]")
    if report.install is not None and not report.install.succeeded:
        console.print(f"  [cyan]{' '.join(pm.install_command())}[/cyan]")
    console.print(f"  [cyan]{pm.run_command('dev')}[/cyan]")

    env_file = report.scaffold.env_file or ".env"
    console.print("\n[yellow]Don't forget to:[/yellow]")
    if not config.api_key:
        console.print(f"  1. Add your ZendFi API credentials to [cyan]{env_file}[/cyan]")
    else:
        console.print(f"  1. Review the credentials in [cyan]{env_file}[/cyan]")
    console.print("  2. Configure your webhook endpoint in the ZendFi dashboard")
    console.print(f"\n[dim]Documentation: {DOCS_URL}[/dim]\n")


def show_integration(result: IntegrationResult) -> None:
    """Print which files were created or skipped by integrate."""
    console.print()
    for path in result.created:
        console.print(f"[green]✓[/green] Created {path}")
    for path in result.skipped:
        console.print(f"[yellow]⚠[/yellow] {path} already exists, skipped")
    if result.install is not None:
        show_install_result(result.install)

    console.print("\n[bold green]ZendFi integration added.[/bold green]")
    console.print(
        f"  Add your API key to [cyan]{result.paths.env_file}[/cyan] and point your "
        f"webhook at [cyan]{result.paths.webhook_path}[/cyan]."
    )
