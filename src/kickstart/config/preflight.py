"""Preflight checks to validate the host toolchain."""

import shutil
from collections.abc import Callable
from dataclasses import dataclass

from kickstart.console import console
from kickstart.package_managers import PACKAGE_MANAGERS, get_available_package_managers


def check_node() -> bool:
    """Check that a JavaScript runtime is on PATH."""
    for runtime in ("node", "bun"):
        if shutil.which(runtime) is not None:
            console.print(f"[green]✓[/green] JavaScript runtime: [cyan]{runtime}[/cyan]")
            return True
    console.print("[red]✗[/red] No JavaScript runtime found (install Node.js or Bun)")
    return False


def check_package_managers() -> bool:
    """Check for installed package managers."""
    console.print("\n[bold]Package Managers:[/bold]")

    for pm in PACKAGE_MANAGERS:
        if pm.is_installed():
            console.print(f"  [green]✓[/green] {pm.name}")
        else:
            console.print(f"  [dim]✗[/dim] {pm.name} - [dim]{pm.install_info}[/dim]")

    available = get_available_package_managers()
    if not available:
        console.print("\n[yellow]⚠[/yellow] No package managers detected.")
        console.print("[dim]Use --skip-install, or install npm.[/dim]")
        return False

    console.print(f"\n[green]✓[/green] {len(available)} package manager(s) available")
    return True


def check_git() -> bool:
    """Check that git is available for repository initialization."""
    if shutil.which("git") is None:
        console.print("\n[yellow]⚠[/yellow] git not found; use --skip-git")
        return False
    console.print("\n[green]✓[/green] git is installed")
    return True


@dataclass(frozen=True)
class Check:
    """A host check. Optional checks only warn; ``workaround`` names the flag."""

    name: str
    run: Callable[[], bool]
    required: bool = True
    workaround: str | None = None


CHECKS: tuple[Check, ...] = (
    Check("JavaScript runtime", check_node),
    Check("package manager", check_package_managers, workaround="--skip-install"),
    Check("git", check_git, required=False, workaround="--skip-git"),
)


def run_all_checks() -> bool:
    """Run every check; True unless a required one failed."""
    console.print("[bold]Running preflight checks...[/bold]\n")

    failed = [check for check in CHECKS if not check.run()]
    blocking = [check for check in failed if check.required]

    if not failed:
        console.print("\n[bold green]All preflight checks passed![/bold green]")
    elif not blocking:
        console.print("\n[bold yellow]Preflight passed with warnings.[/bold yellow]")
    else:
        console.print("\n[bold red]Some preflight checks failed.[/bold red]")
    for check in failed:
        if check.workaround:
            console.print(f"  [dim]No {check.name}: create with {check.workaround}[/dim]")

    return not blocking
