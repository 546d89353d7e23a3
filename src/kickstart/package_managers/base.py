"""Base package manager definition."""

import shutil
from dataclasses import dataclass


@dataclass(frozen=True)
class PackageManager:
    """Definition of a JavaScript package manager."""

    name: str
    cli_command: str
    install_info: str
    lockfiles: tuple[str, ...]
    install_args: tuple[str, ...]
    add_args: tuple[str, ...]
    run_prefix: tuple[str, ...]

    def is_installed(self) -> bool:
        """Check if this package manager's CLI command is available in PATH."""
        return shutil.which(self.cli_command) is not None

    def install_command(self) -> list[str]:
        """Return the argv that installs a project's declared dependencies."""
        return [self.cli_command, *self.install_args]

    def add_command(self, packages: list[str]) -> list[str]:
        """Return the argv that adds packages to a project."""
        return [self.cli_command, *self.add_args, *packages]

    def run_command(self, script: str) -> str:
        """Return the shell command that runs a package.json script."""
        return " ".join([*self.run_prefix, script])
