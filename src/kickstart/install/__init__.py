"""Dependency installation through the resolved package manager."""

from kickstart.install.installer import DependencyInstaller, InstallResult, InstallStatus

__all__ = [
    "DependencyInstaller",
    "InstallResult",
    "InstallStatus",
]
