"""Package manager definitions and lookup."""

from kickstart.package_managers.base import PackageManager
from kickstart.package_managers.bun import BUN
from kickstart.package_managers.npm import NPM
from kickstart.package_managers.pnpm import PNPM
from kickstart.package_managers.yarn import YARN

__all__ = [
    "BUN",
    "DEFAULT_PACKAGE_MANAGER",
    "NPM",
    "PACKAGE_MANAGERS",
    "PACKAGE_MANAGER_NAMES",
    "PNPM",
    "PackageManager",
    "YARN",
    "get_available_package_managers",
    "get_package_manager_by_name",
]

# Lock file probing order: first match wins.
PACKAGE_MANAGERS: tuple[PackageManager, ...] = (
    BUN,
    PNPM,
    YARN,
    NPM,
)

PACKAGE_MANAGER_NAMES: tuple[str, ...] = tuple(pm.name for pm in PACKAGE_MANAGERS)

DEFAULT_PACKAGE_MANAGER = NPM


def get_available_package_managers() -> list[PackageManager]:
    """Return list of package managers that are currently installed."""
    return [pm for pm in PACKAGE_MANAGERS if pm.is_installed()]


def get_package_manager_by_name(name: str) -> PackageManager | None:
    """Find a package manager by name (case-insensitive)."""
    name_lower = name.strip().lower()
    for pm in PACKAGE_MANAGERS:
        if pm.name == name_lower:
            return pm
    return None
