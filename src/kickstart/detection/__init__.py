"""Runtime environment detection."""

from kickstart.detection.detector import (
    EnvironmentDetector,
    normalize_version,
    package_manager_from_lockfiles,
    package_manager_from_user_agent,
)
from kickstart.detection.models import FRAMEWORK_NAMES, Framework, FrameworkInfo
from kickstart.detection.paths import (
    FRAMEWORK_PATHS,
    FrameworkPaths,
    get_framework_paths,
)

__all__ = [
    "EnvironmentDetector",
    "FRAMEWORK_NAMES",
    "FRAMEWORK_PATHS",
    "Framework",
    "FrameworkInfo",
    "FrameworkPaths",
    "get_framework_paths",
    "normalize_version",
    "package_manager_from_lockfiles",
    "package_manager_from_user_agent",
]
