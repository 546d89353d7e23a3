"""Environment detection for new and existing projects.

Detection never fails on ambiguous signals: an absent or unreadable manifest
yields ``Framework.UNKNOWN`` and missing lock files yield npm. The only error
is ``MissingManifestError``, and only when the caller asks for a manifest.
"""

from __future__ import annotations

import json
import logging
import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from kickstart.detection.models import FRAMEWORK_NAMES, Framework, FrameworkInfo
from kickstart.errors import MissingManifestError
from kickstart.package_managers import (
    DEFAULT_PACKAGE_MANAGER,
    PACKAGE_MANAGERS,
    PackageManager,
    get_package_manager_by_name,
)

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "package.json"
TSCONFIG_FILENAME = "tsconfig.json"
USER_AGENT_ENV = "npm_config_user_agent"

# First Next.js major version that ships the App Router.
NEXT_APP_ROUTER_MAJOR = 13

_RANGE_PREFIX = re.compile(r"^[\s^~>=<v]+")
_MAJOR = re.compile(r"^(\d+)")


def normalize_version(version: str) -> str:
    """Strip leading range operators from a dependency version.

    ``^14.0.3`` and ``~14.0.3`` both become ``14.0.3``.
    """
    return _RANGE_PREFIX.sub("", version.strip())


def parse_major(version: str) -> int | None:
    """Return the major version number, or None if it is not numeric."""
    match = _MAJOR.match(version)
    if match is None:
        return None
    return int(match.group(1))


def package_manager_from_user_agent(user_agent: str | None) -> PackageManager | None:
    """Map an ``npm_config_user_agent`` value (e.g. ``pnpm/8.6.0 npm/? ...``)."""
    if not user_agent:
        return None
    tool = user_agent.strip().split("/", 1)[0]
    return get_package_manager_by_name(tool)


def package_manager_from_lockfiles(path: Path) -> PackageManager | None:
    """Probe lock files in priority order (bun, pnpm, yarn, npm)."""
    for pm in PACKAGE_MANAGERS:
        for lockfile in pm.lockfiles:
            if (path / lockfile).is_file():
                return pm
    return None


def load_manifest(path: Path) -> dict[str, Any] | None:
    """Load package.json from a directory.

    Returns None if the file is absent, and an empty dict if it is unreadable
    or not a JSON object.
    """
    manifest_path = path / MANIFEST_FILENAME
    if not manifest_path.is_file():
        return None
    try:
        data = json.loads(manifest_path.read_text(encoding="utf-8") or "{}")
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        logger.warning("Ignoring unreadable manifest: %s", manifest_path)
        return {}
    if not isinstance(data, dict):
        return {}
    return data


def merge_dependencies(manifest: Mapping[str, Any]) -> dict[str, str]:
    """Merge runtime and development dependencies into one lookup."""
    deps: dict[str, str] = {}
    for section in ("dependencies", "devDependencies"):
        values = manifest.get(section)
        if not isinstance(values, dict):
            continue
        for name, requirement in values.items():
            deps[str(name)] = str(requirement) if requirement is not None else ""
    return deps


class EnvironmentDetector:
    """Infers framework, TypeScript usage and package manager from disk.

    The environment mapping is captured once at construction; pass a mapping
    explicitly to make detection independent of the invoking shell.
    """

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        env = os.environ if environ is None else environ
        self._user_agent = env.get(USER_AGENT_ENV)

    def detect_package_manager(self, path: Path) -> PackageManager:
        """Resolve the package manager: user agent, then lock files, then npm."""
        pm = package_manager_from_user_agent(self._user_agent)
        if pm is not None:
            logger.debug("Package manager %s from user agent", pm.name)
            return pm

        pm = package_manager_from_lockfiles(path)
        if pm is not None:
            logger.debug("Package manager %s from lock file in %s", pm.name, path)
            return pm

        return DEFAULT_PACKAGE_MANAGER

    def detect(self, path: Path, require_manifest: bool = False) -> FrameworkInfo:
        """Detect the framework of the project at ``path``.

        Raises:
            MissingManifestError: Only if ``require_manifest`` is set and
                there is no package.json.
        """
        package_manager = self.detect_package_manager(path)
        manifest = load_manifest(path)

        if manifest is None:
            if require_manifest:
                raise MissingManifestError(path)
            return FrameworkInfo(
                framework=Framework.UNKNOWN,
                name=FRAMEWORK_NAMES[Framework.UNKNOWN],
                has_typescript=(path / TSCONFIG_FILENAME).is_file(),
                package_manager=package_manager,
            )

        deps = merge_dependencies(manifest)
        has_typescript = (path / TSCONFIG_FILENAME).is_file() or "typescript" in deps
        framework, version = self._classify(path, deps)

        return FrameworkInfo(
            framework=framework,
            name=FRAMEWORK_NAMES[framework],
            version=version,
            has_typescript=has_typescript,
            package_manager=package_manager,
        )

    def _classify(self, path: Path, deps: dict[str, str]) -> tuple[Framework, str | None]:
        """Classify by dependency presence; first match wins."""
        if "next" in deps:
            version = normalize_version(deps["next"])
            return self._classify_next(path, version), version

        if "express" in deps:
            return Framework.EXPRESS, normalize_version(deps["express"])

        # "next" is known to be absent here.
        if "react" in deps:
            return Framework.REACT, normalize_version(deps["react"])

        if "vue" in deps:
            return Framework.VUE, normalize_version(deps["vue"])

        if "@sveltejs/kit" in deps:
            return Framework.SVELTE, normalize_version(deps["@sveltejs/kit"])

        return Framework.NODE, None

    @staticmethod
    def _classify_next(path: Path, version: str) -> Framework:
        """Pick the Next.js router.

        App Router needs both a new enough major and an ``app/`` directory.
        A major that can't be parsed (``latest``, ``canary``) defers to the
        directory alone. Everything else is the pages router.
        """
        has_app_dir = (path / "app").is_dir() or (path / "src" / "app").is_dir()
        major = parse_major(version)
        if has_app_dir and (major is None or major >= NEXT_APP_ROUTER_MAJOR):
            return Framework.NEXTJS_APP
        return Framework.NEXTJS_PAGES
