"""Detection result types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from kickstart.package_managers import PackageManager


class Framework(Enum):
    """Framework variants recognized in an existing project."""

    NEXTJS_APP = "nextjs-app"  # Next.js 13+ with the App Router
    NEXTJS_PAGES = "nextjs-pages"
    EXPRESS = "express"
    REACT = "react"
    VUE = "vue"
    SVELTE = "svelte"  # SvelteKit
    NODE = "node"  # plain Node.js runtime
    UNKNOWN = "unknown"  # no manifest to inspect

    @property
    def is_nextjs(self) -> bool:
        return self in (Framework.NEXTJS_APP, Framework.NEXTJS_PAGES)


FRAMEWORK_NAMES: dict[Framework, str] = {
    Framework.NEXTJS_APP: "Next.js (App Router)",
    Framework.NEXTJS_PAGES: "Next.js (Pages Router)",
    Framework.EXPRESS: "Express.js",
    Framework.REACT: "React",
    Framework.VUE: "Vue.js",
    Framework.SVELTE: "SvelteKit",
    Framework.NODE: "Node.js",
    Framework.UNKNOWN: "Unknown",
}


@dataclass(frozen=True)
class FrameworkInfo:
    """What detection found in a project directory."""

    framework: Framework
    name: str
    has_typescript: bool
    package_manager: PackageManager
    version: str | None = None

    def to_dict(self) -> dict[str, object]:
        """Convert to a plain dictionary for display."""
        result: dict[str, object] = {
            "framework": self.framework.value,
            "name": self.name,
        }
        if self.version is not None:
            result["version"] = self.version
        result["typescript"] = self.has_typescript
        result["package_manager"] = self.package_manager.name
        return result
