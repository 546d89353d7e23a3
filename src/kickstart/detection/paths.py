"""Per-framework file locations for generated integration files."""

from dataclasses import dataclass

from kickstart.detection.models import Framework


@dataclass(frozen=True)
class FrameworkPaths:
    """Where the client module, webhook handler and env file belong."""

    lib_path: str
    webhook_path: str
    env_file: str


_NEXT_APP = FrameworkPaths(
    lib_path="lib/zendfi.ts",
    webhook_path="app/api/webhooks/zendfi/route.ts",
    env_file=".env.local",
)
_NEXT_PAGES = FrameworkPaths(
    lib_path="lib/zendfi.ts",
    webhook_path="pages/api/webhooks/zendfi.ts",
    env_file=".env.local",
)
_EXPRESS = FrameworkPaths(
    lib_path="src/lib/zendfi.ts",
    webhook_path="src/routes/webhooks.ts",
    env_file=".env",
)
_GENERIC = FrameworkPaths(
    lib_path="src/lib/zendfi.ts",
    webhook_path="src/webhooks.ts",
    env_file=".env",
)

# Every Framework member must have an entry; see tests/test_detection.py.
FRAMEWORK_PATHS: dict[Framework, FrameworkPaths] = {
    Framework.NEXTJS_APP: _NEXT_APP,
    Framework.NEXTJS_PAGES: _NEXT_PAGES,
    Framework.EXPRESS: _EXPRESS,
    Framework.REACT: _GENERIC,
    Framework.VUE: _GENERIC,
    Framework.SVELTE: _GENERIC,
    Framework.NODE: _GENERIC,
    Framework.UNKNOWN: _GENERIC,
}


def get_framework_paths(framework: Framework, has_typescript: bool = True) -> FrameworkPaths:
    """Return file locations for a framework.

    Without TypeScript the ``.ts`` extensions become ``.js``.
    """
    paths = FRAMEWORK_PATHS[framework]
    if has_typescript:
        return paths
    return FrameworkPaths(
        lib_path=_to_js(paths.lib_path),
        webhook_path=_to_js(paths.webhook_path),
        env_file=paths.env_file,
    )


def _to_js(path: str) -> str:
    if path.endswith(".ts"):
        return path[:-3] + ".js"
    return path
