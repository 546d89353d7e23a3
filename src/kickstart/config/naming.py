"""Project name validation (npm package-name rules)."""

import re
from urllib.parse import quote

MAX_NAME_LENGTH = 214

# Names npm refuses for new packages, plus ones that break Node tooling.
RESERVED_NAMES: frozenset[str] = frozenset(
    {"node_modules", "favicon.ico", "package.json", "node", "npm"}
)

# Node core modules; a package by one of these names would be shadowed.
NODE_BUILTIN_MODULES: tuple[str, ...] = (
    "assert",
    "async_hooks",
    "buffer",
    "child_process",
    "cluster",
    "console",
    "constants",
    "crypto",
    "dgram",
    "diagnostics_channel",
    "dns",
    "domain",
    "events",
    "fs",
    "http",
    "http2",
    "https",
    "inspector",
    "module",
    "net",
    "os",
    "path",
    "perf_hooks",
    "process",
    "punycode",
    "querystring",
    "readline",
    "repl",
    "stream",
    "string_decoder",
    "sys",
    "timers",
    "tls",
    "trace_events",
    "tty",
    "url",
    "util",
    "v8",
    "vm",
    "wasi",
    "worker_threads",
    "zlib",
)

_SCOPED = re.compile(r"^@([^/]+)/([^/]+)$")


def validate_project_name(name: str) -> list[str]:
    """Return the reasons ``name`` is unusable; an empty list means valid.

    A valid name doubles as the directory name, so path separators and
    parent references are rejected along with everything npm rejects.
    """
    problems: list[str] = []
    if not name or not name.strip():
        return ["name cannot be empty"]
    if name != name.strip():
        problems.append("name cannot contain leading or trailing spaces")
    if len(name) > MAX_NAME_LENGTH:
        problems.append(f"name can no longer contain more than {MAX_NAME_LENGTH} characters")
    if name.startswith("."):
        problems.append("name cannot start with a period")
    if name.startswith("_"):
        problems.append("name cannot start with an underscore")
    if name.lower() in RESERVED_NAMES:
        problems.append(f"{name} is a reserved name")
    if name.lower() in NODE_BUILTIN_MODULES:
        problems.append(f"{name} is a core module name")
    if name.lower() != name:
        problems.append("name can no longer contain capital letters")
    if "\\" in name or ".." in name:
        problems.append("name cannot contain path separators or parent references")
    if re.search(r"[~'!()*]", name):
        problems.append('name can no longer contain special characters ("~\'!()*")')

    scoped = _SCOPED.match(name)
    if name.startswith("@") and scoped is None:
        problems.append("scoped names must look like @scope/name")
    elif scoped is None and "/" in name:
        problems.append("name cannot contain path separators")

    parts = scoped.groups() if scoped else (name,)
    if any(quote(part, safe="") != part for part in parts):
        problems.append("name can only contain URL-friendly characters")
    return problems


def directory_name(name: str) -> str:
    """Directory to create for a project name (``@scope/app`` -> ``app``)."""
    scoped = _SCOPED.match(name)
    return scoped.group(2) if scoped else name
