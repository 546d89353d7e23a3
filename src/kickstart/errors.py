"""Typed errors for the fatal paths of a kickstart run.

Each error names the offending value and carries the process exit code the
CLI uses when it aborts on it. Soft failures (install, git) are never raised;
they are reported through result objects instead.
"""

from pathlib import Path


class KickstartError(Exception):
    """Base exception for kickstart."""

    exit_code: int = 1


class UnknownTemplateError(KickstartError):
    """Raised when a template identifier is not registered."""

    exit_code = 3

    def __init__(self, template_id: str, available: tuple[str, ...] = ()) -> None:
        self.template_id = template_id
        self.available = available
        message = f"Unknown template: {template_id!r}"
        if available:
            message += f" (available: {', '.join(available)})"
        super().__init__(message)


# The resolver reports an unregistered template under this name.
InvalidTemplateError = UnknownTemplateError


class InvalidProjectNameError(KickstartError):
    """Raised when a project name is empty or not filesystem/package safe."""

    exit_code = 4

    def __init__(self, name: str, reasons: list[str]) -> None:
        self.name = name
        self.reasons = reasons
        super().__init__(f"Invalid project name {name!r}: {'; '.join(reasons)}")


class DestinationNotEmptyError(KickstartError):
    """Raised when the target directory exists and contains files."""

    exit_code = 5

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(
            f"Destination {path} already exists and is not empty "
            "(use --overwrite to replace it)"
        )


class ScaffoldWriteError(KickstartError):
    """Raised when the scaffold cannot be written or published."""

    exit_code = 6

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write scaffold at {path}: {reason}")


class TemplateNotFoundError(KickstartError):
    """Raised when a registered template has no source tree on disk."""

    exit_code = 7

    def __init__(self, template_id: str, path: Path) -> None:
        self.template_id = template_id
        self.path = path
        super().__init__(f"Template source not found for {template_id!r}: {path}")


class MissingManifestError(KickstartError):
    """Raised when a manifest (package.json) is required but absent."""

    exit_code = 8

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(
            f"No package.json found in {path}. "
            "Make sure you're in a valid Node.js project."
        )


class AbortedByUserError(KickstartError):
    """Raised when the user declines to continue at a prompt."""

    exit_code = 1

    def __init__(self, reason: str = "Aborted by user") -> None:
        super().__init__(reason)


class InvalidEnvironmentError(KickstartError):
    """Raised when the target environment is not one kickstart knows."""

    exit_code = 9

    def __init__(self, environment: str, available: tuple[str, ...] = ()) -> None:
        self.environment = environment
        self.available = available
        message = f"Invalid environment {environment!r}"
        if available:
            message += f"; expected one of {', '.join(available)}"
        super().__init__(message)


class UnknownPackageManagerError(KickstartError):
    """Raised when a requested package manager is not supported."""

    exit_code = 10

    def __init__(self, name: str, available: tuple[str, ...] = ()) -> None:
        self.name = name
        self.available = available
        message = f"Unknown package manager: {name!r}"
        if available:
            message += f" (available: {', '.join(available)})"
        super().__init__(message)
