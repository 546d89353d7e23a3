"""Run the package manager's install command as a child process.

Failures are returned as results, never raised: a scaffold without
installed dependencies is still a valid project. Nothing here retries.
"""

from __future__ import annotations

import logging
import os
import shutil
import signal
import subprocess
import threading
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from kickstart.package_managers import PackageManager

logger = logging.getLogger(__name__)

STDERR_TAIL_LINES = 20
TERMINATE_GRACE_SECONDS = 5.0
COMMAND_NOT_FOUND = 127


class InstallStatus(Enum):
    """Outcome of an install step."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class InstallResult:
    """Result of running (or skipping) an install command."""

    status: InstallStatus
    package_manager: str
    command: tuple[str, ...] = ()
    exit_code: int | None = None
    stderr_tail: str = ""
    duration_ms: int = 0
    message: str = ""

    @property
    def succeeded(self) -> bool:
        return self.status is InstallStatus.SUCCEEDED

    @property
    def failed(self) -> bool:
        return self.status in (InstallStatus.FAILED, InstallStatus.TIMED_OUT)


def tail_lines(text: str, count: int = STDERR_TAIL_LINES) -> str:
    """Return the last ``count`` non-empty lines of ``text``."""
    lines = [line for line in text.splitlines() if line.strip()]
    return "\n".join(lines[-count:])


def terminate_process(proc: subprocess.Popen[str], grace: float = TERMINATE_GRACE_SECONDS) -> None:
    """Stop a child and everything it spawned, then reap it.

    The child runs in its own session on POSIX, so the whole process group
    gets SIGTERM, then SIGKILL if it outlives the grace period.
    """
    if proc.poll() is not None:
        return

    if os.name == "posix":
        try:
            os.killpg(proc.pid, signal.SIGTERM)
        except ProcessLookupError:
            pass
    else:
        proc.terminate()

    try:
        proc.wait(timeout=grace)
        return
    except subprocess.TimeoutExpired:
        pass

    if os.name == "posix":
        try:
            os.killpg(proc.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
    else:
        proc.kill()
    proc.wait()


class DependencyInstaller:
    """Installs a generated project's dependencies."""

    def __init__(self, timeout: float | None = None) -> None:
        """Initialize with a default timeout in seconds (None waits forever)."""
        self._timeout = timeout
        self._lock = threading.Lock()
        self._running: set[subprocess.Popen[str]] = set()
        self._cancelled = False

    def cancel(self) -> None:
        """Kill any running child and refuse to start new ones.

        Safe to call from a thread other than the one running the install;
        the blocked install call then returns a FAILED result.
        """
        with self._lock:
            self._cancelled = True
            running = list(self._running)
        for proc in running:
            logger.debug("Cancelling pid %d", proc.pid)
            terminate_process(proc)

    def install(
        self,
        project_path: Path,
        package_manager: PackageManager,
        skip: bool = False,
        timeout: float | None = None,
    ) -> InstallResult:
        """Install dependencies declared in ``project_path``.

        Args:
            project_path: Project root; used as the child's working directory.
            package_manager: Which tool to run.
            skip: Report SKIPPED without running anything.
            timeout: Seconds before the child is killed; defaults to the
                installer's timeout.
        """
        if skip:
            return InstallResult(
                status=InstallStatus.SKIPPED,
                package_manager=package_manager.name,
                message="Skipped dependency installation",
            )
        return self._run(
            package_manager.install_command(),
            project_path,
            package_manager,
            timeout if timeout is not None else self._timeout,
        )

    def add(
        self,
        project_path: Path,
        package_manager: PackageManager,
        packages: list[str],
        timeout: float | None = None,
    ) -> InstallResult:
        """Add packages to an existing project (e.g. ``npm install pkg``)."""
        return self._run(
            package_manager.add_command(packages),
            project_path,
            package_manager,
            timeout if timeout is not None else self._timeout,
        )

    def _run(
        self,
        argv: list[str],
        cwd: Path,
        package_manager: PackageManager,
        timeout: float | None,
    ) -> InstallResult:
        command = tuple(argv)
        executable = shutil.which(argv[0])
        if executable is None:
            logger.warning("%s not found on PATH", argv[0])
            return InstallResult(
                status=InstallStatus.FAILED,
                package_manager=package_manager.name,
                command=command,
                exit_code=COMMAND_NOT_FOUND,
                message=f"{argv[0]} not found on PATH ({package_manager.install_info})",
            )

        logger.debug("Running %s in %s (timeout=%s)", " ".join(argv), cwd, timeout)
        start = time.monotonic()
        with self._lock:
            if self._cancelled:
                return InstallResult(
                    status=InstallStatus.FAILED,
                    package_manager=package_manager.name,
                    command=command,
                    message="Cancelled",
                )
            try:
                proc = subprocess.Popen(
                    [executable, *argv[1:]],
                    cwd=cwd,
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                    text=True,
                    start_new_session=os.name == "posix",
                )
            except OSError as e:
                logger.warning("Failed to start %s: %s", argv[0], e)
                return InstallResult(
                    status=InstallStatus.FAILED,
                    package_manager=package_manager.name,
                    command=command,
                    exit_code=COMMAND_NOT_FOUND,
                    message=f"Failed to start {argv[0]}: {e}",
                )
            self._running.add(proc)

        try:
            return self._wait(proc, argv, package_manager, timeout, start)
        finally:
            with self._lock:
                self._running.discard(proc)

    def _wait(
        self,
        proc: subprocess.Popen[str],
        argv: list[str],
        package_manager: PackageManager,
        timeout: float | None,
        start: float,
    ) -> InstallResult:
        command = tuple(argv)
        try:
            stdout, stderr = proc.communicate(timeout=timeout)
        except subprocess.TimeoutExpired:
            terminate_process(proc)
            stdout, stderr = proc.communicate()
            duration_ms = int((time.monotonic() - start) * 1000)
            logger.warning("%s timed out after %ss", " ".join(argv), timeout)
            return InstallResult(
                status=InstallStatus.TIMED_OUT,
                package_manager=package_manager.name,
                command=command,
                exit_code=proc.returncode,
                stderr_tail=tail_lines(stderr or stdout or ""),
                duration_ms=duration_ms,
                message=f"Timed out after {timeout}s",
            )
        except BaseException:
            # Interrupted (e.g. Ctrl-C): don't leave the installer running.
            terminate_process(proc)
            raise

        duration_ms = int((time.monotonic() - start) * 1000)
        if self._cancelled:
            return InstallResult(
                status=InstallStatus.FAILED,
                package_manager=package_manager.name,
                command=command,
                exit_code=proc.returncode,
                stderr_tail=tail_lines(stderr or stdout or ""),
                duration_ms=duration_ms,
                message="Cancelled",
            )
        if proc.returncode != 0:
            logger.warning("%s exited with %d", " ".join(argv), proc.returncode)
            return InstallResult(
                status=InstallStatus.FAILED,
                package_manager=package_manager.name,
                command=command,
                exit_code=proc.returncode,
                stderr_tail=tail_lines(stderr or stdout or ""),
                duration_ms=duration_ms,
                message=f"{argv[0]} exited with code {proc.returncode}",
            )

        return InstallResult(
            status=InstallStatus.SUCCEEDED,
            package_manager=package_manager.name,
            command=command,
            exit_code=0,
            duration_ms=duration_ms,
        )
