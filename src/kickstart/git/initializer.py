"""Best-effort `git init` + initial commit for a new project."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

INITIAL_COMMIT_MESSAGE = "Initial commit from kickstart"

# Used only when the user has no git identity configured.
FALLBACK_IDENTITY = {
    "GIT_AUTHOR_NAME": "kickstart",
    "GIT_AUTHOR_EMAIL": "kickstart@localhost",
    "GIT_COMMITTER_NAME": "kickstart",
    "GIT_COMMITTER_EMAIL": "kickstart@localhost",
}


class GitStatus(Enum):
    """Outcome of the git step."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class GitInitResult:
    """Result of initializing (or skipping) the repository."""

    status: GitStatus
    message: str = ""

    @property
    def succeeded(self) -> bool:
        return self.status is GitStatus.SUCCEEDED


def is_git_installed() -> bool:
    """Check whether git is available on PATH."""
    return shutil.which("git") is not None


def is_inside_work_tree(path: Path) -> bool:
    """Check whether ``path`` already belongs to a git work tree."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--is-inside-work-tree"],
            cwd=path,
            capture_output=True,
            text=True,
        )
    except OSError:
        return False
    return result.returncode == 0 and result.stdout.strip() == "true"


def has_identity(path: Path) -> bool:
    """Check whether commits in ``path`` would have an author email."""
    if os.environ.get("GIT_AUTHOR_EMAIL"):
        return True
    result = subprocess.run(
        ["git", "config", "--get", "user.email"],
        cwd=path,
        capture_output=True,
        text=True,
    )
    return result.returncode == 0 and bool(result.stdout.strip())


class GitInitializer:
    """Initializes a repository and records the scaffold as the first commit.

    Never raises and never rolls back: a project without a repository is
    still usable.
    """

    def init(self, project_path: Path, skip: bool = False) -> GitInitResult:
        """Run ``git init``, ``git add -A`` and the initial commit."""
        if skip:
            return GitInitResult(GitStatus.SKIPPED, "Skipped git initialization")

        if not is_git_installed():
            logger.warning("git not found on PATH")
            return GitInitResult(GitStatus.FAILED, "git not found on PATH")

        if is_inside_work_tree(project_path):
            logger.info("%s is already inside a git repository", project_path)
            return GitInitResult(
                GitStatus.SKIPPED, "Already inside a git repository"
            )

        try:
            self._git(project_path, "init")
            self._git(project_path, "add", "-A")
            env = None
            if not has_identity(project_path):
                env = {**os.environ, **FALLBACK_IDENTITY}
            self._git(project_path, "commit", "-m", INITIAL_COMMIT_MESSAGE, env=env)
        except (OSError, subprocess.CalledProcessError) as e:
            reason = e.stderr.strip() if isinstance(e, subprocess.CalledProcessError) else str(e)
            logger.warning("Could not initialize git repository: %s", reason)
            return GitInitResult(
                GitStatus.FAILED,
                f"Could not initialize git repository: {reason or e}",
            )

        return GitInitResult(GitStatus.SUCCEEDED, "Initialized a git repository")

    def _git(
        self, cwd: Path, *args: str, env: dict[str, str] | None = None
    ) -> subprocess.CompletedProcess[str]:
        logger.debug("Running git %s in %s", " ".join(args), cwd)
        return subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=True,
            env=env,
        )
