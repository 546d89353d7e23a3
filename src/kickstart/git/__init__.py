"""Git repository initialization for generated projects."""

from kickstart.git.initializer import GitInitializer, GitInitResult, GitStatus

__all__ = ["GitInitializer", "GitInitResult", "GitStatus"]
