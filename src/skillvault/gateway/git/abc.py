"""Abstract interface for the git queries skillvault needs."""

from abc import ABC, abstractmethod
from pathlib import Path


class Git(ABC):
    """Abstract interface for git operations.

    All implementations (real, fake) must implement this interface.
    """

    @abstractmethod
    def get_repository_root(self, cwd: Path) -> Path | None:
        """Return the top-level directory of the repository containing cwd, if any."""
        ...

    @abstractmethod
    def get_remote_url(self, repo_root: Path, remote: str = "origin") -> str | None:
        """Return the configured URL of remote, or None when it is missing or empty."""
        ...
