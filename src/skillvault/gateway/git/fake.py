"""Fake git operations for testing."""

from pathlib import Path

from skillvault.gateway.git.abc import Git


class FakeGit(Git):
    """In-memory fake implementation of git queries.

    State Management:
    - repo_roots: dict[Path, Path] - directory -> repository root containing it
    - remote_urls: dict[Path, dict[str, str]] - repo_root -> remote -> URL

    A directory that is not a key of repo_roots but lies below one of them
    resolves to that root.
    """

    def __init__(
        self,
        *,
        repo_roots: dict[Path, Path] | None = None,
        remote_urls: dict[Path, dict[str, str]] | None = None,
    ) -> None:
        self._repo_roots = repo_roots or {}
        self._remote_urls = remote_urls or {}

    def get_repository_root(self, cwd: Path) -> Path | None:
        if cwd in self._repo_roots:
            return self._repo_roots[cwd]
        for directory, root in self._repo_roots.items():
            if cwd.is_relative_to(directory):
                return root
        return None

    def get_remote_url(self, repo_root: Path, remote: str = "origin") -> str | None:
        return self._remote_urls.get(repo_root, {}).get(remote) or None
