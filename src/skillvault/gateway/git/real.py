"""Production Git implementation using subprocess."""

import subprocess
from pathlib import Path

from skillvault.gateway.git.abc import Git


def _git_output(args: list[str], cwd: Path) -> str | None:
    """Run a read-only git query, returning stripped stdout or None on failure."""
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=False,
    )
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


class RealGit(Git):
    """Production implementation using subprocess."""

    def get_repository_root(self, cwd: Path) -> Path | None:
        root = _git_output(["rev-parse", "--show-toplevel"], cwd)
        return Path(root) if root is not None else None

    def get_remote_url(self, repo_root: Path, remote: str = "origin") -> str | None:
        return _git_output(["config", "--get", f"remote.{remote}.url"], repo_root)
