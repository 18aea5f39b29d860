"""Detect the repository context for an invocation."""

import logging
from pathlib import Path

from skillvault.core.errors import ConfigurationError
from skillvault.core.scope import RepoContext
from skillvault.gateway.git.abc import Git

logger = logging.getLogger(__name__)


def detect_repo_context(git: Git, cwd: Path, target: Path | None) -> RepoContext | None:
    """Determine the repository root and remote URL to resolve scopes against.

    When target is given it becomes the repository root regardless of what git
    reports as the top level; the remote URL is still read from git when the
    target lies inside a repository.

    Raises:
        ConfigurationError: If target does not exist or is not a directory
    """
    if target is not None:
        if not target.exists():
            raise ConfigurationError(f"Target directory does not exist: {target}")
        if not target.is_dir():
            raise ConfigurationError(f"Target is not a directory: {target}")
        root = target.resolve()
        git_root = git.get_repository_root(root)
        remote_url = git.get_remote_url(git_root) if git_root is not None else None
        logger.debug("Using override target %s (remote=%s)", root, remote_url)
        return RepoContext(root=root, remote_url=remote_url, is_override=True)

    root = git.get_repository_root(cwd)
    if root is None:
        logger.debug("No git repository found at %s", cwd)
        return None
    remote_url = git.get_remote_url(root)
    logger.debug("Detected repository %s (remote=%s)", root, remote_url)
    return RepoContext(root=root, remote_url=remote_url, is_override=False)

