"""Scope model: where an asset should be installed.

A Scope is the declared placement from the lock file. Resolving it against
the current repository context yields zero or more InstallTargets, which are
the concrete places clients materialize assets into.
"""

import re
from dataclasses import dataclass, replace
from pathlib import Path, PurePosixPath
from typing import Literal

from skillvault.core.errors import InvalidScopeError

TargetKind = Literal["global", "repo", "path"]

# Hosts whose scp-style SSH URLs are rewritten to host/owner/repo form
_SCP_URL_RE = re.compile(r"^(?:[\w.-]+@)?(?P<host>[\w.-]+):(?P<path>(?!//).+)$")
_URL_RE = re.compile(r"^[a-z][a-z0-9+.-]*://(?:[^@/]+@)?(?P<host>[^/:]+)(?::\d+)?(?P<path>/.*)?$")


def normalize_repo_url(url: str) -> str:
    """Normalize a git remote URL so different spellings compare equal.

    Examples:
        git@github.com:Acme/Repo.git     -> github.com/acme/repo
        https://github.com/acme/repo/    -> github.com/acme/repo
        ssh://git@github.com:22/acme/repo -> github.com/acme/repo
    """
    value = url.strip().lower()
    value = value.rstrip("/")
    if value.endswith(".git"):
        value = value[: -len(".git")]

    url_match = _URL_RE.match(value)
    if url_match is not None:
        path = (url_match.group("path") or "").strip("/")
        return f"{url_match.group('host')}/{path}" if path else url_match.group("host")

    scp_match = _SCP_URL_RE.match(value)
    if scp_match is not None:
        return f"{scp_match.group('host')}/{scp_match.group('path').strip('/')}"

    return value.strip("/")


def normalize_scope_path(path: str) -> str:
    """Normalize a repository-relative scope path.

    Raises:
        InvalidScopeError: If the path is absolute or escapes the repository
    """
    cleaned = path.strip().replace("\\", "/")
    while cleaned.startswith("./"):
        cleaned = cleaned[2:]
    cleaned = cleaned.rstrip("/")
    if cleaned in ("", "."):
        raise InvalidScopeError(f"Scope path '{path}' is empty; omit paths to scope to the repo")
    pure = PurePosixPath(cleaned)
    if pure.is_absolute():
        raise InvalidScopeError(f"Scope path '{path}' must be relative to the repository root")
    if ".." in pure.parts:
        raise InvalidScopeError(f"Scope path '{path}' must not contain '..'")
    return pure.as_posix()


@dataclass(frozen=True)
class Scope:
    """Declared placement of an asset.

    repo None means global. A repo with no paths means the whole repository;
    with paths, each path is an independent install target.
    """

    repo: str | None
    paths: tuple[str, ...] = ()

    @property
    def is_global(self) -> bool:
        return self.repo is None

    @staticmethod
    def global_scope() -> "Scope":
        return Scope(repo=None, paths=())

    @staticmethod
    def create(repo: str | None, paths: list[str] | tuple[str, ...]) -> "Scope":
        """Build a validated, normalized Scope.

        Raises:
            InvalidScopeError: If paths are given without a repo or a path is invalid
        """
        if repo is not None and not repo.strip():
            raise InvalidScopeError("Scope repo must not be blank")
        if repo is None and paths:
            raise InvalidScopeError("Scope paths require a repo")
        normalized: list[str] = []
        for path in paths:
            value = normalize_scope_path(path)
            if value not in normalized:
                normalized.append(value)
        return Scope(repo=repo.strip() if repo is not None else None, paths=tuple(normalized))

    def matches_repo(self, remote_url: str | None) -> bool:
        if self.repo is None or remote_url is None:
            return False
        return normalize_repo_url(self.repo) == normalize_repo_url(remote_url)


@dataclass(frozen=True)
class RepoContext:
    """The repository the current invocation operates on."""

    root: Path
    remote_url: str | None
    is_override: bool


@dataclass(frozen=True)
class TargetBase:
    """A root that owns one tracker: the user's global install or one repository."""

    repo_root: Path | None

    @staticmethod
    def global_base() -> "TargetBase":
        return TargetBase(repo_root=None)

    @property
    def is_global(self) -> bool:
        return self.repo_root is None

    def describe(self) -> str:
        return "global" if self.repo_root is None else str(self.repo_root)


@dataclass(frozen=True)
class InstallTarget:
    """A concrete installation target, independent of any particular client."""

    kind: TargetKind
    repo_root: Path | None
    path: str = ""

    @staticmethod
    def global_target() -> "InstallTarget":
        return InstallTarget(kind="global", repo_root=None, path="")

    @staticmethod
    def within(base: TargetBase, path: str) -> "InstallTarget":
        """Rebuild a target from its tracker base and repository-relative path."""
        if base.repo_root is None:
            return InstallTarget.global_target()
        if not path:
            return InstallTarget(kind="repo", repo_root=base.repo_root, path="")
        return InstallTarget(kind="path", repo_root=base.repo_root, path=path)

    @property
    def is_global(self) -> bool:
        return self.kind == "global"

    @property
    def base(self) -> TargetBase:
        return TargetBase(repo_root=self.repo_root)

    def at_repo_root(self) -> "InstallTarget":
        """Collapse a path target onto its repository root target."""
        if self.kind != "path":
            return self
        return replace(self, kind="repo", path="")

    def describe(self) -> str:
        if self.kind == "global":
            return "global"
        if self.kind == "repo":
            return str(self.repo_root)
        return f"{self.repo_root}/{self.path}"


def resolve_scope(scope: Scope, context: RepoContext | None) -> tuple[InstallTarget, ...]:
    """Resolve a declared scope into install targets for the current invocation.

    A repo scope that does not match the current repository yields nothing: it
    remains valid desired state, just not actionable from here.
    """
    if scope.is_global:
        return (InstallTarget.global_target(),)
    if context is None or not scope.matches_repo(context.remote_url):
        return ()
    if not scope.paths:
        return (InstallTarget(kind="repo", repo_root=context.root, path=""),)
    return tuple(
        InstallTarget(kind="path", repo_root=context.root, path=path) for path in scope.paths
    )


@dataclass(frozen=True)
class NotInstalled:
    """No installation recorded or declared."""


@dataclass(frozen=True)
class Global:
    """Installed (or declared) for every repository."""


@dataclass(frozen=True)
class Scoped:
    """Installed (or declared) only in specific repositories or paths."""

    scopes: tuple[Scope, ...]


Placement = NotInstalled | Global | Scoped


def placement_of(scopes: tuple[Scope, ...]) -> Global | Scoped:
    """Interpret the scope entries of a lock entry.

    No entries, or any global entry, means global.
    """
    if not scopes or any(scope.is_global for scope in scopes):
        return Global()
    return Scoped(scopes=scopes)


def placement_from_targets(targets: list[InstallTarget], repo: str) -> Placement:
    """Summarize where tracked installations of one asset live."""
    if not targets:
        return NotInstalled()
    if any(target.is_global for target in targets):
        return Global()
    paths: list[str] = []
    for target in targets:
        if target.kind == "path" and target.path not in paths:
            paths.append(target.path)
    whole_repo = any(target.kind == "repo" for target in targets)
    scope = Scope(repo=repo, paths=() if whole_repo else tuple(paths))
    return Scoped(scopes=(scope,))
