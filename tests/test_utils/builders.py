"""Builders for lock files, trackers and repository contexts used in tests."""

from pathlib import Path

from skillvault.core.assets import Asset, AssetType
from skillvault.core.scope import RepoContext, Scope, TargetBase
from skillvault.lockfile.models import LockedAsset, LockFile
from skillvault.tracker.models import Tracker

REPO_ROOT = Path("/work/acme-x")
REPO_URL = "git@github.com:acme/x.git"
REPO_SCOPE_URL = "github.com/acme/x"


def repo_context(root: Path = REPO_ROOT, remote_url: str | None = REPO_URL) -> RepoContext:
    return RepoContext(root=root, remote_url=remote_url, is_override=False)


def repo_base(root: Path = REPO_ROOT) -> TargetBase:
    return TargetBase(repo_root=root)


def locked(
    name: str,
    version: str = "1",
    asset_type: AssetType = "rule",
    *,
    repo: str | None = None,
    paths: tuple[str, ...] = (),
    clients: tuple[str, ...] = (),
) -> LockedAsset:
    scopes = (Scope.create(repo, paths),) if repo is not None else ()
    return LockedAsset(
        name=name,
        version=version,
        type=asset_type,
        source_path=f"assets/{name}/{version}",
        scopes=scopes,
        clients=clients,
    )


def lock_of(*entries: LockedAsset) -> LockFile:
    return LockFile(lock_version="1", version="0.1.0", created_by="skillvault", assets=entries)


def tracker_with(
    base: TargetBase, *installs: tuple[str, str, str, str], asset_type: AssetType = "rule"
) -> Tracker:
    """Build a tracker from (name, version, path, client_id) tuples."""
    tracker = Tracker.empty(base)
    for name, version, path, client_id in installs:
        asset = Asset(name=name, version=version, type=asset_type)
        tracker = tracker.with_client(asset, path, client_id)
    return tracker
