"""Parse, validate and serialize lock files."""

import re
from typing import Any

import tomli
import tomli_w

from skillvault.core.assets import ASSET_TYPES
from skillvault.core.errors import InvalidScopeError, LockFileError
from skillvault.core.scope import Global, Scope
from skillvault.lockfile.models import LOCK_VERSION, LockedAsset, LockFile

ASSET_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


def is_valid_asset_name(name: str) -> bool:
    return ASSET_NAME_RE.match(name) is not None


def new_lock_file(tool_version: str) -> LockFile:
    return LockFile(
        lock_version=LOCK_VERSION,
        version=tool_version,
        created_by="skillvault",
        assets=(),
    )


def parse_lock_file(content: str) -> LockFile:
    """Parse and validate lock file TOML.

    Raises:
        LockFileError: If the content is not valid TOML or fails validation
    """
    try:
        data = tomli.loads(content)
    except tomli.TOMLDecodeError as e:
        raise LockFileError(f"Invalid lock file: {e}") from e

    lock_version = data.get("lock-version")
    if lock_version is None:
        raise LockFileError("Lock file is missing 'lock-version'")

    raw_assets = data.get("assets", [])
    if not isinstance(raw_assets, list):
        raise LockFileError("'assets' must be an array of tables")

    assets = tuple(_parse_asset(raw, index) for index, raw in enumerate(raw_assets))
    lock = LockFile(
        lock_version=str(lock_version),
        version=str(data.get("version", "")),
        created_by=str(data.get("created-by", "")),
        assets=assets,
    )
    validate_lock_file(lock)
    return lock


def _parse_asset(raw: Any, index: int) -> LockedAsset:
    if not isinstance(raw, dict):
        raise LockFileError(f"assets[{index}] must be a table")

    for required in ("name", "version", "type"):
        if required not in raw:
            raise LockFileError(f"assets[{index}] is missing required field '{required}'")

    name = str(raw["name"])
    try:
        scopes = tuple(_parse_scope(scope, name) for scope in raw.get("scopes", []))
    except InvalidScopeError as e:
        raise LockFileError(f"Asset '{name}': {e}") from e

    return LockedAsset(
        name=name,
        version=str(raw["version"]),
        type=raw["type"],
        source_path=str(raw.get("source-path", "")),
        scopes=scopes,
        clients=tuple(str(c) for c in raw.get("clients", [])),
        dependencies=tuple(str(d) for d in raw.get("dependencies", [])),
    )


def _parse_scope(raw: Any, asset_name: str) -> Scope:
    if not isinstance(raw, dict):
        raise LockFileError(f"Asset '{asset_name}' has a scope that is not a table")
    repo = raw.get("repo")
    paths = raw.get("paths", [])
    if not isinstance(paths, list):
        raise LockFileError(f"Asset '{asset_name}' scope 'paths' must be a list")
    return Scope.create(str(repo) if repo is not None else None, [str(p) for p in paths])


def validate_lock_file(lock: LockFile) -> None:
    """Check entry-level invariants.

    Raises:
        LockFileError: On unknown types, bad names or duplicate name/version pairs
    """
    seen: set[tuple[str, str]] = set()
    for entry in lock.assets:
        if not is_valid_asset_name(entry.name):
            raise LockFileError(f"Invalid asset name '{entry.name}'")
        if not entry.version:
            raise LockFileError(f"Asset '{entry.name}' has an empty version")
        if entry.type not in ASSET_TYPES:
            raise LockFileError(f"Asset '{entry.key}' has unknown type '{entry.type}'")
        identity = (entry.name, entry.version)
        if identity in seen:
            raise LockFileError(f"Duplicate lock entry for {entry.key}")
        seen.add(identity)


def serialize_lock_file(lock: LockFile) -> str:
    """Render a lock file as TOML."""
    assets: list[dict[str, Any]] = []
    for entry in lock.assets:
        item: dict[str, Any] = {
            "name": entry.name,
            "version": entry.version,
            "type": entry.type,
            "source-path": entry.source_path,
        }
        if entry.clients:
            item["clients"] = list(entry.clients)
        if entry.dependencies:
            item["dependencies"] = list(entry.dependencies)
        scopes: list[dict[str, Any]] = []
        declared = () if isinstance(entry.placement, Global) else entry.scopes
        for scope in declared:
            if scope.repo is None:
                continue
            scope_item: dict[str, Any] = {"repo": scope.repo}
            if scope.paths:
                scope_item["paths"] = list(scope.paths)
            scopes.append(scope_item)
        if scopes:
            item["scopes"] = scopes
        assets.append(item)

    data: dict[str, Any] = {
        "lock-version": lock.lock_version,
        "version": lock.version,
        "created-by": lock.created_by,
    }
    if assets:
        data["assets"] = assets
    return tomli_w.dumps(data)
