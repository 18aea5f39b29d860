"""Add workflow: store new asset content in the vault and pin it in the lock file."""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from skillvault.core.assets import ASSET_TYPES, Asset, AssetType
from skillvault.core.errors import ConfigurationError, VaultError
from skillvault.core.identity import is_identical
from skillvault.core.payload import AssetPayload, stamp_metadata
from skillvault.core.scope import Scope
from skillvault.core.versioning import select_latest_version, suggest_next_version
from skillvault.lockfile.io import fetch_lock_file, write_lock_file
from skillvault.lockfile.models import LockedAsset
from skillvault.lockfile.parser import is_valid_asset_name
from skillvault.vault.abc import Vault

logger = logging.getLogger(__name__)

# Marker files that identify an asset's type when metadata does not say
_TYPE_MARKERS: tuple[tuple[str, AssetType], ...] = (
    ("SKILL.md", "skill"),
    ("AGENT.md", "agent"),
    ("COMMAND.md", "command"),
    ("RULE.md", "rule"),
    ("HOOK.md", "hook"),
    ("PLUGIN.md", "plugin"),
)


@dataclass(frozen=True)
class VersionDecision:
    """How new content relates to what the vault already stores."""

    latest: str | None
    suggested: str
    identical: bool


@dataclass(frozen=True)
class AddResult:
    entry: LockedAsset
    created: bool
    identical: bool


def detect_asset_identity(
    payload: bytes, *, name: str | None, asset_type: str | None, fallback_name: str
) -> tuple[str, AssetType]:
    """Work out an asset's name and type from flags, metadata or marker files.

    Raises:
        ConfigurationError: If the name is invalid or the type cannot be determined
    """
    metadata = AssetPayload(payload).metadata().get("asset", {})
    resolved_name = name or metadata.get("name") or fallback_name
    if not is_valid_asset_name(resolved_name):
        raise ConfigurationError(f"Invalid asset name '{resolved_name}'")

    resolved_type = asset_type or metadata.get("type")
    if resolved_type is None:
        files = AssetPayload(payload).list_files()
        for marker, marker_type in _TYPE_MARKERS:
            if marker in files:
                resolved_type = marker_type
                break
    if resolved_type is None:
        raise ConfigurationError(f"Could not determine the type of '{resolved_name}'; pass --type")
    if resolved_type not in ASSET_TYPES:
        raise ConfigurationError(f"Unknown asset type '{resolved_type}'")
    return resolved_name, resolved_type


def decide_version(
    vault: Vault, name: str, asset_type: AssetType, payload: bytes, default_version: str
) -> VersionDecision:
    """Compare payload with the latest stored version and suggest the next one.

    The candidate is stamped the way it would be stored so that content
    without its own metadata.toml still matches its stored copy. Failing to
    fetch the latest version is not fatal: the content is treated as different.
    """
    versions = vault.get_version_list(name)
    latest = select_latest_version(versions)
    if latest is None:
        return VersionDecision(latest=None, suggested=default_version, identical=False)

    try:
        existing = vault.get_asset_by_version(name, latest)
    except VaultError as e:
        logger.warning("Could not fetch %s@%s for comparison: %s", name, latest, e)
        suggested = suggest_next_version(versions)
        return VersionDecision(latest=latest, suggested=suggested, identical=False)

    candidate = stamp_metadata(payload, name=name, version=latest, asset_type=asset_type)
    if is_identical(candidate, existing):
        return VersionDecision(latest=latest, suggested=latest, identical=True)
    return VersionDecision(latest=latest, suggested=suggest_next_version(versions), identical=False)


def add_asset(
    vault: Vault,
    payload: bytes,
    *,
    name: str,
    asset_type: AssetType,
    scopes: tuple[Scope, ...] | None,
    confirm_version: Callable[[str], str],
    default_version: str,
) -> AddResult:
    """Add content under name, creating a new version only when it changed.

    Args:
        scopes: New scopes for the asset; None keeps the current ones (global
            for a new asset)
        confirm_version: Called with the suggested version, returns the one to use

    Raises:
        VaultError: If the chosen version already exists or storing fails
        LockFileError: If the lock file is invalid
    """
    decision = decide_version(vault, name, asset_type, payload, default_version)
    lock = fetch_lock_file(vault, None)
    current = lock.find(name)
    existing_entry = current[0] if current else None

    if decision.identical and decision.latest is not None:
        logger.debug("%s matches %s@%s; no new version", name, name, decision.latest)
        if existing_entry is None:
            existing_entry = LockedAsset(
                name=name,
                version=decision.latest,
                type=asset_type,
                source_path=f"assets/{name}/{decision.latest}",
            )
        entry = existing_entry if scopes is None else existing_entry.with_scopes(scopes)
        write_lock_file(vault, lock.with_entry(entry))
        return AddResult(entry=entry, created=False, identical=True)

    version = confirm_version(decision.suggested)
    if version in vault.get_version_list(name):
        raise VaultError(f"Version {name}@{version} already exists in the vault")

    asset = Asset(name=name, version=version, type=asset_type)
    stamped = stamp_metadata(payload, name=name, version=version, asset_type=asset_type)
    source_path = vault.add_asset(asset, stamped)

    if scopes is None:
        scopes = existing_entry.scopes if existing_entry is not None else ()
    entry = LockedAsset(
        name=name,
        version=version,
        type=asset_type,
        source_path=source_path,
        scopes=scopes,
        clients=existing_entry.clients if existing_entry is not None else (),
        dependencies=existing_entry.dependencies if existing_entry is not None else (),
    )
    write_lock_file(vault, lock.upsert(entry))
    logger.debug("Added %s (source=%s)", asset.key, source_path)
    return AddResult(entry=entry, created=True, identical=False)
