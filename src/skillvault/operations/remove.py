"""Remove assets from the lock file and edit their scopes."""

import logging

from skillvault.core.errors import AssetNotInLockError
from skillvault.core.scope import Scope
from skillvault.lockfile.io import fetch_lock_file, write_lock_file
from skillvault.lockfile.models import LockedAsset
from skillvault.vault.abc import Vault

logger = logging.getLogger(__name__)


def remove_asset(
    vault: Vault, name: str, *, version: str | None = None, delete_payload: bool = False
) -> list[LockedAsset]:
    """Drop an asset from the lock file, optionally deleting its stored payload.

    The next install on each machine uninstalls it.

    Raises:
        AssetNotInLockError: If no matching entry exists
    """
    lock = fetch_lock_file(vault, None)
    removed = lock.find(name, version)
    if not removed:
        raise AssetNotInLockError(name)

    write_lock_file(vault, lock.without(name, version))
    if delete_payload:
        for entry in removed:
            vault.remove_asset(entry.name, entry.version)
            logger.debug("Deleted payload of %s", entry.key)
    return removed


def set_asset_scopes(
    vault: Vault, name: str, scopes: tuple[Scope, ...], *, version: str | None = None
) -> list[LockedAsset]:
    """Replace the scopes of an asset's lock entries without changing their identity.

    An empty tuple makes the asset global.

    Raises:
        AssetNotInLockError: If the asset is not in the lock file
    """
    lock = fetch_lock_file(vault, None)
    entries = lock.find(name, version)
    if not entries:
        raise AssetNotInLockError(name)

    updated = [entry.with_scopes(scopes) for entry in entries]
    for entry in updated:
        lock = lock.with_entry(entry)
    write_lock_file(vault, lock)
    return updated
