"""Load and store the lock file through a vault."""

import logging

from skillvault.core.cache import LockFileCache
from skillvault.core.errors import LockFileError
from skillvault.lockfile.models import LockFile
from skillvault.lockfile.parser import new_lock_file, parse_lock_file, serialize_lock_file
from skillvault.vault.abc import Vault

logger = logging.getLogger(__name__)

TOOL_VERSION = "0.1.0"


def fetch_lock_file(vault: Vault, cache: LockFileCache | None) -> LockFile:
    """Fetch and parse the vault's lock file, reusing the cached copy when unchanged.

    A vault without a lock file yields an empty lock file.

    Raises:
        LockFileError: If the lock file is invalid
    """
    etag = cache.load_etag() if cache is not None else None
    response = vault.get_lock_file(etag)

    if response.not_modified and cache is not None:
        cached = cache.load_lock_file()
        if cached is not None:
            logger.debug("Lock file not modified (etag=%s), using cache", etag)
            return _parse(cached)
        # Cache vanished between the etag read and now; fetch unconditionally
        response = vault.get_lock_file(None)

    if not response.data:
        return new_lock_file(TOOL_VERSION)

    if cache is not None:
        cache.save(response.data, response.etag)
    return _parse(response.data)


def _parse(data: bytes) -> LockFile:
    try:
        content = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise LockFileError(f"Lock file is not valid UTF-8: {e}") from e
    return parse_lock_file(content)


def write_lock_file(vault: Vault, lock: LockFile) -> None:
    """Serialize the full lock file and persist it in one write."""
    vault.save_lock_file(serialize_lock_file(lock).encode("utf-8"))
