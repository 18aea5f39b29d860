"""Content identity of asset payloads."""

import hashlib
import logging
from typing import Any

import tomli
import tomli_w

from skillvault.core.payload import METADATA_FILENAME, AssetPayload, InvalidPayloadError

logger = logging.getLogger(__name__)


def _sorted_tables(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _sorted_tables(value[key]) for key in sorted(value)}
    return value


def _normalize_metadata(content: bytes) -> bytes:
    """Canonicalize metadata.toml and drop [asset].version.

    A stored copy stamped with its version then still compares equal to the
    content it was made from.
    """
    try:
        data = tomli.loads(content.decode("utf-8"))
    except (UnicodeDecodeError, tomli.TOMLDecodeError):
        return content
    asset_section = data.get("asset")
    if isinstance(asset_section, dict):
        asset_section.pop("version", None)
    return tomli_w.dumps(_sorted_tables(data)).encode("utf-8")


def fingerprint_payload(data: bytes) -> dict[str, str]:
    """Map each member file to a sha256 of its contents.

    Directory entries and archive metadata (timestamps, member order) do not
    contribute.
    """
    payload = AssetPayload(data)
    hashes: dict[str, str] = {}
    for name in payload.list_files():
        content = payload.read_file(name)
        if name == METADATA_FILENAME:
            content = _normalize_metadata(content)
        hashes[name] = "sha256:" + hashlib.sha256(content).hexdigest()
    return hashes


def is_identical(payload_a: bytes, payload_b: bytes) -> bool:
    """Return True iff both payloads contain the same files with the same bytes."""
    try:
        return fingerprint_payload(payload_a) == fingerprint_payload(payload_b)
    except InvalidPayloadError as e:
        logger.debug("Payload comparison failed: %s", e)
        return False
