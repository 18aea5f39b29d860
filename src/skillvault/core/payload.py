"""Read-only access to zipped asset payloads.

An asset payload is a zip archive holding the asset's files plus a
``metadata.toml`` describing it:

    [asset]
    name = "coding-standards"
    version = "1.0.0"
    type = "rule"
    prompt-file = "RULE.md"

    [mcp]
    command = "npx"
    args = ["-y", "some-server"]
"""

import io
import zipfile
import zlib
from pathlib import Path, PurePosixPath
from typing import Any

import tomli
import tomli_w

METADATA_FILENAME = "metadata.toml"


class InvalidPayloadError(Exception):
    """Raised when payload bytes are not a readable asset archive."""


class AssetPayload:
    """Wrapper over the bytes of a zipped asset."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        try:
            self._zip = zipfile.ZipFile(io.BytesIO(data))
        except zipfile.BadZipFile as e:
            raise InvalidPayloadError(f"Payload is not a valid zip archive: {e}") from e

    @property
    def data(self) -> bytes:
        return self._data

    def list_files(self) -> list[str]:
        """Return member file names, skipping directory entries."""
        return sorted(info.filename for info in self._zip.infolist() if not info.is_dir())

    def has_file(self, name: str) -> bool:
        return name in self.list_files()

    def read_file(self, name: str) -> bytes:
        try:
            return self._zip.read(name)
        except KeyError as e:
            raise FileNotFoundError(f"'{name}' not found in asset payload") from e
        except (zipfile.BadZipFile, zlib.error) as e:
            raise InvalidPayloadError(f"Corrupt member '{name}' in asset payload: {e}") from e

    def metadata(self) -> dict[str, Any]:
        """Parse metadata.toml, returning an empty dict when the payload has none."""
        if not self.has_file(METADATA_FILENAME):
            return {}
        try:
            content = self.read_file(METADATA_FILENAME).decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidPayloadError(f"{METADATA_FILENAME} is not valid UTF-8: {e}") from e
        try:
            return tomli.loads(content)
        except tomli.TOMLDecodeError as e:
            raise InvalidPayloadError(f"Invalid {METADATA_FILENAME}: {e}") from e

    def extract_to(self, dest: Path) -> list[Path]:
        """Extract all files below dest, refusing members that escape it."""
        written: list[Path] = []
        for name in self.list_files():
            relative = PurePosixPath(name)
            if relative.is_absolute() or ".." in relative.parts:
                raise InvalidPayloadError(f"Refusing to extract unsafe path '{name}'")
            target = dest.joinpath(*relative.parts)
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(self.read_file(name))
            written.append(target)
        return written


def pack_directory(source_dir: Path) -> bytes:
    """Zip the files under source_dir with paths relative to it."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for path in sorted(source_dir.rglob("*")):
            if path.is_file():
                archive.write(path, path.relative_to(source_dir).as_posix())
    return buffer.getvalue()


def read_payload_source(source: Path) -> bytes:
    """Load payload bytes from a zip file or a directory."""
    if source.is_dir():
        return pack_directory(source)
    return source.read_bytes()


def stamp_metadata(data: bytes, *, name: str, version: str, asset_type: str) -> bytes:
    """Return a copy of the payload whose metadata.toml records the given identity.

    Other metadata keys are preserved.
    """
    payload = AssetPayload(data)
    metadata = payload.metadata()
    asset_section = dict(metadata.get("asset", {}))
    asset_section.update({"name": name, "version": version, "type": asset_type})
    metadata["asset"] = asset_section

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for member in payload.list_files():
            if member == METADATA_FILENAME:
                continue
            archive.writestr(member, payload.read_file(member))
        archive.writestr(METADATA_FILENAME, tomli_w.dumps(metadata))
    return buffer.getvalue()
