"""Write asset payloads to disk and remove them again.

Clients decide *where* an asset goes (an AssetLocation); the functions here
decide *how* each kind of location is written.
"""

import json
import logging
import shutil
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

import tomli_w

from skillvault.core.assets import Asset
from skillvault.core.payload import AssetPayload

logger = logging.getLogger(__name__)

LocationKind = Literal["directory", "file", "mcp-json", "mcp-toml"]

MCP_JSON_SECTION = "mcpServers"
MCP_TOML_SECTION = "mcp_servers"


class MaterializationError(Exception):
    """An asset payload cannot be materialized at its location."""


@dataclass(frozen=True)
class AssetLocation:
    """Where one asset lives for one client.

    For directory and file kinds, path is the installed directory or file.
    For MCP kinds, path is the shared config file and key the server entry.
    """

    kind: LocationKind
    path: Path
    key: str | None = None

    @property
    def identity(self) -> tuple[str, str | None]:
        return (str(self.path), self.key)


def prompt_file_name(asset: Asset, metadata: dict[str, Any]) -> str:
    asset_section = metadata.get("asset", {})
    declared = asset_section.get("prompt-file") if isinstance(asset_section, dict) else None
    if declared:
        return str(declared)
    return f"{asset.type.upper()}.md"


def install_at(location: AssetLocation, asset: Asset, payload: AssetPayload) -> None:
    """Materialize asset at location, replacing any previous content there.

    Raises:
        MaterializationError: If the payload lacks a required file or section
        OSError: If the location cannot be written
    """
    if location.kind == "directory":
        if location.path.exists():
            shutil.rmtree(location.path)
        location.path.mkdir(parents=True, exist_ok=True)
        payload.extract_to(location.path)
        return

    if location.kind == "file":
        name = prompt_file_name(asset, payload.metadata())
        if not payload.has_file(name):
            raise MaterializationError(
                f"Prompt file '{name}' declared by {asset.key} is missing from the payload"
            )
        location.path.parent.mkdir(parents=True, exist_ok=True)
        location.path.write_bytes(payload.read_file(name))
        return

    entry = mcp_server_entry(asset, payload.metadata())
    key = location.key or asset.name
    if location.kind == "mcp-json":
        config = _read_json_config(location.path)
        config.setdefault(MCP_JSON_SECTION, {})[key] = entry
        _write_json_config(location.path, config)
        return
    config = _read_toml_config(location.path)
    config.setdefault(MCP_TOML_SECTION, {})[key] = entry
    _write_toml_config(location.path, config)


def remove_at(location: AssetLocation, asset: Asset) -> None:
    """Remove asset from location. Removing something already absent succeeds."""
    if location.kind == "directory":
        if location.path.exists():
            shutil.rmtree(location.path)
        return

    if location.kind == "file":
        location.path.unlink(missing_ok=True)
        return

    if not location.path.exists():
        return
    key = location.key or asset.name
    if location.kind == "mcp-json":
        config = _read_json_config(location.path)
        servers = config.get(MCP_JSON_SECTION, {})
        if key in servers:
            del servers[key]
            _write_json_config(location.path, config)
        return
    config = _read_toml_config(location.path)
    servers = config.get(MCP_TOML_SECTION, {})
    if key in servers:
        del servers[key]
        _write_toml_config(location.path, config)


def exists_at(location: AssetLocation, asset: Asset) -> bool:
    if location.kind == "directory":
        return location.path.is_dir()
    if location.kind == "file":
        return location.path.is_file()
    if not location.path.exists():
        return False
    key = location.key or asset.name
    try:
        if location.kind == "mcp-json":
            return key in _read_json_config(location.path).get(MCP_JSON_SECTION, {})
        return key in _read_toml_config(location.path).get(MCP_TOML_SECTION, {})
    except MaterializationError:
        return False


def mcp_server_entry(asset: Asset, metadata: dict[str, Any]) -> dict[str, Any]:
    """Build the MCP server entry from the payload's [mcp] section.

    Raises:
        MaterializationError: If the section is missing, incomplete or mistyped
    """
    section = metadata.get("mcp")
    if not isinstance(section, dict):
        raise MaterializationError(f"{asset.key} has no [mcp] section in its metadata")

    if asset.type == "mcp-remote":
        url = section.get("url")
        if not url:
            raise MaterializationError(f"{asset.key} is a remote MCP server without a 'url'")
        entry: dict[str, Any] = {"url": str(url)}
        headers = _string_table(asset, section, "headers")
        if headers:
            entry["headers"] = headers
        return entry

    command = section.get("command")
    if not command:
        raise MaterializationError(f"{asset.key} is an MCP server without a 'command'")
    args = section.get("args", [])
    if not isinstance(args, list):
        raise MaterializationError(f"{asset.key}: [mcp].args must be an array")
    entry = {"command": str(command), "args": [str(a) for a in args]}
    env = _string_table(asset, section, "env")
    if env:
        entry["env"] = env
    return entry


def _string_table(asset: Asset, section: dict[str, Any], name: str) -> dict[str, str]:
    value = section.get(name, {})
    if not isinstance(value, dict):
        raise MaterializationError(f"{asset.key}: [mcp].{name} must be a table")
    return {str(k): str(v) for k, v in value.items()}


def _read_json_config(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise MaterializationError(f"Refusing to rewrite invalid JSON config {path}: {e}") from e
    if not isinstance(data, dict):
        raise MaterializationError(f"Config {path} is not a JSON object")
    return data


def _write_json_config(path: Path, config: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config, indent=2) + "\n", encoding="utf-8")


def _read_toml_config(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise MaterializationError(f"Refusing to rewrite invalid TOML config {path}: {e}") from e


def _write_toml_config(path: Path, config: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(tomli_w.dumps(config), encoding="utf-8")
