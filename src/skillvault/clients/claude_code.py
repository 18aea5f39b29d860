"""Claude Code integration."""

from pathlib import Path

from skillvault.clients.base import Client, repo_dir
from skillvault.clients.materialize import AssetLocation
from skillvault.core.assets import (
    ASSET_TYPES,
    MCP_ASSET_TYPES,
    SINGLE_FILE_ASSET_TYPES,
    Asset,
)
from skillvault.core.scope import InstallTarget

_SUBDIRS = {
    "skill": "skills",
    "agent": "agents",
    "command": "commands",
    "rule": "rules",
    "hook": "hooks",
    "plugin": "plugins",
}


class ClaudeCodeClient(Client):
    """Installs into ~/.claude globally and <repo>[/<path>]/.claude in repositories.

    Claude Code discovers nested .claude directories, so path scopes are honored.
    """

    def __init__(self, home: Path) -> None:
        self._home = home

    @property
    def client_id(self) -> str:
        return "claude-code"

    @property
    def display_name(self) -> str:
        return "Claude Code"

    @property
    def supported_types(self) -> frozenset[str]:
        return frozenset(ASSET_TYPES)

    def is_detected(self) -> bool:
        return (self._home / ".claude").is_dir()

    def base_dir(self, target: InstallTarget) -> Path:
        if target.is_global:
            return self._home / ".claude"
        return repo_dir(target, ".claude")

    def location_for(self, asset: Asset, target: InstallTarget) -> AssetLocation:
        if asset.type in MCP_ASSET_TYPES:
            if target.is_global:
                return AssetLocation(
                    kind="mcp-json", path=self._home / ".claude.json", key=asset.name
                )
            return AssetLocation(
                kind="mcp-json", path=self.base_dir(target).parent / ".mcp.json", key=asset.name
            )
        subdir = self.base_dir(target) / _SUBDIRS[asset.type]
        if asset.type in SINGLE_FILE_ASSET_TYPES:
            return AssetLocation(kind="file", path=subdir / f"{asset.name}.md")
        return AssetLocation(kind="directory", path=subdir / asset.name)
