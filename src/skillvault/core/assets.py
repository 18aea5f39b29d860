"""Asset identity types."""

from dataclasses import dataclass
from typing import Literal, get_args

AssetType = Literal[
    "skill",
    "agent",
    "command",
    "hook",
    "mcp",
    "mcp-remote",
    "rule",
    "plugin",
]

ASSET_TYPES: tuple[str, ...] = get_args(AssetType)

# Types Claude Code installs as a single prompt file
SINGLE_FILE_ASSET_TYPES: frozenset[str] = frozenset({"agent", "command", "rule"})
MCP_ASSET_TYPES: frozenset[str] = frozenset({"mcp", "mcp-remote"})


@dataclass(frozen=True)
class Asset:
    """Immutable identity of one stored asset version.

    A new version is always a new Asset; existing ones are never mutated.
    """

    name: str
    version: str
    type: AssetType

    @property
    def key(self) -> str:
        return f"{self.name}@{self.version}"
