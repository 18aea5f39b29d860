"""User configuration stored in ~/.config/skillvault/config.toml.

Example config.toml:

    [vault]
    type = "path"
    path = "/home/me/team-vault"

    [clients]
    enabled = ["cursor"]      # force-enable even when not detected
    disabled = ["codex"]

    [install]
    concurrency = 10
    timeout_seconds = 1800

    [add]
    default_version = "1"
"""

import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import tomli_w

from skillvault.core.errors import ConfigurationError
from skillvault.core.versioning import DEFAULT_FIRST_VERSION

CONFIG_FILENAME = "config.toml"
CONFIG_DIR_ENV = "SKILLVAULT_CONFIG_DIR"
CACHE_DIR_ENV = "SKILLVAULT_CACHE_DIR"

DEFAULT_CONCURRENCY = 10
DEFAULT_TIMEOUT_SECONDS = 30 * 60


@dataclass(frozen=True)
class SkillvaultConfig:
    """In-memory representation of config.toml."""

    vault_type: str | None
    vault_path: Path | None
    enabled_clients: tuple[str, ...]
    disabled_clients: tuple[str, ...]
    concurrency: int
    timeout_seconds: int
    default_version: str

    @staticmethod
    def default() -> "SkillvaultConfig":
        return SkillvaultConfig(
            vault_type=None,
            vault_path=None,
            enabled_clients=(),
            disabled_clients=(),
            concurrency=DEFAULT_CONCURRENCY,
            timeout_seconds=DEFAULT_TIMEOUT_SECONDS,
            default_version=DEFAULT_FIRST_VERSION,
        )

    def with_path_vault(self, path: Path) -> "SkillvaultConfig":
        return replace(self, vault_type="path", vault_path=path)


def get_config_dir() -> Path:
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override)
    return Path.home() / ".config" / "skillvault"


def get_cache_dir() -> Path:
    override = os.environ.get(CACHE_DIR_ENV)
    if override:
        return Path(override)
    return Path.home() / ".cache" / "skillvault"


def load_config(config_dir: Path) -> SkillvaultConfig:
    """Load config.toml from config_dir if present; otherwise return defaults.

    Raises:
        ConfigurationError: If the file exists but is not valid TOML
    """
    cfg_path = config_dir / CONFIG_FILENAME
    if not cfg_path.exists():
        return SkillvaultConfig.default()

    try:
        data = tomllib.loads(cfg_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid config file {cfg_path}: {e}") from e

    defaults = SkillvaultConfig.default()
    vault = data.get("vault", {})
    clients = data.get("clients", {})
    install = data.get("install", {})
    add = data.get("add", {})

    vault_path = vault.get("path")
    return SkillvaultConfig(
        vault_type=vault.get("type"),
        vault_path=Path(vault_path).expanduser() if vault_path else None,
        enabled_clients=tuple(str(c) for c in clients.get("enabled", [])),
        disabled_clients=tuple(str(c) for c in clients.get("disabled", [])),
        concurrency=_positive_int(install, "concurrency", defaults.concurrency),
        timeout_seconds=_positive_int(install, "timeout_seconds", defaults.timeout_seconds),
        default_version=str(add.get("default_version", defaults.default_version)),
    )


def _positive_int(section: dict[str, Any], key: str, default: int) -> int:
    value = section.get(key, default)
    if not isinstance(value, int) or value <= 0:
        raise ConfigurationError(f"Config value '{key}' must be a positive integer, got {value!r}")
    return value


def save_config(config_dir: Path, config: SkillvaultConfig) -> None:
    """Write config.toml into config_dir."""
    cfg_path = config_dir / CONFIG_FILENAME
    cfg_path.parent.mkdir(parents=True, exist_ok=True)

    data: dict[str, Any] = {}
    if config.vault_type is not None:
        vault: dict[str, Any] = {"type": config.vault_type}
        if config.vault_path is not None:
            vault["path"] = str(config.vault_path)
        data["vault"] = vault
    data["clients"] = {
        "enabled": list(config.enabled_clients),
        "disabled": list(config.disabled_clients),
    }
    data["install"] = {
        "concurrency": config.concurrency,
        "timeout_seconds": config.timeout_seconds,
    }
    data["add"] = {"default_version": config.default_version}

    cfg_path.write_text(tomli_w.dumps(data), encoding="utf-8")
