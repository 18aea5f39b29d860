"""Construct the configured vault."""

from skillvault.core.config import SkillvaultConfig
from skillvault.core.errors import ConfigurationError, NoVaultConfiguredError
from skillvault.vault.abc import Vault
from skillvault.vault.path import PathVault


def create_vault(config: SkillvaultConfig) -> Vault:
    """Create the vault described by config.

    Raises:
        NoVaultConfiguredError: If no vault is configured
        ConfigurationError: If the vault type is unsupported or incomplete
    """
    if config.vault_type is None:
        raise NoVaultConfiguredError()
    if config.vault_type != "path":
        raise ConfigurationError(f"Unsupported vault type '{config.vault_type}'")
    if config.vault_path is None:
        raise ConfigurationError("Path vault configured without a 'path'")
    return PathVault(config.vault_path)
