"""Tests for the init command."""

from pathlib import Path

from click.testing import CliRunner

from skillvault.cli.cli import cli
from skillvault.core.config import load_config
from skillvault.core.context import SkillvaultContext


def test_init_creates_vault_and_saves_config(tmp_path: Path) -> None:
    config_dir = tmp_path / "config"
    vault_dir = tmp_path / "vault"
    ctx = SkillvaultContext.for_test(config_dir=config_dir)

    result = CliRunner().invoke(
        cli, ["init", "--vault", str(vault_dir), "--create"], obj=ctx, catch_exceptions=False
    )

    assert result.exit_code == 0, result.output
    assert vault_dir.is_dir()
    config = load_config(config_dir)
    assert config.vault_type == "path"
    assert config.vault_path == vault_dir.resolve()


def test_init_requires_existing_directory(tmp_path: Path) -> None:
    ctx = SkillvaultContext.for_test(config_dir=tmp_path / "config")

    result = CliRunner().invoke(
        cli, ["init", "--vault", str(tmp_path / "missing")], obj=ctx, catch_exceptions=False
    )

    assert result.exit_code == 1
    assert "does not exist (use --create)" in result.output
    assert not (tmp_path / "config").exists()
