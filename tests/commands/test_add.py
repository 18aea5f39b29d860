"""Tests for the add command."""

from pathlib import Path

from click.testing import CliRunner

from skillvault.cli.cli import cli
from skillvault.core.context import SkillvaultContext
from skillvault.lockfile.io import fetch_lock_file
from skillvault.vault.fake import FakeVault


def _source(tmp_path: Path, body: str = "Be consistent.") -> Path:
    source = tmp_path / "coding-standards"
    source.mkdir(exist_ok=True)
    (source / "RULE.md").write_text(body, encoding="utf-8")
    return source


def test_add_with_yes_uses_suggested_version(tmp_path: Path) -> None:
    vault = FakeVault()
    ctx = SkillvaultContext.for_test(vault=vault)

    result = CliRunner().invoke(
        cli, ["add", str(_source(tmp_path)), "-y"], obj=ctx, catch_exceptions=False
    )

    assert result.exit_code == 0, result.output
    assert "Added coding-standards@1" in result.output
    assert "installs globally" in result.output
    assert [a.key for a in vault.added_assets] == ["coding-standards@1"]


def test_unchanged_content_creates_no_version(tmp_path: Path) -> None:
    vault = FakeVault()
    ctx = SkillvaultContext.for_test(vault=vault)
    runner = CliRunner()
    runner.invoke(cli, ["add", str(_source(tmp_path)), "-y"], obj=ctx, catch_exceptions=False)

    result = runner.invoke(
        cli, ["add", str(_source(tmp_path)), "-y"], obj=ctx, catch_exceptions=False
    )

    assert "unchanged from version 1" in result.output
    assert len(vault.added_assets) == 1


def test_prompted_version_is_used(tmp_path: Path) -> None:
    vault = FakeVault()
    ctx = SkillvaultContext.for_test(vault=vault)
    runner = CliRunner()
    runner.invoke(cli, ["add", str(_source(tmp_path)), "-y"], obj=ctx, catch_exceptions=False)

    result = runner.invoke(
        cli,
        ["add", str(_source(tmp_path, "Changed."))],
        obj=ctx,
        input="5\n",
        catch_exceptions=False,
    )

    assert result.exit_code == 0, result.output
    assert "Version [2]" in result.output
    assert "Added coding-standards@5" in result.output


def test_scoped_add_records_scope(tmp_path: Path) -> None:
    vault = FakeVault()
    ctx = SkillvaultContext.for_test(vault=vault)

    result = CliRunner().invoke(
        cli,
        [
            "add",
            str(_source(tmp_path)),
            "--version",
            "1.0.0",
            "--repo",
            "github.com/acme/x",
            "--path",
            "backend",
        ],
        obj=ctx,
        catch_exceptions=False,
    )

    assert result.exit_code == 0, result.output
    assert "scoped to github.com/acme/x (backend)" in result.output
    entry = fetch_lock_file(vault, None).assets[0]
    assert entry.key == "coding-standards@1.0.0"
    assert entry.scopes[0].paths == ("backend",)


def test_global_conflicts_with_repo(tmp_path: Path) -> None:
    ctx = SkillvaultContext.for_test(vault=FakeVault())

    result = CliRunner().invoke(
        cli,
        ["add", str(_source(tmp_path)), "--global", "--repo", "github.com/acme/x"],
        obj=ctx,
        catch_exceptions=False,
    )

    assert result.exit_code == 1
    assert "--global cannot be combined" in result.output
