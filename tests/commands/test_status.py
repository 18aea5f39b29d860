"""Tests for the status command."""

from dataclasses import replace

from click.testing import CliRunner

from skillvault.cli.cli import cli
from skillvault.cli.commands.status import describe_placement
from skillvault.core.context import SkillvaultContext
from skillvault.core.scope import Global, NotInstalled, Scope, Scoped, TargetBase
from skillvault.gateway.git.fake import FakeGit
from skillvault.lockfile.io import write_lock_file
from skillvault.tracker.fake import FakeTrackerStore
from skillvault.vault.fake import FakeVault
from tests.test_utils.builders import (
    REPO_ROOT,
    REPO_SCOPE_URL,
    REPO_URL,
    lock_of,
    locked,
    repo_base,
    tracker_with,
)


def test_describe_placement() -> None:
    assert "not installed" in describe_placement(NotInstalled())
    assert "global" in describe_placement(Global())
    scoped = Scoped(scopes=(Scope(repo="github.com/acme/x", paths=("backend", "web")),))
    assert "github.com/acme/x: backend, web" in describe_placement(scoped)


def test_status_lists_declared_and_installed_assets() -> None:
    vault = FakeVault()
    write_lock_file(
        vault,
        lock_of(
            locked("standards"),
            locked("coding-standards", "1.0.0", repo=REPO_SCOPE_URL, paths=("backend",)),
        ),
    )
    global_base = TargetBase.global_base()
    store = FakeTrackerStore(
        trackers={
            global_base: tracker_with(global_base, ("standards", "1", "", "cursor")),
            repo_base(): tracker_with(
                repo_base(), ("coding-standards", "1.0.0", "backend", "claude-code")
            ),
        }
    )
    ctx = SkillvaultContext.for_test(
        vault=vault,
        tracker_store=store,
        git=FakeGit(
            repo_roots={REPO_ROOT: REPO_ROOT}, remote_urls={REPO_ROOT: {"origin": REPO_URL}}
        ),
        cwd=REPO_ROOT,
    )

    result = CliRunner().invoke(cli, ["status"], obj=ctx, catch_exceptions=False)

    assert result.exit_code == 0, result.output
    assert "standards" in result.output
    assert "coding-standards" in result.output
    assert "cursor" in result.output
    assert "claude-code" in result.output
    assert "github.com/acme/x: backend" in result.output


def test_status_without_vault_shows_only_installed() -> None:
    global_base = TargetBase.global_base()
    store = FakeTrackerStore(
        trackers={global_base: tracker_with(global_base, ("legacy", "3", "", "codex"))}
    )
    ctx = replace(SkillvaultContext.for_test(tracker_store=store), vault=None)

    result = CliRunner().invoke(cli, ["status"], obj=ctx, catch_exceptions=False)

    assert result.exit_code == 0, result.output
    assert "legacy" in result.output
    assert "codex" in result.output
