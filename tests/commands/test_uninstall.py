"""Tests for the uninstall command."""

from click.testing import CliRunner

from skillvault.cli.cli import cli
from skillvault.clients.registry import ClientRegistry
from skillvault.core.context import SkillvaultContext
from skillvault.core.scope import TargetBase
from skillvault.tracker.fake import FakeTrackerStore
from tests.fakes.client import FakeClient
from tests.test_utils.builders import tracker_with

GLOBAL = TargetBase.global_base()


def _setup() -> tuple[SkillvaultContext, FakeTrackerStore, FakeClient]:
    store = FakeTrackerStore(
        trackers={
            GLOBAL: tracker_with(
                GLOBAL, ("standards", "1", "", "claude-code"), ("style", "1", "", "claude-code")
            )
        }
    )
    client = FakeClient("claude-code")
    ctx = SkillvaultContext.for_test(tracker_store=store, registry=ClientRegistry((client,)))
    return ctx, store, client


def test_requires_names_or_all() -> None:
    ctx, _, _ = _setup()

    result = CliRunner().invoke(cli, ["uninstall"], obj=ctx, catch_exceptions=False)

    assert result.exit_code == 1
    assert "Specify asset names or --all" in result.output


def test_uninstall_named_asset() -> None:
    ctx, store, client = _setup()

    result = CliRunner().invoke(
        cli, ["uninstall", "standards", "--yes"], obj=ctx, catch_exceptions=False
    )

    assert result.exit_code == 0, result.output
    assert client.operations == ["uninstall:standards@1"]
    tracker = store.stored(GLOBAL)
    assert tracker is not None
    assert [e.name for e in tracker.assets] == ["style"]


def test_uninstall_all_clears_tracker() -> None:
    ctx, store, _ = _setup()

    result = CliRunner().invoke(
        cli, ["uninstall", "--all", "-y"], obj=ctx, catch_exceptions=False
    )

    assert result.exit_code == 0, result.output
    assert "2 succeeded, 0 failed" in result.output
    assert store.stored(GLOBAL) is None


def test_declining_confirmation_aborts() -> None:
    ctx, store, client = _setup()

    result = CliRunner().invoke(
        cli, ["uninstall", "--all"], obj=ctx, input="n\n", catch_exceptions=False
    )

    assert "Uninstall 2 item(s)?" in result.output
    assert "Aborted." in result.output
    assert client.operations == []
    assert store.saved == []


def test_unknown_name_has_nothing_to_do() -> None:
    ctx, _, _ = _setup()

    result = CliRunner().invoke(cli, ["uninstall", "missing"], obj=ctx, catch_exceptions=False)

    assert result.exit_code == 0
    assert "Nothing to uninstall." in result.output


def test_dry_run_lists_plan() -> None:
    ctx, store, _ = _setup()

    result = CliRunner().invoke(
        cli, ["uninstall", "style", "--dry-run"], obj=ctx, catch_exceptions=False
    )

    assert "uninstall style@1 from claude-code [global]" in result.output
    assert "Dry run: no changes made." in result.output
    assert store.saved == []
