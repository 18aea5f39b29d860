"""Tests for per-client install locations and behavior."""

from pathlib import Path

from skillvault.clients.base import InstallItem
from skillvault.clients.claude_code import ClaudeCodeClient
from skillvault.clients.codex import CodexClient
from skillvault.clients.cursor import CursorClient
from skillvault.clients.gemini import GeminiClient
from skillvault.core.assets import Asset
from skillvault.core.scope import InstallTarget, RepoContext, Scope, TargetBase
from tests.test_utils.payloads import make_payload, rule_payload, skill_payload

RULE = Asset(name="standards", version="1", type="rule")
SKILL = Asset(name="deploy", version="1", type="skill")
AGENT = Asset(name="reviewer", version="1", type="agent")


def test_claude_code_global_locations(tmp_path: Path) -> None:
    client = ClaudeCodeClient(tmp_path)
    target = InstallTarget.global_target()

    assert client.location_for(SKILL, target).path == tmp_path / ".claude" / "skills" / "deploy"
    assert client.location_for(RULE, target).path == tmp_path / ".claude" / "rules" / "standards.md"
    mcp = client.location_for(Asset(name="gh", version="1", type="mcp"), target)
    assert mcp.path == tmp_path / ".claude.json"
    assert mcp.key == "gh"


def test_claude_code_honors_path_scopes(tmp_path: Path) -> None:
    client = ClaudeCodeClient(tmp_path / "home")
    repo = tmp_path / "repo"
    target = InstallTarget.within(TargetBase(repo_root=repo), "backend")

    location = client.location_for(RULE, client.physical_target(target))

    assert location.path == repo / "backend" / ".claude" / "rules" / "standards.md"
    mcp = client.location_for(Asset(name="gh", version="1", type="mcp"), target)
    assert mcp.path == repo / "backend" / ".mcp.json"


def test_gemini_collapses_path_scopes_to_repo_root(tmp_path: Path) -> None:
    client = GeminiClient(tmp_path / "home")
    repo = tmp_path / "repo"
    target = InstallTarget.within(TargetBase(repo_root=repo), "backend")

    physical = client.physical_target(target)

    assert physical == InstallTarget(kind="repo", repo_root=repo, path="")
    assert client.location_for(RULE, physical).path == repo / ".gemini" / "rules" / "standards.md"


def test_codex_repo_skills_use_agents_dir(tmp_path: Path) -> None:
    client = CodexClient(tmp_path / "home")
    repo = tmp_path / "repo"
    target = InstallTarget(kind="repo", repo_root=repo, path="")

    location = client.location_for(SKILL, target)

    assert location.path == repo / ".agents" / "skills" / "deploy"
    mcp = client.location_for(Asset(name="gh", version="1", type="mcp"), target)
    assert mcp.kind == "mcp-toml"
    assert mcp.path == repo / ".codex" / "config.toml"


def test_cursor_rules_use_mdc(tmp_path: Path) -> None:
    client = CursorClient(tmp_path)

    location = client.location_for(RULE, InstallTarget.global_target())

    assert location.path == tmp_path / ".cursor" / "rules" / "standards.mdc"


def test_detection_checks_home_directory(tmp_path: Path) -> None:
    (tmp_path / ".cursor").mkdir()

    assert CursorClient(tmp_path).is_detected() is True
    assert GeminiClient(tmp_path).is_detected() is False


def test_install_and_uninstall_round_trip(tmp_path: Path) -> None:
    client = ClaudeCodeClient(tmp_path)
    target = InstallTarget.global_target()
    items = [
        InstallItem(asset=RULE, payload=rule_payload("standards", "1")),
        InstallItem(asset=SKILL, payload=skill_payload("deploy", "1")),
    ]

    results = client.install(items, target)

    assert [r.status for r in results] == ["success", "success"]
    assert client.is_materialized(RULE, target)
    assert client.is_materialized(SKILL, target)

    results = client.uninstall([RULE, SKILL], target)

    assert [r.status for r in results] == ["success", "success"]
    assert not client.is_materialized(RULE, target)
    assert not client.is_materialized(SKILL, target)


def test_unsupported_type_is_skipped(tmp_path: Path) -> None:
    client = CursorClient(tmp_path)
    items = [InstallItem(asset=AGENT, payload=make_payload({"AGENT.md": "x"}))]

    results = client.install(items, InstallTarget.global_target())

    assert results[0].status == "skipped"
    assert "does not support agent" in results[0].message


def test_one_failure_does_not_stop_other_items(tmp_path: Path) -> None:
    client = ClaudeCodeClient(tmp_path)
    items = [
        InstallItem(asset=RULE, payload=make_payload({"README.md": "no prompt file"})),
        InstallItem(asset=SKILL, payload=skill_payload("deploy", "1")),
    ]

    results = client.install(items, InstallTarget.global_target())

    assert results[0].failed
    assert results[0].error is not None
    assert results[1].succeeded


def test_install_targets_for_scope(tmp_path: Path) -> None:
    repo = tmp_path / "repo"
    context = RepoContext(root=repo, remote_url="git@github.com:acme/app.git", is_override=False)
    scope = Scope.create("github.com/acme/app", ["backend", "frontend"])

    assert ClaudeCodeClient(tmp_path).install_targets_for(scope, context) == [
        repo / "backend" / ".claude",
        repo / "frontend" / ".claude",
    ]
    assert GeminiClient(tmp_path).install_targets_for(scope, context) == [repo / ".gemini"]
