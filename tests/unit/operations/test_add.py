"""Tests for adding assets to the vault."""

from collections.abc import Callable

import pytest

from skillvault.core.errors import ConfigurationError, VaultError
from skillvault.core.scope import Scope
from skillvault.lockfile.io import fetch_lock_file
from skillvault.operations.add import AddResult, add_asset, decide_version, detect_asset_identity
from skillvault.vault.fake import FakeVault
from tests.test_utils.payloads import make_payload


def _accept(suggested: str) -> str:
    return suggested


def _add(
    vault: FakeVault,
    body: str,
    *,
    scopes: tuple[Scope, ...] | None = None,
    confirm_version: Callable[[str], str] = _accept,
) -> AddResult:
    return add_asset(
        vault,
        make_payload({"RULE.md": body}),
        name="standards",
        asset_type="rule",
        scopes=scopes,
        confirm_version=confirm_version,
        default_version="1",
    )


def test_first_add_creates_version_and_lock_entry() -> None:
    vault = FakeVault()

    result = _add(vault, "v1")

    assert result.created is True
    assert result.entry.key == "standards@1"
    assert result.entry.source_path == "assets/standards/1"
    assert [a.key for a in vault.added_assets] == ["standards@1"]
    lock = fetch_lock_file(vault, None)
    assert [e.key for e in lock.assets] == ["standards@1"]


def test_identical_content_reuses_latest_version() -> None:
    vault = FakeVault()
    _add(vault, "v1")

    result = _add(vault, "v1")

    assert result.created is False
    assert result.identical is True
    assert result.entry.version == "1"
    assert len(vault.added_assets) == 1


def test_changed_content_suggests_next_version() -> None:
    vault = FakeVault()
    _add(vault, "v1")
    suggestions: list[str] = []

    def confirm(suggested: str) -> str:
        suggestions.append(suggested)
        return suggested

    result = _add(vault, "v2", confirm_version=confirm)

    assert suggestions == ["2"]
    assert result.entry.key == "standards@2"
    assert [e.key for e in fetch_lock_file(vault, None).assets] == ["standards@2"]


def test_new_version_keeps_existing_scopes() -> None:
    vault = FakeVault()
    scope = Scope.create("github.com/acme/x", ["backend"])
    _add(vault, "v1", scopes=(scope,))

    result = _add(vault, "v2")

    assert result.entry.scopes == (scope,)


def test_identical_content_can_change_scopes() -> None:
    vault = FakeVault()
    _add(vault, "v1")
    scope = Scope.create("github.com/acme/x", [])

    result = _add(vault, "v1", scopes=(scope,))

    assert result.created is False
    lock = fetch_lock_file(vault, None)
    assert lock.assets[0].scopes == (scope,)


def test_existing_version_is_rejected() -> None:
    vault = FakeVault()
    _add(vault, "v1")

    with pytest.raises(VaultError, match="already exists"):
        _add(vault, "v2", confirm_version=lambda suggested: "1")


def test_decide_version_tolerates_fetch_failure() -> None:
    vault = FakeVault(
        payloads={("standards", "1"): make_payload({"RULE.md": "x"})},
        fetch_errors={("standards", "1"): VaultError("unreachable")},
    )

    decision = decide_version(vault, "standards", "rule", make_payload({"RULE.md": "x"}), "1")

    assert decision.latest == "1"
    assert decision.suggested == "2"
    assert decision.identical is False


def test_detect_identity_from_markers_and_metadata() -> None:
    assert detect_asset_identity(
        make_payload({"SKILL.md": "x"}), name=None, asset_type=None, fallback_name="deploy"
    ) == ("deploy", "skill")
    assert detect_asset_identity(
        make_payload(metadata={"asset": {"name": "gh", "type": "mcp"}}),
        name=None,
        asset_type=None,
        fallback_name="dir",
    ) == ("gh", "mcp")


def test_detect_identity_requires_a_type() -> None:
    with pytest.raises(ConfigurationError, match="--type"):
        detect_asset_identity(
            make_payload({"notes.txt": "x"}), name="notes", asset_type=None, fallback_name="x"
        )
