"""Tests for removing assets from the lock file and editing scopes."""

import pytest

from skillvault.core.errors import AssetNotInLockError
from skillvault.core.scope import Global, Scope
from skillvault.lockfile.io import fetch_lock_file, write_lock_file
from skillvault.operations.remove import remove_asset, set_asset_scopes
from skillvault.vault.fake import FakeVault
from tests.test_utils.builders import lock_of, locked
from tests.test_utils.payloads import rule_payload


def _vault() -> FakeVault:
    vault = FakeVault(
        payloads={
            ("standards", "1"): rule_payload("standards", "1"),
            ("standards", "2"): rule_payload("standards", "2"),
            ("style", "1"): rule_payload("style", "1"),
        }
    )
    write_lock_file(
        vault, lock_of(locked("standards", "1"), locked("standards", "2"), locked("style"))
    )
    return vault


def test_remove_drops_every_version_by_default() -> None:
    vault = _vault()

    removed = remove_asset(vault, "standards")

    assert [e.key for e in removed] == ["standards@1", "standards@2"]
    assert [e.key for e in fetch_lock_file(vault, None).assets] == ["style@1"]
    assert vault.removed_assets == []


def test_remove_single_version_and_delete_payload() -> None:
    vault = _vault()

    remove_asset(vault, "standards", version="1", delete_payload=True)

    assert [e.key for e in fetch_lock_file(vault, None).assets] == ["standards@2", "style@1"]
    assert vault.removed_assets == [("standards", "1")]


def test_remove_unknown_asset_raises() -> None:
    with pytest.raises(AssetNotInLockError):
        remove_asset(_vault(), "missing")


def test_set_scopes_keeps_other_versions() -> None:
    vault = _vault()
    scope = Scope.create("github.com/acme/x", ["backend"])

    updated = set_asset_scopes(vault, "standards", (scope,), version="2")

    assert [e.key for e in updated] == ["standards@2"]
    lock = fetch_lock_file(vault, None)
    assert [e.key for e in lock.assets] == ["standards@1", "standards@2", "style@1"]
    assert lock.find("standards", "2")[0].scopes == (scope,)
    assert lock.find("standards", "1")[0].placement == Global()


def test_empty_scopes_make_asset_global() -> None:
    vault = _vault()
    set_asset_scopes(vault, "style", (Scope.create("github.com/acme/x", []),))

    set_asset_scopes(vault, "style", ())

    assert fetch_lock_file(vault, None).find("style")[0].placement == Global()
