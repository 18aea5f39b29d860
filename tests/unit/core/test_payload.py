"""Tests for reading zipped asset payloads."""

from pathlib import Path

import pytest

from skillvault.core.payload import AssetPayload, InvalidPayloadError
from tests.test_utils.payloads import make_payload, rule_payload


def test_metadata_is_parsed() -> None:
    payload = AssetPayload(rule_payload("standards", "1"))

    assert payload.metadata()["asset"]["name"] == "standards"
    assert payload.list_files() == ["RULE.md", "metadata.toml"]


def test_payload_without_metadata_has_empty_metadata() -> None:
    assert AssetPayload(make_payload({"RULE.md": "# Rule"})).metadata() == {}


def test_truncated_archive_is_invalid() -> None:
    data = rule_payload("standards", "1")

    with pytest.raises(InvalidPayloadError, match="not a valid zip"):
        AssetPayload(data[: len(data) // 2])


def test_metadata_that_is_not_utf8_is_invalid() -> None:
    payload = AssetPayload(make_payload({"RULE.md": "# Rule", "metadata.toml": b"\xff\xfe"}))

    with pytest.raises(InvalidPayloadError, match="not valid UTF-8"):
        payload.metadata()


def test_metadata_that_is_not_toml_is_invalid() -> None:
    payload = AssetPayload(make_payload({"metadata.toml": "[asset"}))

    with pytest.raises(InvalidPayloadError, match="Invalid metadata.toml"):
        payload.metadata()


def test_extract_refuses_paths_outside_destination(tmp_path: Path) -> None:
    payload = AssetPayload(make_payload({"../escape.md": "x"}))

    with pytest.raises(InvalidPayloadError, match="unsafe path"):
        payload.extract_to(tmp_path / "dest")
