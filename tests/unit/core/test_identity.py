"""Tests for payload content identity."""

from skillvault.core.identity import fingerprint_payload, is_identical
from tests.test_utils.payloads import make_payload


def test_identical_content_in_different_member_order() -> None:
    files = {"SKILL.md": "# Skill", "lib/helper.py": "print('x')\n"}
    a = make_payload(files)
    b = make_payload(files, reverse_order=True)

    assert a != b
    assert is_identical(a, b) is True


def test_changed_bytes_are_not_identical() -> None:
    a = make_payload({"SKILL.md": "# Skill"})
    b = make_payload({"SKILL.md": "# Skill!"})

    assert is_identical(a, b) is False


def test_added_file_is_not_identical() -> None:
    a = make_payload({"SKILL.md": "# Skill"})
    b = make_payload({"SKILL.md": "# Skill", "extra.md": ""})

    assert is_identical(a, b) is False


def test_metadata_version_is_ignored() -> None:
    """A stored copy stamped with its version still matches the unstamped source."""
    a = make_payload({"SKILL.md": "x"}, metadata={"asset": {"name": "s", "type": "skill"}})
    b = make_payload(
        {"SKILL.md": "x"}, metadata={"asset": {"name": "s", "type": "skill", "version": "3"}}
    )

    assert is_identical(a, b) is True


def test_other_metadata_changes_matter() -> None:
    a = make_payload({"SKILL.md": "x"}, metadata={"asset": {"name": "s", "type": "skill"}})
    b = make_payload({"SKILL.md": "x"}, metadata={"asset": {"name": "s", "type": "rule"}})

    assert is_identical(a, b) is False


def test_invalid_archive_is_never_identical() -> None:
    assert is_identical(b"not a zip", b"not a zip") is False


def test_fingerprint_uses_sha256_prefix() -> None:
    hashes = fingerprint_payload(make_payload({"a.txt": "a"}))

    assert list(hashes) == ["a.txt"]
    assert hashes["a.txt"].startswith("sha256:")
