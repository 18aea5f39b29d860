"""Tests for repository context detection."""

from pathlib import Path

import pytest

from skillvault.core.errors import ConfigurationError
from skillvault.core.repo_context import detect_repo_context
from skillvault.gateway.git.fake import FakeGit


def test_detects_repo_root_and_remote() -> None:
    root = Path("/work/app")
    git = FakeGit(
        repo_roots={root: root},
        remote_urls={root: {"origin": "git@github.com:acme/app.git"}},
    )

    context = detect_repo_context(git, root / "src", None)

    assert context is not None
    assert context.root == root
    assert context.remote_url == "git@github.com:acme/app.git"
    assert context.is_override is False


def test_outside_repository_has_no_context() -> None:
    assert detect_repo_context(FakeGit(), Path("/tmp/elsewhere"), None) is None


def test_repo_without_origin_still_has_context() -> None:
    root = Path("/work/app")
    context = detect_repo_context(FakeGit(repo_roots={root: root}), root, None)

    assert context is not None
    assert context.remote_url is None


def test_override_target_becomes_root(tmp_path: Path) -> None:
    """--target wins over what git reports as the top level."""
    repo = tmp_path / "repo"
    sub = repo / "packages" / "web"
    sub.mkdir(parents=True)
    git = FakeGit(
        repo_roots={repo: repo},
        remote_urls={repo: {"origin": "https://github.com/acme/app"}},
    )

    context = detect_repo_context(git, Path("/unrelated"), sub)

    assert context is not None
    assert context.root == sub.resolve()
    assert context.remote_url == "https://github.com/acme/app"
    assert context.is_override is True


def test_override_target_must_exist(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="does not exist"):
        detect_repo_context(FakeGit(), tmp_path, tmp_path / "missing")


def test_override_target_must_be_directory(tmp_path: Path) -> None:
    file_path = tmp_path / "file.txt"
    file_path.write_text("x", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="not a directory"):
        detect_repo_context(FakeGit(), tmp_path, file_path)


def test_empty_remote_url_is_treated_as_missing() -> None:
    root = Path("/work/app")
    git = FakeGit(repo_roots={root: root}, remote_urls={root: {"origin": ""}})

    context = detect_repo_context(git, root, None)

    assert context is not None
    assert context.remote_url is None
