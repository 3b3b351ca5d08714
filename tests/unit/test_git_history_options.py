"""Tests for scan option validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from git_history.errors import ErrorKind, OptionsError
from git_history.options import (
    DEFAULT_BRANCH,
    ENV_BRANCH,
    ENV_PATH,
    ENV_SEARCH_PATH,
    describe_scan,
    options_from_env,
    options_from_mapping,
    scan_options,
)


def test_defaults() -> None:
    """Ensure only a path is required."""
    options = options_from_mapping({"path": "/srv/repo.git"})
    assert options.path == "/srv/repo.git"
    assert options.branch == DEFAULT_BRANCH == "refs/heads/master"
    assert options.git_search_path is None


def test_all_options() -> None:
    """Ensure every recognised option is carried through."""
    options = options_from_mapping(
        {"path": "repo", "branch": "refs/heads/main", "git_search_path": "/etc/gitcfg"}
    )
    assert options.branch == "refs/heads/main"
    assert options.git_search_path == "/etc/gitcfg"


def test_missing_path() -> None:
    """Ensure a missing path is a configuration error."""
    with pytest.raises(OptionsError, match="path is required") as excinfo:
        options_from_mapping({"branch": "refs/heads/main"})
    assert excinfo.value.kind is ErrorKind.CONFIG


def test_unknown_option_lists_valid_names() -> None:
    """Ensure unknown options are rejected with a hint."""
    with pytest.raises(OptionsError, match="valid options in this context are: path, branch"):
        options_from_mapping({"path": "repo", "depth": "3"})


def test_empty_values_count_as_unset() -> None:
    """Ensure empty branch and search path fall back to defaults."""
    options = options_from_mapping({"path": "repo", "branch": "", "git_search_path": ""})
    assert options.branch == DEFAULT_BRANCH
    assert options.git_search_path is None


def test_wrong_type_is_options_error() -> None:
    """Ensure type mismatches surface as options errors."""
    with pytest.raises(OptionsError):
        options_from_mapping({"path": "repo", "branch": 3})


def test_options_error_is_value_error() -> None:
    """Ensure callers catching ValueError also see option failures."""
    with pytest.raises(ValueError):
        scan_options("")


def test_scan_options_accepts_paths(tmp_path: Path) -> None:
    """Ensure path-like inputs are normalized to strings."""
    options = scan_options(tmp_path, git_search_path=tmp_path / "cfg")
    assert options.path == str(tmp_path)
    assert options.git_search_path == str(tmp_path / "cfg")


def test_options_are_frozen() -> None:
    """Ensure options cannot be changed after validation."""
    options = scan_options("repo")
    with pytest.raises(AttributeError):
        options.branch = "refs/heads/other"  # type: ignore[misc]


def test_describe_scan() -> None:
    """Ensure explain properties are labelled for display."""
    options = scan_options("repo", branch="refs/heads/dev")
    assert describe_scan(options) == {
        "Git Repository": "repo",
        "Git Branch": "refs/heads/dev",
        "Git Search Path": None,
    }


def test_options_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure environment variables configure a scan."""
    monkeypatch.setenv(ENV_PATH, "/srv/repo")
    monkeypatch.setenv(ENV_BRANCH, "refs/heads/release")
    monkeypatch.setenv(ENV_SEARCH_PATH, "  ")
    options = options_from_env()
    assert options is not None
    assert options.path == "/srv/repo"
    assert options.branch == "refs/heads/release"
    assert options.git_search_path is None


def test_options_from_env_without_path(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure no options are built when the path is unset."""
    monkeypatch.delenv(ENV_PATH, raising=False)
    assert options_from_env() is None
