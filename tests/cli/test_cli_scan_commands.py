"""Tests for the git-history scan commands."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, get_args

import pytest

from cli.app import app
from cli.commands.scan import (
    PathArg,
    count_command,
    explain_command,
    rows_command,
    sample_command,
)
from cli.commands.version import get_version_info, version_command
from cli.exit_codes import ExitCode
from cli.groups import admin_group

pytest.importorskip("pygit2")

if TYPE_CHECKING:
    from conftest import HistoryRepo


def test_rows_jsonl(history_repo: HistoryRepo, capsys: pytest.CaptureFixture[str]) -> None:
    """Ensure rows are printed as JSON lines in walk order."""
    assert rows_command(str(history_repo.path)) == ExitCode.SUCCESS
    lines = capsys.readouterr().out.splitlines()
    rows = [json.loads(line) for line in lines]
    assert [row["sha"] for row in rows] == [history_repo.b, history_repo.a, history_repo.root]
    assert rows[0]["author_email"] == "test@example.com"
    assert rows[-1]["insertions"] == 2
    assert list(rows[0]) == [
        "sha",
        "message",
        "author_name",
        "author_email",
        "commit_date",
        "insertions",
        "deletions",
        "files_changed",
    ]


def test_rows_limit(history_repo: HistoryRepo, capsys: pytest.CaptureFixture[str]) -> None:
    """Ensure the row limit stops the scan early."""
    assert rows_command(str(history_repo.path), limit=1) == ExitCode.SUCCESS
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 1
    assert json.loads(lines[0])["sha"] == history_repo.b


def test_rows_table(history_repo: HistoryRepo, capsys: pytest.CaptureFixture[str]) -> None:
    """Ensure table output shows abbreviated hashes and subjects."""
    assert rows_command(str(history_repo.path), output_format="table") == ExitCode.SUCCESS
    out = capsys.readouterr().out
    assert history_repo.b[:12] in out
    assert "edit a" in out


def test_count(history_repo: HistoryRepo, capsys: pytest.CaptureFixture[str]) -> None:
    """Ensure count prints the row estimate."""
    assert count_command(str(history_repo.path)) == ExitCode.SUCCESS
    assert capsys.readouterr().out.strip() == "3"


def test_sample(history_repo: HistoryRepo, capsys: pytest.CaptureFixture[str]) -> None:
    """Ensure sample prints the kept rows and the totals on stderr."""
    assert sample_command(str(history_repo.path), size=2) == ExitCode.SUCCESS
    captured = capsys.readouterr()
    assert len(captured.out.splitlines()) == 2
    summary = json.loads(captured.err.strip().splitlines()[-1])
    assert summary == {"total_rows_seen": 3, "error_rows_seen": 0, "sampled_rows": 2}


def test_explain(capsys: pytest.CaptureFixture[str]) -> None:
    """Ensure explain shows the scan properties without opening the repository."""
    code = explain_command("/srv/repo.git", branch="refs/heads/main", search_path="/etc/git")
    assert code == ExitCode.SUCCESS
    assert capsys.readouterr().out.splitlines() == [
        "Git Repository: /srv/repo.git",
        "Git Branch: refs/heads/main",
        "Git Search Path: /etc/git",
    ]


def test_missing_branch_exit_code(
    history_repo: HistoryRepo,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Ensure a missing branch is reported with the branch exit code."""
    code = count_command(str(history_repo.path), branch="refs/heads/nope")
    assert code == ExitCode.BRANCH_ERROR
    assert "Couldn't find branch refs/heads/nope" in capsys.readouterr().err


def test_not_a_repository_exit_code(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Ensure a plain directory is reported with the repository exit code."""
    assert rows_command(str(tmp_path)) == ExitCode.REPOSITORY_ERROR
    assert "Failed opening repository" in capsys.readouterr().err


def test_empty_path_exit_code(capsys: pytest.CaptureFixture[str]) -> None:
    """Ensure invalid options are reported with the config exit code."""
    assert count_command("") == ExitCode.CONFIG_ERROR
    assert "path is required" in capsys.readouterr().err


def test_version(capsys: pytest.CaptureFixture[str]) -> None:
    """Ensure version output is JSON with library versions."""
    assert version_command() == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload == json.loads(json.dumps(get_version_info()))
    assert "pygit2" in payload["dependencies"]


def test_unreadable_commit_is_counted(
    history_repo: HistoryRepo,
    drop_object: Callable[[Path, str], None],
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Ensure a damaged history still produces a count instead of a traceback."""
    drop_object(history_repo.path, history_repo.a)
    assert count_command(str(history_repo.path)) == ExitCode.SUCCESS
    assert int(capsys.readouterr().out.strip()) >= 1


@pytest.mark.parametrize("limit", [-1, -5])
def test_negative_limit_is_rejected(
    history_repo: HistoryRepo,
    capsys: pytest.CaptureFixture[str],
    limit: int,
) -> None:
    """Ensure a negative row limit is a validation error."""
    assert rows_command(str(history_repo.path), limit=limit) == ExitCode.VALIDATION_ERROR
    captured = capsys.readouterr()
    assert "--limit must be non-negative" in captured.err
    assert captured.out == ""


def test_negative_sample_size_is_rejected(
    history_repo: HistoryRepo,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Ensure a negative sample size is a validation error."""
    assert sample_command(str(history_repo.path), size=-1) == ExitCode.VALIDATION_ERROR
    assert "--size must be non-negative" in capsys.readouterr().err


def test_zero_limit_prints_nothing(
    history_repo: HistoryRepo,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Ensure a zero limit is accepted and prints no rows."""
    assert rows_command(str(history_repo.path), limit=0) == ExitCode.SUCCESS
    assert capsys.readouterr().out == ""


def test_version_is_an_admin_command() -> None:
    """Ensure version is listed with the administrative commands."""
    assert admin_group in tuple(app["version"].group)


def test_path_help_describes_local_repository() -> None:
    """Ensure the path argument is documented as a local repository."""
    help_text = get_args(PathArg)[1].help
    assert "local git repository" in help_text
    assert "URL" not in help_text
