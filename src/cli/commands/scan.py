"""Commit history scan commands: rows, count, sample and explain."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Iterable
from itertools import islice
from typing import Annotated, Literal

import msgspec
from cyclopts import Parameter, validators
from rich.console import Console
from rich.table import Table

from cli.exit_codes import ExitCode
from cli.groups import output_group, scan_group
from git_history.errors import GitHistoryError
from git_history.options import (
    DEFAULT_BRANCH,
    ENV_BRANCH,
    ENV_SEARCH_PATH,
    HistoryScanOptions,
    describe_scan,
    scan_options,
)
from git_history.records import CommitRecord, to_row
from git_history.scan import estimate_row_count, iterate_rows, sample_rows
from obs.otel import SCOPE_CLI, stage_span

_LOGGER = logging.getLogger(__name__)

type OutputFormat = Literal["jsonl", "table"]

PathArg = Annotated[
    str,
    Parameter(help="Path of a local git repository (working tree or .git directory)."),
]
BranchOpt = Annotated[
    str,
    Parameter(
        name="--branch",
        env_var=ENV_BRANCH,
        help="Full reference name to start the walk from.",
        group=scan_group,
    ),
]
SearchPathOpt = Annotated[
    str | None,
    Parameter(
        name="--search-path",
        env_var=ENV_SEARCH_PATH,
        help="Directory searched for global git configuration (process-wide).",
        group=scan_group,
    ),
]
FormatOpt = Annotated[
    Literal["jsonl", "table"],
    Parameter(name="--format", help="Row output format.", group=output_group),
]

_ENCODER = msgspec.json.Encoder()


def rows_command(
    path: PathArg,
    *,
    branch: BranchOpt = DEFAULT_BRANCH,
    search_path: SearchPathOpt = None,
    output_format: FormatOpt = "jsonl",
    limit: Annotated[
        int | None,
        Parameter(
            name="--limit",
            help="Stop after this many rows.",
            group=output_group,
            validator=validators.Number(gte=0),
        ),
    ] = None,
) -> int:
    """Print one row per commit, newest descendants first.

    Returns
    -------
    int
        Exit status code.
    """

    def _run(options: HistoryScanOptions) -> int:
        _require_non_negative("--limit", limit)
        records = iterate_rows(options)
        try:
            selected = records if limit is None else islice(records, limit)
            _write_records(selected, output_format)
        finally:
            records.close()
        return ExitCode.SUCCESS

    return _guarded("rows", path, branch, search_path, _run)


def count_command(
    path: PathArg,
    *,
    branch: BranchOpt = DEFAULT_BRANCH,
    search_path: SearchPathOpt = None,
) -> int:
    """Print the number of rows a full scan would produce.

    Returns
    -------
    int
        Exit status code.
    """

    def _run(options: HistoryScanOptions) -> int:
        sys.stdout.write(f"{estimate_row_count(options)}\n")
        return ExitCode.SUCCESS

    return _guarded("count", path, branch, search_path, _run)


def sample_command(
    path: PathArg,
    *,
    size: Annotated[
        int,
        Parameter(
            name=["--size", "-n"],
            help="Maximum rows to keep.",
            group=output_group,
            validator=validators.Number(gte=0),
        ),
    ] = 100,
    branch: BranchOpt = DEFAULT_BRANCH,
    search_path: SearchPathOpt = None,
    output_format: FormatOpt = "jsonl",
) -> int:
    """Print a bounded sample of rows followed by the scan totals.

    Returns
    -------
    int
        Exit status code.
    """

    def _run(options: HistoryScanOptions) -> int:
        _require_non_negative("--size", size)
        result = sample_rows(options, size, log_level=logging.INFO)
        _write_records(result.records, output_format)
        summary = {
            "total_rows_seen": result.total_rows_seen,
            "error_rows_seen": result.error_rows_seen,
            "sampled_rows": len(result.records),
        }
        sys.stderr.write(_ENCODER.encode(summary).decode() + "\n")
        return ExitCode.SUCCESS

    return _guarded("sample", path, branch, search_path, _run)


def explain_command(
    path: PathArg,
    *,
    branch: BranchOpt = DEFAULT_BRANCH,
    search_path: SearchPathOpt = None,
) -> int:
    """Show the repository, branch and search path a scan would use.

    Returns
    -------
    int
        Exit status code.
    """

    def _run(options: HistoryScanOptions) -> int:
        for label, value in describe_scan(options).items():
            sys.stdout.write(f"{label}: {value if value is not None else ''}\n")
        return ExitCode.SUCCESS

    return _guarded("explain", path, branch, search_path, _run)


def _guarded(
    command: str,
    path: str,
    branch: str,
    search_path: str | None,
    run: Callable[[HistoryScanOptions], int],
) -> int:
    try:
        options = scan_options(path, branch=branch, git_search_path=search_path)
        with stage_span(f"git_history.cli.{command}", stage=command, scope_name=SCOPE_CLI):
            return run(options)
    except (GitHistoryError, ValueError) as exc:
        _LOGGER.debug("Scan failed", exc_info=exc)
        sys.stderr.write(f"error: {exc}\n")
        return ExitCode.from_exception(exc)


def _require_non_negative(option: str, value: int | None) -> None:
    if value is not None and value < 0:
        msg = f"{option} must be non-negative, got {value}."
        raise ValueError(msg)


def _write_records(records: Iterable[CommitRecord], output_format: OutputFormat) -> None:
    if output_format == "table":
        _print_table(list(records))
        return
    for record in records:
        sys.stdout.write(_ENCODER.encode(to_row(record)).decode() + "\n")


def _print_table(records: list[CommitRecord]) -> None:
    table = Table(show_lines=False)
    table.add_column("sha", no_wrap=True)
    for column in ("author", "date", "+", "-", "files", "subject"):
        table.add_column(column)
    for record in records:
        table.add_row(
            record.sha[:12],
            record.author_name,
            record.commit_date.strftime("%Y-%m-%d %H:%M"),
            str(record.insertions),
            str(record.deletions),
            str(record.files_changed),
            record.message.splitlines()[0] if record.message else "",
        )
    Console(file=sys.stdout).print(table)


__all__ = ["count_command", "explain_command", "rows_command", "sample_command"]
