"""Commit history extraction for host query engines.

This package exposes a git branch's history as rows:
- Branch resolution through advertised references
- Topological ancestor walks
- First-parent diff statistics
- Row counting, full scans and bounded samples over one traversal
"""

from __future__ import annotations

from git_history.driver import (
    CommitConsumer,
    RowCounter,
    RowEmitter,
    RowSampler,
    consumer_handler,
    drive,
    iter_events,
)
from git_history.errors import (
    BranchNotFoundError,
    CommitError,
    CommitLookupError,
    DiffComputationError,
    ErrorKind,
    GitHistoryError,
    OptionsError,
    RemoteListError,
    RepositoryOpenError,
    SessionClosedError,
    SessionStateError,
)
from git_history.options import (
    DEFAULT_BRANCH,
    HistoryScanOptions,
    describe_scan,
    options_from_env,
    options_from_mapping,
    scan_options,
)
from git_history.records import (
    COMMIT_SCHEMA,
    CommitMetadata,
    CommitRecord,
    DiffStats,
    HostEpoch,
    build_record,
    host_timestamp_micros,
)
from git_history.scan import (
    SampleResult,
    emit_rows,
    estimate_row_count,
    iterate_rows,
    read_table,
    record_batch_reader,
    sample_rows,
)
from git_history.session import CommitEvent, CommitFailed, CommitVisited, TraversalSession

__all__ = [
    "COMMIT_SCHEMA",
    "DEFAULT_BRANCH",
    "BranchNotFoundError",
    "CommitConsumer",
    "CommitError",
    "CommitLookupError",
    "CommitEvent",
    "CommitFailed",
    "CommitMetadata",
    "CommitRecord",
    "CommitVisited",
    "DiffComputationError",
    "DiffStats",
    "ErrorKind",
    "GitHistoryError",
    "HistoryScanOptions",
    "HostEpoch",
    "OptionsError",
    "RemoteListError",
    "RepositoryOpenError",
    "RowCounter",
    "RowEmitter",
    "RowSampler",
    "SampleResult",
    "SessionClosedError",
    "SessionStateError",
    "TraversalSession",
    "build_record",
    "consumer_handler",
    "describe_scan",
    "drive",
    "emit_rows",
    "estimate_row_count",
    "host_timestamp_micros",
    "iter_events",
    "iterate_rows",
    "options_from_env",
    "options_from_mapping",
    "read_table",
    "record_batch_reader",
    "sample_rows",
    "scan_options",
]
