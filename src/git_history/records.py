"""Commit records, the exposed row schema, and host-side conversion.

``build_record`` is pure assembly. Conversion to host epochs and Arrow
batches happens at the boundary, in ``to_row``/``record_batch``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta, timezone
from enum import StrEnum

import pyarrow as pa
import pygit2

SHA_LENGTH = 40
_SHA_RE = re.compile(r"^[0-9a-f]{40}$")

COMMIT_SCHEMA = pa.schema(
    [
        pa.field("sha", pa.string(), nullable=False),
        pa.field("message", pa.string(), nullable=False),
        pa.field("author_name", pa.string(), nullable=False),
        pa.field("author_email", pa.string(), nullable=False),
        pa.field("commit_date", pa.timestamp("us", tz="UTC"), nullable=False),
        pa.field("insertions", pa.int32(), nullable=False),
        pa.field("deletions", pa.int32(), nullable=False),
        pa.field("files_changed", pa.int32(), nullable=False),
    ]
)
COMMIT_COLUMNS: tuple[str, ...] = tuple(COMMIT_SCHEMA.names)


class HostEpoch(StrEnum):
    """Epochs a host may count timestamps from."""

    UNIX = "unix"
    POSTGRES = "postgres"


_EPOCH_OFFSET_S: dict[HostEpoch, int] = {
    HostEpoch.UNIX: 0,
    # 2000-01-01T00:00:00Z in Unix seconds.
    HostEpoch.POSTGRES: 946_684_800,
}


@dataclass(frozen=True)
class CommitMetadata:
    """Read-only snapshot of a commit taken at visit time."""

    commit_id: str
    message: str
    author_name: str
    author_email: str
    authored_at: datetime


@dataclass(frozen=True)
class DiffStats:
    """Line and file change counts against the first parent."""

    insertions: int
    deletions: int
    files_changed: int

    def __post_init__(self) -> None:
        for name in ("insertions", "deletions", "files_changed"):
            if getattr(self, name) < 0:
                msg = f"{name} must be non-negative."
                raise ValueError(msg)

    @classmethod
    def zero(cls) -> DiffStats:
        """Return explicit zero statistics.

        Returns
        -------
        DiffStats
            Statistics with every counter set to zero.
        """
        return cls(insertions=0, deletions=0, files_changed=0)


@dataclass(frozen=True)
class CommitRecord:
    """One row of commit history, in exposed column order."""

    sha: str
    message: str
    author_name: str
    author_email: str
    commit_date: datetime
    insertions: int
    deletions: int
    files_changed: int

    @property
    def metadata(self) -> CommitMetadata:
        """Return the commit metadata part of the record."""
        return CommitMetadata(
            commit_id=self.sha,
            message=self.message,
            author_name=self.author_name,
            author_email=self.author_email,
            authored_at=self.commit_date,
        )

    @property
    def stats(self) -> DiffStats:
        """Return the diff statistics part of the record."""
        return DiffStats(
            insertions=self.insertions,
            deletions=self.deletions,
            files_changed=self.files_changed,
        )


def build_record(metadata: CommitMetadata, stats: DiffStats) -> CommitRecord:
    """Assemble a commit record from metadata and diff statistics.

    Returns
    -------
    CommitRecord
        Record with a lowercase 40-character hash.

    Raises
    ------
    ValueError
        Raised when the commit id is not a 40-character hex hash.
    """
    sha = metadata.commit_id.lower()
    if _SHA_RE.match(sha) is None:
        msg = f"Commit id must be {SHA_LENGTH} hex characters: {metadata.commit_id!r}."
        raise ValueError(msg)
    return CommitRecord(
        sha=sha,
        message=metadata.message,
        author_name=metadata.author_name,
        author_email=metadata.author_email,
        commit_date=metadata.authored_at,
        insertions=stats.insertions,
        deletions=stats.deletions,
        files_changed=stats.files_changed,
    )


def signature_time(signature: pygit2.Signature) -> datetime:
    """Return a signature's timestamp with its recorded UTC offset.

    Returns
    -------
    datetime.datetime
        Timezone-aware timestamp.
    """
    offset = timezone(timedelta(minutes=signature.offset))
    return datetime.fromtimestamp(signature.time, tz=offset)


def metadata_from_commit(commit: pygit2.Commit) -> CommitMetadata:
    """Snapshot the author metadata of a pygit2 commit.

    Returns
    -------
    CommitMetadata
        Metadata using the author signature.
    """
    author = commit.author
    return CommitMetadata(
        commit_id=str(commit.id),
        message=commit.message,
        author_name=author.name,
        author_email=author.email,
        authored_at=signature_time(author),
    )


def host_timestamp_micros(when: datetime, *, epoch: HostEpoch = HostEpoch.UNIX) -> int:
    """Convert an aware timestamp to microseconds since a host epoch.

    Returns
    -------
    int
        Microseconds since ``epoch``; negative before it.
    """
    seconds = int(when.astimezone(UTC).timestamp())
    return (seconds - _EPOCH_OFFSET_S[epoch]) * 1_000_000


def to_row(record: CommitRecord) -> dict[str, object]:
    """Return a record as a column-name keyed row.

    Returns
    -------
    dict[str, object]
        Row values in schema order.
    """
    return {name: getattr(record, name) for name in COMMIT_COLUMNS}


def record_batch(records: Iterable[CommitRecord]) -> pa.RecordBatch:
    """Return an Arrow record batch for the given records.

    Returns
    -------
    pyarrow.RecordBatch
        Batch with ``COMMIT_SCHEMA``.
    """
    rows = [to_row(record) for record in records]
    return pa.RecordBatch.from_pylist(rows, schema=COMMIT_SCHEMA)


__all__ = [
    "COMMIT_COLUMNS",
    "COMMIT_SCHEMA",
    "SHA_LENGTH",
    "CommitMetadata",
    "CommitRecord",
    "DiffStats",
    "HostEpoch",
    "build_record",
    "host_timestamp_micros",
    "metadata_from_commit",
    "record_batch",
    "signature_time",
    "to_row",
]
