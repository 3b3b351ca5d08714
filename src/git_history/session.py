"""Traversal sessions: one open repository, one walk, one teardown."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum
from types import TracebackType

import pygit2

from git_history.diffstats import commit_diff_stats
from git_history.errors import (
    CommitError,
    CommitLookupError,
    DiffComputationError,
    ErrorKind,
    SessionClosedError,
    SessionStateError,
)
from git_history.options import HistoryScanOptions
from git_history.records import CommitRecord, DiffStats, build_record, metadata_from_commit
from git_history.refs import RepositoryHandle, resolve
from git_history.walker import WalkCursor
from git_history.walker import start as start_walk

_LOGGER = logging.getLogger(__name__)


class SessionState(StrEnum):
    """Lifecycle states of a traversal session."""

    UNOPENED = "unopened"
    RESOLVING = "resolving"
    WALKING = "walking"
    CLOSED = "closed"


@dataclass(frozen=True)
class CommitVisited:
    """A walked commit with its record; ``diff_error`` is set for zero-filled stats."""

    record: CommitRecord
    diff_error: CommitError | None = None


@dataclass(frozen=True)
class CommitFailed:
    """A walk step whose commit could not be read."""

    error: CommitError


type CommitEvent = CommitVisited | CommitFailed


class TraversalSession:
    """Drive one history walk through ``UNOPENED -> RESOLVING -> WALKING -> CLOSED``.

    The repository handle is released exactly once, on entry to ``CLOSED``,
    whether the walk is exhausted, fails, or is abandoned. A closed session
    cannot be reopened.
    """

    def __init__(self, options: HistoryScanOptions) -> None:
        self.options = options
        self.state = SessionState.UNOPENED
        self.start_id: str | None = None
        self._handle: RepositoryHandle | None = None
        self._cursor: WalkCursor | None = None

    def open(self) -> TraversalSession:
        """Resolve the starting commit and position the walk before it.

        Returns
        -------
        TraversalSession
            This session, now walking.

        Raises
        ------
        SessionClosedError
            Raised when the session was already closed.
        SessionStateError
            Raised when the session was already opened.
        """
        if self.state is SessionState.CLOSED:
            raise SessionClosedError
        if self.state is not SessionState.UNOPENED:
            msg = f"Traversal session cannot be opened from state {self.state}"
            raise SessionStateError(msg)
        self.state = SessionState.RESOLVING
        try:
            handle, start_id = resolve(
                self.options.path,
                self.options.branch,
                self.options.git_search_path,
            )
        except BaseException:
            self.state = SessionState.CLOSED
            raise
        self._handle = handle
        self.start_id = start_id
        try:
            self._cursor = start_walk(handle, start_id)
        except BaseException:
            self.close()
            raise
        self.state = SessionState.WALKING
        return self

    def next_event(self) -> CommitEvent | None:
        """Advance the walk by one commit.

        A commit the walk cannot read yields one ``CommitFailed`` event and
        ends the walk.

        Returns
        -------
        CommitEvent | None
            Event for the next commit, or ``None`` after the last one; the
            session is closed at that point.

        Raises
        ------
        SessionClosedError
            Raised when the session was already closed.
        SessionStateError
            Raised when the session was never opened.
        """
        if self.state is SessionState.CLOSED:
            raise SessionClosedError
        if self.state is not SessionState.WALKING or self._cursor is None:
            msg = f"Traversal session is not walking (state {self.state})"
            raise SessionStateError(msg)
        try:
            commit_id = self._cursor.next()
        except CommitLookupError as exc:
            _LOGGER.warning("History walk stopped at an unreadable commit: %s", exc.detail)
            error = CommitError(exc.commit_id, ErrorKind.LOOKUP, exc.detail, skipped=True)
            return CommitFailed(error)
        except BaseException:
            self.close()
            raise
        if commit_id is None:
            self.close()
            return None
        try:
            return self._visit(commit_id)
        except BaseException:
            self.close()
            raise

    def events(self) -> Iterator[CommitEvent]:
        """Yield events until the walk is exhausted.

        Yields
        ------
        CommitEvent
            One event per walked commit.
        """
        while (event := self.next_event()) is not None:
            yield event

    def close(self) -> None:
        """Release the walk and the repository handle."""
        if self.state is SessionState.CLOSED:
            return
        self.state = SessionState.CLOSED
        cursor, handle = self._cursor, self._handle
        self._cursor = None
        self._handle = None
        if cursor is not None:
            cursor.close()
        if handle is not None:
            handle.close()

    def _visit(self, commit_id: str) -> CommitEvent:
        handle = self._handle
        if handle is None:
            raise SessionClosedError
        repo = handle.repo
        try:
            commit = repo[pygit2.Oid(hex=commit_id)].peel(pygit2.Commit)
            metadata = metadata_from_commit(commit)
        except (pygit2.GitError, KeyError, ValueError) as exc:
            _LOGGER.warning("Failed to look up commit %s: %s", commit_id, exc)
            error = CommitError(commit_id, ErrorKind.LOOKUP, str(exc), skipped=True)
            return CommitFailed(error)
        try:
            stats = commit_diff_stats(repo, commit)
        except DiffComputationError as exc:
            _LOGGER.warning("Zero-filling diff stats for %s: %s", commit_id, exc.detail)
            error = CommitError(commit_id, ErrorKind.DIFF, exc.detail)
            return CommitVisited(build_record(metadata, DiffStats.zero()), diff_error=error)
        return CommitVisited(build_record(metadata, stats))

    def __enter__(self) -> TraversalSession:
        if self.state is SessionState.UNOPENED:
            self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


__all__ = [
    "CommitEvent",
    "CommitFailed",
    "CommitVisited",
    "SessionState",
    "TraversalSession",
]
