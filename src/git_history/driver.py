"""Push-style traversal driver and the consumers that share it.

A single event generator walks the history once; counting, full emission and
sampling are consumers of that event stream rather than separate walk loops.
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from dataclasses import dataclass, field
from typing import Protocol

from git_history.errors import CommitError
from git_history.options import HistoryScanOptions
from git_history.records import CommitRecord
from git_history.session import CommitEvent, CommitFailed, CommitVisited, TraversalSession

type EventHandler = Callable[[CommitEvent], None]


class CommitConsumer(Protocol):
    """Receives records and per-commit errors from a traversal."""

    def on_commit(self, record: CommitRecord) -> None:
        """Handle one record."""
        ...

    def on_error(self, error: CommitError) -> None:
        """Handle one per-commit failure."""
        ...


def iter_events(options: HistoryScanOptions) -> Generator[CommitEvent, None, None]:
    """Yield one event per walked commit, in walk order.

    The session opens on first iteration; resolution failures raise before
    any event. The session is closed when the generator finishes, fails or
    is closed by its consumer.

    Yields
    ------
    CommitEvent
        Event for each walked commit.
    """
    session = TraversalSession(options)
    try:
        session.open()
        yield from session.events()
    finally:
        session.close()


def drive(options: HistoryScanOptions, handler: EventHandler) -> None:
    """Invoke ``handler`` once per walked commit until the walk is exhausted."""
    for event in iter_events(options):
        handler(event)


def consumer_handler(consumer: CommitConsumer) -> EventHandler:
    """Adapt a consumer to the event handler signature.

    Returns
    -------
    EventHandler
        Handler forwarding records and errors to ``consumer``.
    """

    def _handle(event: CommitEvent) -> None:
        if isinstance(event, CommitFailed):
            consumer.on_error(event.error)
            return
        if event.diff_error is not None:
            consumer.on_error(event.diff_error)
        consumer.on_commit(event.record)

    return _handle


def records_from_events(
    events: Generator[CommitEvent, None, None],
) -> Generator[CommitRecord, None, None]:
    """Yield the records carried by ``events``, dropping failed steps.

    ``events`` is closed when this generator finishes or is closed.

    Yields
    ------
    CommitRecord
        Records in walk order.
    """
    try:
        for event in events:
            if isinstance(event, CommitVisited):
                yield event.record
    finally:
        events.close()


@dataclass
class RowCounter:
    """Counts walk steps; failed steps count both as rows and as errors."""

    rows: int = 0
    error_rows: int = 0

    def on_commit(self, record: CommitRecord) -> None:
        _ = record
        self.rows += 1

    def on_error(self, error: CommitError) -> None:
        self.error_rows += 1
        if error.skipped:
            self.rows += 1


@dataclass
class RowEmitter(RowCounter):
    """Forwards every record to a sink while counting."""

    sink: Callable[[CommitRecord], None] = field(default=lambda _record: None)

    def on_commit(self, record: CommitRecord) -> None:
        super().on_commit(record)
        self.sink(record)


@dataclass
class RowSampler(RowCounter):
    """Retains the first ``target_rows`` records and counts every step."""

    target_rows: int = 0
    records: list[CommitRecord] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.target_rows < 0:
            msg = "target_rows must be non-negative."
            raise ValueError(msg)

    def on_commit(self, record: CommitRecord) -> None:
        super().on_commit(record)
        if len(self.records) < self.target_rows:
            self.records.append(record)


__all__ = [
    "CommitConsumer",
    "EventHandler",
    "RowCounter",
    "RowEmitter",
    "RowSampler",
    "consumer_handler",
    "drive",
    "iter_events",
    "records_from_events",
]
