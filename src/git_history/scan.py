"""Entry points used by a host query engine.

Each call opens its own traversal session; nothing is cached between calls.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator, Iterator
from dataclasses import dataclass
from itertools import islice

import pyarrow as pa

from git_history.driver import (
    RowCounter,
    RowEmitter,
    RowSampler,
    consumer_handler,
    drive,
    iter_events,
    records_from_events,
)
from git_history.options import HistoryScanOptions
from git_history.records import COMMIT_SCHEMA, CommitRecord, record_batch
from obs.otel import SCOPE_SCAN, set_span_attributes, stage_span

_LOGGER = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 1024


@dataclass(frozen=True)
class SampleResult:
    """Bounded sample of records plus the totals observed while sampling."""

    records: tuple[CommitRecord, ...]
    total_rows_seen: int
    error_rows_seen: int


def _scan_attributes(options: HistoryScanOptions) -> dict[str, object]:
    return {"git_history.path": options.path, "git_history.branch": options.branch}


def estimate_row_count(options: HistoryScanOptions) -> int:
    """Return the number of walk steps the scan would produce.

    Failed steps are included, so the estimate matches ``sample_rows``
    ``total_rows_seen``.

    Returns
    -------
    int
        Row count estimate.
    """
    counter = RowCounter()
    with stage_span(
        "git_history.count",
        stage="count",
        scope_name=SCOPE_SCAN,
        attributes=_scan_attributes(options),
    ) as span:
        drive(options, consumer_handler(counter))
        set_span_attributes(span, {"rows": counter.rows, "error_rows": counter.error_rows})
    return counter.rows


def iterate_rows(options: HistoryScanOptions) -> Generator[CommitRecord, None, None]:
    """Return a lazy, finite, non-restartable stream of commit records.

    Returns
    -------
    Generator[CommitRecord, None, None]
        Records in topological order, descendants first.
    """
    return records_from_events(iter_events(options))


def emit_rows(options: HistoryScanOptions, sink: Callable[[CommitRecord], None]) -> RowEmitter:
    """Push every record to ``sink`` and return the final counts.

    Returns
    -------
    RowEmitter
        Consumer holding the row and error tallies.
    """
    emitter = RowEmitter(sink=sink)
    with stage_span(
        "git_history.emit",
        stage="emit",
        scope_name=SCOPE_SCAN,
        attributes=_scan_attributes(options),
    ) as span:
        drive(options, consumer_handler(emitter))
        set_span_attributes(span, {"rows": emitter.rows, "error_rows": emitter.error_rows})
    return emitter


def sample_rows(
    options: HistoryScanOptions,
    target_count: int,
    *,
    log_level: int = logging.DEBUG,
) -> SampleResult:
    """Return up to ``target_count`` records and the totals seen.

    Returns
    -------
    SampleResult
        First ``target_count`` records plus row and error totals.
    """
    sampler = RowSampler(target_rows=target_count)
    with stage_span(
        "git_history.sample",
        stage="sample",
        scope_name=SCOPE_SCAN,
        attributes={**_scan_attributes(options), "target_rows": target_count},
    ) as span:
        drive(options, consumer_handler(sampler))
        set_span_attributes(span, {"rows": sampler.rows, "error_rows": sampler.error_rows})
    _LOGGER.log(
        log_level,
        "%r: repository contains %d rows; %d rows in sample (was asked %d rows)",
        options.path,
        sampler.rows,
        len(sampler.records),
        target_count,
    )
    return SampleResult(
        records=tuple(sampler.records),
        total_rows_seen=sampler.rows,
        error_rows_seen=sampler.error_rows,
    )


def iter_record_batches(
    options: HistoryScanOptions,
    *,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> Iterator[pa.RecordBatch]:
    """Yield Arrow batches of at most ``batch_size`` rows.

    Yields
    ------
    pyarrow.RecordBatch
        Batches with ``COMMIT_SCHEMA``.

    Raises
    ------
    ValueError
        Raised when ``batch_size`` is not positive.
    """
    if batch_size <= 0:
        msg = "batch_size must be positive."
        raise ValueError(msg)
    records = iterate_rows(options)
    try:
        while chunk := list(islice(records, batch_size)):
            yield record_batch(chunk)
    finally:
        records.close()


def record_batch_reader(
    options: HistoryScanOptions,
    *,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> pa.RecordBatchReader:
    """Return a streaming Arrow reader over the scan.

    Returns
    -------
    pyarrow.RecordBatchReader
        Reader producing ``COMMIT_SCHEMA`` batches.

    Raises
    ------
    ValueError
        Raised when ``batch_size`` is not positive.
    """
    if batch_size <= 0:
        msg = "batch_size must be positive."
        raise ValueError(msg)
    return pa.RecordBatchReader.from_batches(
        COMMIT_SCHEMA,
        iter_record_batches(options, batch_size=batch_size),
    )


def read_table(options: HistoryScanOptions) -> pa.Table:
    """Materialize the whole scan as an Arrow table.

    Returns
    -------
    pyarrow.Table
        Table with ``COMMIT_SCHEMA``.
    """
    return record_batch_reader(options).read_all()


__all__ = [
    "DEFAULT_BATCH_SIZE",
    "SampleResult",
    "emit_rows",
    "estimate_row_count",
    "iter_record_batches",
    "iterate_rows",
    "read_table",
    "record_batch_reader",
    "sample_rows",
]
