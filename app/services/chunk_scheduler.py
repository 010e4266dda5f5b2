"""
app/services/chunk_scheduler.py

Parallel chunked mapping and persistence of raw sales rows.

Rows are split into contiguous chunks. Each chunk is one unit of work on a
bounded thread pool: its rows are mapped in file order, the resulting batch
is handed to the sink, and per-row outcomes are folded into a run-scoped
aggregator. `ChunkScheduler.run` returns only after every chunk finished.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Protocol, Sequence

from app.config import DEFAULT_CHUNK_SIZE, DEFAULT_MAX_ERROR_MESSAGE_LENGTH, default_max_workers
from app.domain.sales_record import ChunkOutcome, IngestionResult, SalesRecord
from app.logging_utils import log_event
from app.mappers.record_mapper import RecordMapper
from app.mappers.schema_mapper import ColumnMapping

logger = logging.getLogger(__name__)

RawRow = Sequence[str | None]


class RecordSink(Protocol):
    """
    Durable storage for mapped record batches.

    Implementations must accept concurrent calls from several chunks and
    raise `PersistenceFailure` when a batch is not stored.
    """

    def save_all(self, batch: Sequence[SalesRecord]) -> None:
        ...


@dataclass(frozen=True)
class ChunkError:
    chunk_index: int
    start_row: int
    rows: int
    message: str


class RunAggregator:
    """
    Lock-guarded counters shared by the chunks of one run.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._processed = 0
        self._failed = 0
        self._per_chunk: dict[int, list[int]] = {}
        self._errors: list[ChunkError] = []

    def add_processed(self, chunk_index: int, count: int = 1) -> None:
        with self._lock:
            self._processed += count
            self._chunk_counts(chunk_index)[0] += count

    def add_failed(self, chunk_index: int, count: int = 1) -> None:
        with self._lock:
            self._failed += count
            self._chunk_counts(chunk_index)[1] += count

    def reclassify(self, chunk_index: int, count: int, error: ChunkError) -> None:
        """
        Move `count` rows of a chunk from processed to failed in one step.
        """

        with self._lock:
            self._processed -= count
            self._failed += count
            counts = self._chunk_counts(chunk_index)
            counts[0] -= count
            counts[1] += count
            self._errors.append(error)

    def abandon_chunk(self, chunk_index: int, row_count: int, error: ChunkError) -> None:
        """
        Count every row of a chunk as failed after its worker crashed.
        """

        with self._lock:
            counts = self._chunk_counts(chunk_index)
            unaccounted = row_count - counts[0] - counts[1]
            self._processed -= counts[0]
            self._failed += counts[0] + unaccounted
            counts[1] += counts[0] + unaccounted
            counts[0] = 0
            self._errors.append(error)

    def snapshot(self) -> tuple[int, int]:
        with self._lock:
            return self._processed, self._failed

    def errors(self) -> list[ChunkError]:
        with self._lock:
            return sorted(self._errors, key=lambda item: item.chunk_index)

    def _chunk_counts(self, chunk_index: int) -> list[int]:
        return self._per_chunk.setdefault(chunk_index, [0, 0])


class ChunkScheduler:
    """
    Maps and persists rows chunk by chunk on a thread pool.
    """

    def __init__(
        self,
        *,
        record_mapper: RecordMapper | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        max_workers: int | None = None,
        log_row_failures: bool = True,
        max_error_message_length: int = DEFAULT_MAX_ERROR_MESSAGE_LENGTH,
    ) -> None:
        self._record_mapper = record_mapper or RecordMapper()
        self._chunk_size = max(1, chunk_size)
        self._max_workers = max(1, max_workers or default_max_workers())
        self._log_row_failures = log_row_failures
        self._max_error_message_length = max_error_message_length

    def run(
        self,
        rows: Sequence[RawRow],
        mapping: ColumnMapping,
        sink: RecordSink,
    ) -> IngestionResult:
        """
        Process every row and block until all chunks are done.
        """

        started = time.monotonic()
        aggregator = RunAggregator()
        chunks = [
            (chunk_index, start_row, rows[start_row : start_row + self._chunk_size])
            for chunk_index, start_row in enumerate(range(0, len(rows), self._chunk_size))
        ]

        if chunks:
            workers = min(self._max_workers, len(chunks))
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="sales-chunk") as executor:
                future_to_chunk = {
                    executor.submit(
                        self._process_chunk,
                        chunk_index=chunk_index,
                        start_row=start_row,
                        chunk_rows=chunk_rows,
                        mapping=mapping,
                        sink=sink,
                        aggregator=aggregator,
                    ): (chunk_index, start_row, len(chunk_rows))
                    for chunk_index, start_row, chunk_rows in chunks
                }

                for future in as_completed(future_to_chunk):
                    chunk_index, start_row, row_count = future_to_chunk[future]
                    try:
                        outcome = future.result()
                    except Exception as exc:
                        logger.exception("Chunk %d worker crashed", chunk_index)
                        aggregator.abandon_chunk(
                            chunk_index,
                            row_count,
                            ChunkError(chunk_index, start_row, row_count, str(exc)),
                        )
                        continue

                    log_event(
                        logger,
                        logging.INFO,
                        "chunk_completed",
                        chunk_index=outcome.chunk_index,
                        start_row=outcome.start_row,
                        processed=outcome.processed,
                        failed=outcome.failed,
                        error=outcome.error,
                    )

        processed, failed = aggregator.snapshot()
        return IngestionResult(
            total_rows=len(rows),
            processed_rows=processed,
            failed_rows=failed,
            duration_seconds=int(time.monotonic() - started),
            error_message=self._summarize(len(rows), failed, aggregator.errors()),
        )

    def _process_chunk(
        self,
        *,
        chunk_index: int,
        start_row: int,
        chunk_rows: Sequence[RawRow],
        mapping: ColumnMapping,
        sink: RecordSink,
        aggregator: RunAggregator,
    ) -> ChunkOutcome:
        batch: list[SalesRecord] = []
        failed = 0

        for offset, row in enumerate(chunk_rows):
            try:
                record = self._record_mapper.map_row(row, mapping)
            except Exception as exc:
                record = None
                logger.warning("Row %d could not be mapped: %s", start_row + offset, exc)
            else:
                if record is None and self._log_row_failures:
                    logger.warning("Row %d has no mapped values; dropped", start_row + offset)

            if record is None:
                failed += 1
                aggregator.add_failed(chunk_index)
            else:
                batch.append(record)
                aggregator.add_processed(chunk_index)

        if not batch:
            return ChunkOutcome(chunk_index=chunk_index, start_row=start_row, processed=0, failed=failed)

        try:
            sink.save_all(batch)
        except Exception as exc:
            message = str(exc) or exc.__class__.__name__
            aggregator.reclassify(
                chunk_index,
                len(batch),
                ChunkError(chunk_index, start_row, len(chunk_rows), message),
            )
            log_event(
                logger,
                logging.ERROR,
                "chunk_persist_failed",
                chunk_index=chunk_index,
                start_row=start_row,
                batch_size=len(batch),
                error=message,
            )
            return ChunkOutcome(
                chunk_index=chunk_index,
                start_row=start_row,
                processed=0,
                failed=failed + len(batch),
                error=message,
            )

        return ChunkOutcome(
            chunk_index=chunk_index,
            start_row=start_row,
            processed=len(batch),
            failed=failed,
        )

    def _summarize(self, total: int, failed: int, errors: list[ChunkError]) -> str | None:
        if failed == 0 and not errors:
            return None

        message = f"{failed} of {total} rows failed."
        if errors:
            first = errors[0]
            message += (
                f" {len(errors)} chunk(s) failed as a whole;"
                f" first error at row {first.start_row}: {first.message}"
            )
        return message[: self._max_error_message_length]
