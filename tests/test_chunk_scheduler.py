"""
tests/test_chunk_scheduler.py

Pytest unit tests for ChunkScheduler and RunAggregator.

Sinks are in-memory fakes; no database is touched.

Coverage
--------
- processed + failed == total across chunk sizes and pool widths
- Blank rows counted failed, never persisted
- One failing chunk moves exactly its batch to failed
- Empty batches skip the sink
- Unexpected mapper errors counted as failed rows
- Aggregator reclassification
"""

from __future__ import annotations

import threading
from decimal import Decimal
from typing import Sequence

import pytest

from app.domain.ingestion_errors import PersistenceFailure
from app.domain.sales_columns import SalesColumn
from app.domain.sales_record import SalesRecord
from app.mappers.record_mapper import RecordMapper
from app.mappers.schema_mapper import ColumnMapping
from app.services.chunk_scheduler import ChunkError, ChunkScheduler, RunAggregator

MAPPING = ColumnMapping(assignments={0: SalesColumn.SEGMENT, 1: SalesColumn.UNITS_SOLD})


class RecordingSink:
    def __init__(self, *, fail_on_segment: str | None = None) -> None:
        self._lock = threading.Lock()
        self._fail_on_segment = fail_on_segment
        self.calls = 0
        self.saved: list[SalesRecord] = []

    def save_all(self, batch: Sequence[SalesRecord]) -> None:
        with self._lock:
            self.calls += 1
        if self._fail_on_segment and any(r.segment == self._fail_on_segment for r in batch):
            raise PersistenceFailure("database rejected batch")
        with self._lock:
            self.saved.extend(batch)


class ExplodingMapper(RecordMapper):
    def map_row(self, row, mapping):
        if row and row[0] == "boom":
            raise RuntimeError("unexpected")
        return super().map_row(row, mapping)


def _rows(count: int, *, blank_every: int = 0) -> list[list[str]]:
    rows: list[list[str]] = []
    for index in range(count):
        if blank_every and index % blank_every == 0:
            rows.append(["", ""])
        else:
            rows.append([f"Segment {index}", str(index)])
    return rows


# ---------------------------------------------------------------------------
# Count conservation
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("chunk_size", [1, 5, 500])
@pytest.mark.parametrize("max_workers", [1, 4, 23])
def test_counts_add_up_for_any_chunking(chunk_size: int, max_workers: int) -> None:
    rows = _rows(23, blank_every=4)
    sink = RecordingSink()
    scheduler = ChunkScheduler(chunk_size=chunk_size, max_workers=max_workers)

    result = scheduler.run(rows, MAPPING, sink)

    blank = sum(1 for row in rows if row == ["", ""])
    assert result.total_rows == 23
    assert result.processed_rows + result.failed_rows == 23
    assert result.failed_rows == blank
    assert result.processed_rows == len(sink.saved) == 23 - blank
    assert isinstance(result.duration_seconds, int)


def test_records_keep_file_order_within_a_chunk() -> None:
    sink = RecordingSink()

    ChunkScheduler(chunk_size=50, max_workers=1).run(_rows(10), MAPPING, sink)

    assert [record.units_sold for record in sink.saved] == [Decimal(i) for i in range(10)]


def test_no_failures_means_no_error_message() -> None:
    result = ChunkScheduler(chunk_size=3, max_workers=2).run(_rows(7), MAPPING, RecordingSink())

    assert result.failed_rows == 0
    assert result.error_message is None


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


def test_all_blank_row_only_moves_failed_counter() -> None:
    sink = RecordingSink()

    result = ChunkScheduler(chunk_size=10, max_workers=2).run([["", "  "]], MAPPING, sink)

    assert result.processed_rows == 0
    assert result.failed_rows == 1
    assert sink.calls == 0


def test_one_failing_chunk_moves_exactly_its_batch() -> None:
    rows = _rows(20)
    rows[5] = ["FAIL", "5"]
    rows[7] = ["", ""]
    sink = RecordingSink(fail_on_segment="FAIL")

    result = ChunkScheduler(chunk_size=5, max_workers=4).run(rows, MAPPING, sink)

    assert result.processed_rows == 15
    assert result.failed_rows == 5
    assert len(sink.saved) == 15
    assert result.error_message is not None
    assert "1 chunk(s) failed as a whole" in result.error_message
    assert "row 5" in result.error_message
    assert "database rejected batch" in result.error_message


def test_unexpected_mapper_error_is_counted_failed() -> None:
    rows = [["boom", "1"], ["Government", "2"]]
    scheduler = ChunkScheduler(record_mapper=ExplodingMapper(), chunk_size=10, max_workers=1)

    result = scheduler.run(rows, MAPPING, RecordingSink())

    assert result.processed_rows == 1
    assert result.failed_rows == 1
    assert result.error_message == "1 of 2 rows failed."


def test_crashed_worker_fails_its_whole_chunk() -> None:
    class CrashingScheduler(ChunkScheduler):
        def _process_chunk(self, **kwargs):
            if kwargs["chunk_index"] == 1:
                kwargs["aggregator"].add_processed(1, 2)
                raise RuntimeError("worker died")
            return super()._process_chunk(**kwargs)

    sink = RecordingSink()

    result = CrashingScheduler(chunk_size=5, max_workers=2).run(_rows(12), MAPPING, sink)

    assert result.processed_rows == 7
    assert result.failed_rows == 5
    assert result.error_message == (
        "5 of 12 rows failed. 1 chunk(s) failed as a whole; first error at row 5: worker died"
    )


def test_empty_input_returns_zero_result() -> None:
    sink = RecordingSink()

    result = ChunkScheduler().run([], MAPPING, sink)

    assert (result.total_rows, result.processed_rows, result.failed_rows) == (0, 0, 0)
    assert result.error_message is None
    assert sink.calls == 0


def test_error_message_is_truncated() -> None:
    rows = [["FAIL", "1"]]
    sink = RecordingSink(fail_on_segment="FAIL")

    result = ChunkScheduler(max_workers=1, max_error_message_length=10).run(rows, MAPPING, sink)

    assert result.error_message is not None
    assert len(result.error_message) == 10


# ---------------------------------------------------------------------------
# RunAggregator
# ---------------------------------------------------------------------------


class TestRunAggregator:
    def test_reclassify_moves_counts_and_records_error(self) -> None:
        aggregator = RunAggregator()
        aggregator.add_processed(0, 4)
        aggregator.add_failed(0)

        aggregator.reclassify(0, 4, ChunkError(0, 0, 5, "boom"))

        assert aggregator.snapshot() == (0, 5)
        assert [error.message for error in aggregator.errors()] == ["boom"]

    def test_abandon_chunk_fails_every_row_of_that_chunk(self) -> None:
        aggregator = RunAggregator()
        aggregator.add_processed(0, 3)
        aggregator.add_processed(1, 2)
        aggregator.add_failed(1)

        aggregator.abandon_chunk(1, 10, ChunkError(1, 10, 10, "crash"))

        assert aggregator.snapshot() == (3, 10)

    def test_concurrent_updates_are_not_lost(self) -> None:
        aggregator = RunAggregator()

        def work(chunk_index: int) -> None:
            for _ in range(1000):
                aggregator.add_processed(chunk_index)
                aggregator.add_failed(chunk_index)

        threads = [threading.Thread(target=work, args=(index,)) for index in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert aggregator.snapshot() == (8000, 8000)
