"""
app/services/sales_ingestion_service.py

Service layer for one sales file ingestion run.

Flow: decode raw rows, decide whether the first row is a header, guess the
column mapping from the first data rows, then hand every data row to the
chunk scheduler. Failures before chunking abort the run; failures during
chunking only move counters.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Mapping

from app.config import get_sales_ingestion_settings
from app.domain.ingestion_errors import IngestionError
from app.domain.sales_columns import SalesColumn
from app.domain.sales_record import IngestionResult
from app.logging_utils import log_event
from app.mappers.header_detector import HeaderDetector
from app.mappers.schema_mapper import SchemaMapper
from app.readers.row_sources import extension_of, read_raw
from app.services.chunk_scheduler import ChunkScheduler, RecordSink
from app.services.status_reporter import StatusReporter
from app.validators.mapping_validator import SchemaMappingError

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = "No data found in file."
NO_DATA_ROWS_MESSAGE = "No data rows after header check."


class SalesIngestionService:
    """
    Coordinates decoding, header detection, column guessing, and chunked persistence.
    """

    def __init__(
        self,
        *,
        sample_rows: int,
        header_detector: HeaderDetector | None = None,
        mapper: SchemaMapper | None = None,
        scheduler: ChunkScheduler | None = None,
    ) -> None:
        self._sample_rows = max(1, sample_rows)
        self._header_detector = header_detector or HeaderDetector()
        self._mapper = mapper or SchemaMapper(sample_limit=self._sample_rows)
        self._scheduler = scheduler or ChunkScheduler()

    def ingest(
        self,
        *,
        file_bytes: bytes,
        file_name: str,
        sink: RecordSink,
        manual_mapping: Mapping[int, SalesColumn | str] | None = None,
    ) -> IngestionResult:
        """
        Ingest one file and return its counters.

        Raises `UnsupportedFileTypeError`, `RowSourceReadError` or
        `SchemaMappingError` before any row is persisted.
        """

        log_event(logger, logging.INFO, "ingestion_started", file_name=file_name, size_bytes=len(file_bytes))

        rows = read_raw(file_bytes, extension_of(file_name))
        if not rows:
            logger.info("File %s contains no rows", file_name)
            return IngestionResult.empty(NO_DATA_MESSAGE)

        header = rows[0] if self._header_detector.is_likely_header(rows[0]) else None
        data_rows = rows[1:] if header is not None else rows
        log_event(
            logger,
            logging.INFO,
            "header_detected",
            file_name=file_name,
            has_header=header is not None,
            data_rows=len(data_rows),
        )
        if not data_rows:
            return IngestionResult.empty(NO_DATA_ROWS_MESSAGE)

        mapping = self._mapper.guess_columns(
            data_rows[: self._sample_rows],
            header,
            manual_overrides=manual_mapping,
        )
        log_event(
            logger,
            logging.INFO,
            "columns_guessed",
            file_name=file_name,
            mapping=mapping.describe(),
        )

        result = self._scheduler.run(data_rows, mapping, sink)
        log_event(
            logger,
            logging.INFO,
            "ingestion_completed",
            file_name=file_name,
            total_rows=result.total_rows,
            processed_rows=result.processed_rows,
            failed_rows=result.failed_rows,
            duration_seconds=result.duration_seconds,
        )
        return result

    def ingest_and_report(
        self,
        *,
        file_bytes: bytes,
        file_name: str,
        sink: RecordSink,
        reporter: StatusReporter,
        manual_mapping: Mapping[int, SalesColumn | str] | None = None,
    ) -> IngestionResult | None:
        """
        Run `ingest` and hand the outcome to a status reporter.

        Returns None when the run aborted before chunking.
        """

        try:
            result = self.ingest(
                file_bytes=file_bytes,
                file_name=file_name,
                sink=sink,
                manual_mapping=manual_mapping,
            )
        except (IngestionError, SchemaMappingError) as exc:
            logger.error("Ingestion of %s aborted: %s", file_name, exc)
            reporter.report_failure(str(exc))
            return None

        reporter.report(result)
        return result


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_sales_ingestion_service() -> SalesIngestionService:
    """
    Build and cache the ingestion service with env-driven settings.
    """
    settings = get_sales_ingestion_settings()
    return SalesIngestionService(
        sample_rows=settings.sample_rows,
        scheduler=ChunkScheduler(
            chunk_size=settings.chunk_size,
            max_workers=settings.max_workers,
            log_row_failures=settings.log_row_failures,
            max_error_message_length=settings.max_error_message_length,
        ),
    )
