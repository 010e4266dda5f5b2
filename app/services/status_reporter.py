"""
app/services/status_reporter.py

Receivers for the final outcome of an ingestion run.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.sales_record import IngestionResult
from db.models.file_processing_status import FileStatus
from db.repositories.file_processing_repository import FileProcessingRepository

logger = logging.getLogger(__name__)


class StatusReporter(Protocol):
    def report(self, result: IngestionResult) -> None:
        ...

    def report_failure(self, message: str) -> None:
        ...


class DatabaseStatusReporter:
    """
    Writes terminal status and processing stats for one tracked file.

    Reporting is best effort: database errors are logged, never raised.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        file_id: uuid.UUID,
        *,
        max_error_message_length: int = 2000,
    ) -> None:
        self._session_factory = session_factory
        self._file_id = file_id
        self._max_error_message_length = max_error_message_length

    def report(self, result: IngestionResult) -> None:
        session = self._session_factory()
        try:
            repository = FileProcessingRepository(session)
            repository.update_status(
                file_id=self._file_id,
                status=FileStatus.COMPLETED,
                error_message=self._clip(result.error_message),
            )
            repository.upsert_stats(
                file_id=self._file_id,
                total_rows=result.total_rows,
                processed_rows=result.processed_rows,
                failed_rows=result.failed_rows,
                duration_seconds=result.duration_seconds,
            )
            session.commit()
        except SQLAlchemyError:
            session.rollback()
            logger.exception("Failed to record completion for file_id=%s", self._file_id)
        finally:
            session.close()

    def report_failure(self, message: str) -> None:
        session = self._session_factory()
        try:
            FileProcessingRepository(session).update_status(
                file_id=self._file_id,
                status=FileStatus.FAILED,
                error_message=self._clip(message) or "Ingestion failed.",
            )
            session.commit()
        except SQLAlchemyError:
            session.rollback()
            logger.exception("Failed to record failure for file_id=%s", self._file_id)
        finally:
            session.close()

    def _clip(self, message: str | None) -> str | None:
        if message is None:
            return None
        return message[: self._max_error_message_length]
