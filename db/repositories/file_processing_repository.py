"""
Repository for uploaded-file status tracking and processing statistics.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Select, select
from sqlalchemy.orm import Session, selectinload

from db.models.file_processing_status import FileProcessingStatus, FileStatus
from db.models.processing_stats import ProcessingStats


class FileProcessingRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def create_status(self, *, filename: str, original_filename: str) -> FileProcessingStatus:
        status = FileProcessingStatus(
            filename=filename,
            original_filename=original_filename,
            status=FileStatus.PENDING,
            uploaded_at=datetime.now(timezone.utc),
        )
        self._session.add(status)
        self._session.flush()
        self._session.refresh(status)
        return status

    def get_status(self, file_id: uuid.UUID) -> FileProcessingStatus | None:
        return self._session.get(FileProcessingStatus, file_id)

    def update_status(
        self,
        *,
        file_id: uuid.UUID,
        status: str,
        error_message: str | None = None,
    ) -> FileProcessingStatus | None:
        record = self.get_status(file_id)
        if record is None:
            return None
        record.status = status
        record.error_message = error_message
        if status in FileStatus.TERMINAL:
            record.processed_at = datetime.now(timezone.utc)
        return record

    def get_stats(self, file_id: uuid.UUID) -> ProcessingStats | None:
        stmt = select(ProcessingStats).where(ProcessingStats.file_id == file_id)
        return self._session.scalars(stmt).first()

    def upsert_stats(
        self,
        *,
        file_id: uuid.UUID,
        total_rows: int,
        processed_rows: int,
        failed_rows: int,
        duration_seconds: int,
    ) -> ProcessingStats:
        stats = self.get_stats(file_id)
        if stats is None:
            stats = ProcessingStats(file_id=file_id)
            self._session.add(stats)
        stats.total_rows = total_rows
        stats.processed_rows = processed_rows
        stats.failed_rows = failed_rows
        stats.duration_seconds = duration_seconds
        self._session.flush()
        return stats

    def list_stats(self, *, limit: int = 500) -> list[ProcessingStats]:
        stmt: Select[tuple[ProcessingStats]] = (
            select(ProcessingStats)
            .options(selectinload(ProcessingStats.file))
            .order_by(ProcessingStats.created_at.desc())
            .limit(max(1, limit))
        )
        return list(self._session.scalars(stmt).all())
