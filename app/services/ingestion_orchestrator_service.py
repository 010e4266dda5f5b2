"""
Orchestrator service for background sales file ingestion and status tracking.
"""

from __future__ import annotations

import logging
import os
import tempfile
import uuid
from collections.abc import Callable, Mapping
from functools import lru_cache
from typing import Any, Protocol

from fastapi import BackgroundTasks, UploadFile
from sqlalchemy.orm import Session

from app.config import get_sales_ingestion_settings
from app.domain.ingestion_errors import UnsupportedFileTypeError
from app.domain.sales_columns import SalesColumn
from app.readers.row_sources import SUPPORTED_EXTENSIONS, extension_of
from app.repositories.sales_record_repository import SalesRecordSink
from app.services.sales_ingestion_service import SalesIngestionService, get_sales_ingestion_service
from app.services.status_reporter import DatabaseStatusReporter
from db.models.file_processing_status import FileProcessingStatus, FileStatus
from db.models.processing_stats import ProcessingStats
from db.repositories.file_processing_repository import FileProcessingRepository

logger = logging.getLogger(__name__)


class IngestionTaskExecutor(Protocol):
    def submit(self, task: Callable[..., None], *args: Any, **kwargs: Any) -> None:
        ...


class FastAPIBackgroundTaskExecutor:
    def __init__(self, background_tasks: BackgroundTasks) -> None:
        self._background_tasks = background_tasks

    def submit(self, task: Callable[..., None], *args: Any, **kwargs: Any) -> None:
        self._background_tasks.add_task(task, *args, **kwargs)


class IngestionOrchestratorService:
    """
    Coordinates tracking-row creation, background execution, and status lookups.
    """

    def __init__(
        self,
        *,
        session_factory: Callable[[], Session] | None = None,
        ingestion_service: SalesIngestionService | None = None,
        max_error_message_length: int | None = None,
    ) -> None:
        if session_factory is None:
            from db.session import SessionLocal

            self._session_factory = SessionLocal
        else:
            self._session_factory = session_factory

        self._ingestion_service = ingestion_service or get_sales_ingestion_service()
        self._max_error_message_length = (
            max_error_message_length or get_sales_ingestion_settings().max_error_message_length
        )

    def trigger_file_ingestion(
        self,
        *,
        db: Session,
        executor: IngestionTaskExecutor,
        upload_file: UploadFile,
        manual_mapping: Mapping[int, SalesColumn | str] | None = None,
    ) -> FileProcessingStatus:
        """
        Record the upload as PENDING and schedule its ingestion.

        The returned row carries the tracking id; processing happens after
        the response is sent.
        """

        file_name = upload_file.filename or ""
        extension = extension_of(file_name)
        if extension not in SUPPORTED_EXTENSIONS:
            raise UnsupportedFileTypeError(extension)

        temp_file_path, file_size = self._persist_temp_upload(upload_file, extension)
        repository = FileProcessingRepository(db)
        try:
            with db.begin():
                status = repository.create_status(
                    filename=os.path.basename(temp_file_path),
                    original_filename=file_name,
                )
        except Exception:
            self._delete_file_quietly(temp_file_path)
            raise

        logger.info(
            "Accepted upload file_id=%s name=%r size_bytes=%d",
            status.id,
            file_name,
            file_size,
        )

        try:
            executor.submit(
                self._run_file_ingestion_job,
                status.id,
                temp_file_path,
                file_name,
                dict(manual_mapping) if manual_mapping else None,
            )
        except Exception:
            self._delete_file_quietly(temp_file_path)
            with db.begin():
                repository.update_status(
                    file_id=status.id,
                    status=FileStatus.FAILED,
                    error_message="Failed to schedule file ingestion.",
                )
            raise

        return status

    def get_file_status(self, *, db: Session, file_id: uuid.UUID) -> FileProcessingStatus | None:
        return FileProcessingRepository(db).get_status(file_id)

    def list_processing_stats(self, *, db: Session, limit: int = 500) -> list[ProcessingStats]:
        return FileProcessingRepository(db).list_stats(limit=limit)

    def _run_file_ingestion_job(
        self,
        file_id: uuid.UUID,
        temp_file_path: str,
        file_name: str,
        manual_mapping: Mapping[int, SalesColumn | str] | None,
    ) -> None:
        reporter = DatabaseStatusReporter(
            self._session_factory,
            file_id,
            max_error_message_length=self._max_error_message_length,
        )
        try:
            with self._session_factory() as db:
                processing = FileProcessingRepository(db).update_status(
                    file_id=file_id,
                    status=FileStatus.PROCESSING,
                )
                if processing is None:
                    raise RuntimeError(f"Tracked file not found: {file_id}")
                db.commit()

            with open(temp_file_path, "rb") as file_handle:
                file_bytes = file_handle.read()

            self._ingestion_service.ingest_and_report(
                file_bytes=file_bytes,
                file_name=file_name,
                sink=SalesRecordSink(self._session_factory, file_id=file_id),
                reporter=reporter,
                manual_mapping=manual_mapping,
            )
        except Exception as exc:
            error_message = f"{type(exc).__name__}: {exc}"
            logger.exception("File ingestion failed file_id=%s error=%s", file_id, error_message)
            reporter.report_failure(error_message)
        finally:
            self._delete_file_quietly(temp_file_path)

    def _persist_temp_upload(self, upload_file: UploadFile, extension: str) -> tuple[str, int]:
        upload_file.file.seek(0)

        with tempfile.NamedTemporaryFile(
            delete=False,
            prefix="sales_upload_",
            suffix=f".{extension}",
        ) as temp_file:
            while True:
                chunk = upload_file.file.read(1024 * 1024)
                if not chunk:
                    break
                temp_file.write(chunk)
            temp_path = temp_file.name
            file_size = temp_file.tell()

        upload_file.file.seek(0)
        return temp_path, file_size

    def _delete_file_quietly(self, file_path: str) -> None:
        try:
            os.remove(file_path)
        except OSError:
            return


@lru_cache(maxsize=1)
def get_ingestion_orchestrator_service() -> IngestionOrchestratorService:
    return IngestionOrchestratorService()
