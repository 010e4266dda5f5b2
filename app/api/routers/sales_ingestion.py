"""
app/api/routers/sales_ingestion.py

Sales file upload, status, and statistics endpoints.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, UploadFile, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from app.api.dependencies import get_manual_mapping, get_tabular_upload
from app.domain.ingestion_errors import UnsupportedFileTypeError
from app.domain.sales_columns import SalesColumn
from app.schemas.sales_ingestion import (
    FileStatusResponse,
    FileUploadAcceptedResponse,
    ProcessingStatsResponse,
)
from app.services.ingestion_orchestrator_service import (
    FastAPIBackgroundTaskExecutor,
    IngestionOrchestratorService,
    get_ingestion_orchestrator_service,
)
from db.models.processing_stats import ProcessingStats
from db.session import get_db

router = APIRouter(prefix="/api", tags=["sales-ingestion"])

HEALTH_MESSAGE = "Service is up and running!"


@router.post(
    "/upload/large-file",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=FileUploadAcceptedResponse,
)
def upload_large_file(
    background_tasks: BackgroundTasks,
    file: UploadFile = Depends(get_tabular_upload),
    manual_mapping: dict[int, SalesColumn] | None = Depends(get_manual_mapping),
    db: Session = Depends(get_db),
    orchestrator: IngestionOrchestratorService = Depends(get_ingestion_orchestrator_service),
) -> FileUploadAcceptedResponse:
    """
    Accept a CSV or XLSX file and ingest it in the background.
    """

    try:
        tracked = orchestrator.trigger_file_ingestion(
            db=db,
            executor=FastAPIBackgroundTaskExecutor(background_tasks),
            upload_file=file,
            manual_mapping=manual_mapping,
        )
    except UnsupportedFileTypeError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    finally:
        file.file.close()

    return FileUploadAcceptedResponse(
        file_id=tracked.id,
        file_name=tracked.original_filename,
        status=tracked.status,
        message=f"File upload initiated. Tracking ID: {tracked.id}",
    )


@router.get("/file-status/{file_id}", response_model=FileStatusResponse)
def get_file_status(
    file_id: UUID,
    db: Session = Depends(get_db),
    orchestrator: IngestionOrchestratorService = Depends(get_ingestion_orchestrator_service),
) -> FileStatusResponse:
    tracked = orchestrator.get_file_status(db=db, file_id=file_id)
    if tracked is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"File not found: {file_id}",
        )

    return FileStatusResponse(
        file_id=tracked.id,
        filename=tracked.filename,
        original_filename=tracked.original_filename,
        status=tracked.status,
        error_message=tracked.error_message,
        uploaded_at=tracked.uploaded_at,
        processed_at=tracked.processed_at,
        updated_at=tracked.updated_at,
    )


@router.get("/processing-stats", response_model=list[ProcessingStatsResponse])
def list_processing_stats(
    limit: int = Query(default=500, ge=1, le=5000, description="Max stats rows returned"),
    db: Session = Depends(get_db),
    orchestrator: IngestionOrchestratorService = Depends(get_ingestion_orchestrator_service),
) -> list[ProcessingStatsResponse]:
    stats = orchestrator.list_processing_stats(db=db, limit=limit)
    return [_to_stats_response(item) for item in stats]


@router.get("/", response_class=PlainTextResponse)
def health_check() -> str:
    return HEALTH_MESSAGE


def _to_stats_response(stats: ProcessingStats) -> ProcessingStatsResponse:
    tracked = stats.file
    return ProcessingStatsResponse(
        file_id=stats.file_id,
        original_filename=tracked.original_filename if tracked is not None else None,
        total_rows=stats.total_rows,
        processed_rows=stats.processed_rows,
        failed_rows=stats.failed_rows,
        duration_seconds=stats.duration_seconds,
        created_at=stats.created_at,
    )
