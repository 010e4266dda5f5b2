"""
Schemas for sales file upload, status, and statistics endpoints.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class FileUploadAcceptedResponse(BaseModel):
    file_id: UUID
    file_name: str
    status: str
    message: str


class FileStatusResponse(BaseModel):
    file_id: UUID
    filename: str
    original_filename: str
    status: str
    error_message: str | None = None
    uploaded_at: datetime
    processed_at: datetime | None = None
    updated_at: datetime | None = None


class ProcessingStatsResponse(BaseModel):
    file_id: UUID
    original_filename: str | None = None
    total_rows: int
    processed_rows: int
    failed_rows: int
    duration_seconds: int
    created_at: datetime | None = None
