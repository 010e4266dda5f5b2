"""
app/schemas package marker.
"""

from app.schemas.sales_ingestion import (
    FileStatusResponse,
    FileUploadAcceptedResponse,
    ProcessingStatsResponse,
)

__all__ = [
    "FileStatusResponse",
    "FileUploadAcceptedResponse",
    "ProcessingStatsResponse",
]
