"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.file_processing_status import FileProcessingStatus, FileStatus
from db.models.processing_stats import ProcessingStats
from db.models.sales_data import SalesData

__all__ = [
    "FileProcessingStatus",
    "FileStatus",
    "ProcessingStats",
    "SalesData",
]
