"""
app/services package marker.
"""

from app.services.chunk_scheduler import ChunkScheduler, RecordSink, RunAggregator
from app.services.sales_ingestion_service import SalesIngestionService, get_sales_ingestion_service
from app.services.status_reporter import DatabaseStatusReporter, StatusReporter

__all__ = [
    "ChunkScheduler",
    "DatabaseStatusReporter",
    "RecordSink",
    "RunAggregator",
    "SalesIngestionService",
    "StatusReporter",
    "get_sales_ingestion_service",
]
