"""
app/domain package marker.
"""

from app.domain.ingestion_errors import (
    IngestionError,
    MalformedFieldError,
    PersistenceFailure,
    RowSourceReadError,
    UnsupportedFileTypeError,
)
from app.domain.sales_columns import SalesColumn, SemanticType
from app.domain.sales_record import ChunkOutcome, IngestionResult, SalesRecord

__all__ = [
    "ChunkOutcome",
    "IngestionError",
    "IngestionResult",
    "MalformedFieldError",
    "PersistenceFailure",
    "RowSourceReadError",
    "SalesColumn",
    "SalesRecord",
    "SemanticType",
    "UnsupportedFileTypeError",
]
