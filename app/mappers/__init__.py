"""
app/mappers package marker.
"""

from app.mappers.header_detector import HeaderDetector
from app.mappers.record_mapper import RecordMapper
from app.mappers.schema_mapper import ColumnMapping, SchemaMapper

__all__ = [
    "ColumnMapping",
    "HeaderDetector",
    "RecordMapper",
    "SchemaMapper",
]
