"""
app/repositories package marker.
"""

from app.repositories.sales_record_repository import SalesRecordRepository, SalesRecordSink

__all__ = [
    "SalesRecordRepository",
    "SalesRecordSink",
]
