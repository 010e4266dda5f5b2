"""
app/domain/sales_record.py

Domain models used by the sales file ingestion flow.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, fields
from decimal import Decimal


@dataclass(frozen=True)
class SalesRecord:
    """
    Typed sales row prepared for persistence. Every field is optional.
    """

    segment: str | None = None
    country: str | None = None
    product: str | None = None
    discount_band: str | None = None
    units_sold: Decimal | None = None
    manufacturing_price: Decimal | None = None
    sale_price: Decimal | None = None
    gross_sales: Decimal | None = None
    discounts: Decimal | None = None
    sales: Decimal | None = None
    cogs: Decimal | None = None
    profit: Decimal | None = None
    date: dt.date | None = None
    month_number: int | None = None
    month_name: str | None = None
    year: int | None = None

    def to_payload(self) -> dict[str, object]:
        return {field.name: getattr(self, field.name) for field in fields(self)}


@dataclass(frozen=True)
class ChunkOutcome:
    """
    Counts for one processed chunk. Only used for logging and error summaries.
    """

    chunk_index: int
    start_row: int
    processed: int
    failed: int
    error: str | None = None


@dataclass(frozen=True)
class IngestionResult:
    """
    End-of-run ingestion outcome handed to the status reporter.
    """

    total_rows: int
    processed_rows: int
    failed_rows: int
    duration_seconds: int
    error_message: str | None = None

    @classmethod
    def empty(cls, message: str) -> IngestionResult:
        return cls(
            total_rows=0,
            processed_rows=0,
            failed_rows=0,
            duration_seconds=0,
            error_message=message,
        )
