"""
db/models/sales_data.py

Persisted sales rows produced by file ingestion.
"""

from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal

from sqlalchemy import BigInteger, Date, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base


class SalesData(Base):
    __tablename__ = "sales_data"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    file_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("file_processing_status.id", ondelete="SET NULL"),
        nullable=True,
        comment="Upload that produced this row",
    )
    segment: Mapped[str | None] = mapped_column(String(255), nullable=True)
    country: Mapped[str | None] = mapped_column(String(255), nullable=True)
    product: Mapped[str | None] = mapped_column(String(255), nullable=True)
    discount_band: Mapped[str | None] = mapped_column(String(255), nullable=True)
    units_sold: Mapped[Decimal | None] = mapped_column(Numeric(19, 4), nullable=True)
    manufacturing_price: Mapped[Decimal | None] = mapped_column(Numeric(19, 4), nullable=True)
    sale_price: Mapped[Decimal | None] = mapped_column(Numeric(19, 4), nullable=True)
    gross_sales: Mapped[Decimal | None] = mapped_column(Numeric(19, 4), nullable=True)
    discounts: Mapped[Decimal | None] = mapped_column(Numeric(19, 4), nullable=True)
    sales: Mapped[Decimal | None] = mapped_column(Numeric(19, 4), nullable=True)
    cogs: Mapped[Decimal | None] = mapped_column(Numeric(19, 4), nullable=True)
    profit: Mapped[Decimal | None] = mapped_column(Numeric(19, 4), nullable=True)
    date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    month_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    month_name: Mapped[str | None] = mapped_column(String(20), nullable=True)
    year: Mapped[int | None] = mapped_column(Integer, nullable=True)

    __table_args__ = (
        Index("ix_sales_data_file_id", "file_id"),
        Index("ix_sales_data_year_month", "year", "month_number"),
    )
