"""create sales ingestion tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "file_processing_status",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("filename", sa.String(length=512), nullable=False),
        sa.Column("original_filename", sa.String(length=512), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("uploaded_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_file_processing_status_status", "file_processing_status", ["status"], unique=False)
    op.create_index(
        "ix_file_processing_status_uploaded_at",
        "file_processing_status",
        ["uploaded_at"],
        unique=False,
    )

    op.create_table(
        "processing_stats",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("file_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("total_rows", sa.Integer(), nullable=False),
        sa.Column("processed_rows", sa.Integer(), nullable=False),
        sa.Column("failed_rows", sa.Integer(), nullable=False),
        sa.Column("duration_seconds", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["file_id"], ["file_processing_status.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("file_id"),
    )

    numeric = sa.Numeric(precision=19, scale=4)
    op.create_table(
        "sales_data",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("file_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("segment", sa.String(length=255), nullable=True),
        sa.Column("country", sa.String(length=255), nullable=True),
        sa.Column("product", sa.String(length=255), nullable=True),
        sa.Column("discount_band", sa.String(length=255), nullable=True),
        sa.Column("units_sold", numeric, nullable=True),
        sa.Column("manufacturing_price", numeric, nullable=True),
        sa.Column("sale_price", numeric, nullable=True),
        sa.Column("gross_sales", numeric, nullable=True),
        sa.Column("discounts", numeric, nullable=True),
        sa.Column("sales", numeric, nullable=True),
        sa.Column("cogs", numeric, nullable=True),
        sa.Column("profit", numeric, nullable=True),
        sa.Column("date", sa.Date(), nullable=True),
        sa.Column("month_number", sa.Integer(), nullable=True),
        sa.Column("month_name", sa.String(length=20), nullable=True),
        sa.Column("year", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(["file_id"], ["file_processing_status.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_sales_data_file_id", "sales_data", ["file_id"], unique=False)
    op.create_index("ix_sales_data_year_month", "sales_data", ["year", "month_number"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_sales_data_year_month", table_name="sales_data")
    op.drop_index("ix_sales_data_file_id", table_name="sales_data")
    op.drop_table("sales_data")
    op.drop_table("processing_stats")
    op.drop_index("ix_file_processing_status_uploaded_at", table_name="file_processing_status")
    op.drop_index("ix_file_processing_status_status", table_name="file_processing_status")
    op.drop_table("file_processing_status")
