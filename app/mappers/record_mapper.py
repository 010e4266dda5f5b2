"""
app/mappers/record_mapper.py

Converts one raw row into a typed sales record using a column mapping.
"""

from __future__ import annotations

import calendar
import logging
from typing import Any, Sequence

from app.domain.ingestion_errors import MalformedFieldError
from app.domain.sales_columns import SalesColumn
from app.domain.sales_record import SalesRecord
from app.mappers.schema_mapper import ColumnMapping
from app.validators.cell_types import TYPE_PARSERS, is_blank

logger = logging.getLogger(__name__)


class RecordMapper:
    """
    Maps raw rows to `SalesRecord` objects.

    Unparseable cells become None without rejecting the row. A row with no
    non-blank mapped cell yields None.
    """

    def map_row(self, row: Sequence[str | None] | None, mapping: ColumnMapping) -> SalesRecord | None:
        if not row:
            return None

        values: dict[str, Any] = {}
        has_content = False
        for index, sales_column in mapping.items():
            if index >= len(row):
                continue
            cell = row[index]
            if not is_blank(cell):
                has_content = True
            values[sales_column.field_name] = self._parse_cell(cell, sales_column)

        if not has_content:
            return None

        parsed_date = values.get(SalesColumn.DATE.field_name)
        if parsed_date is not None:
            values[SalesColumn.MONTH_NUMBER.field_name] = parsed_date.month
            values[SalesColumn.MONTH_NAME.field_name] = calendar.month_name[parsed_date.month]
            values[SalesColumn.YEAR.field_name] = parsed_date.year

        return SalesRecord(**values)

    @staticmethod
    def _parse_cell(cell: str | None, sales_column: SalesColumn) -> Any:
        parser = TYPE_PARSERS[sales_column.semantic_type]
        try:
            return parser(cell)
        except MalformedFieldError as exc:
            logger.debug("Field %s left empty: %s", sales_column.display_name, exc)
            return None
