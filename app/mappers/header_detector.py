"""
app/mappers/header_detector.py

Heuristic check for whether the first row of a file is a header.
"""

from __future__ import annotations

import logging
from typing import Sequence

from app.domain.sales_columns import SalesColumn
from app.validators.cell_types import is_blank, is_date, is_decimal, is_whole_number

logger = logging.getLogger(__name__)

TEXT_FRACTION_THRESHOLD = 0.5


class HeaderDetector:
    """
    Classifies a raw row as header or data.

    A row is a header when most of its non-blank cells are not numbers or
    dates, or when it names more than a third of the known sales columns.
    """

    def __init__(self, *, text_fraction_threshold: float = TEXT_FRACTION_THRESHOLD) -> None:
        self._text_fraction_threshold = text_fraction_threshold
        self._recognized_threshold = len(SalesColumn) // 3

    def is_likely_header(self, row: Sequence[str | None] | None) -> bool:
        if not row:
            return False

        cells = [str(cell).strip() for cell in row if not is_blank(cell)]
        if not cells:
            return False

        text_like = sum(1 for cell in cells if not self._looks_typed(cell))
        recognized = sum(1 for cell in cells if SalesColumn.from_display_name(cell) is not None)
        text_fraction = text_like / len(cells)

        logger.debug(
            "Header check: %d/%d text-like cells, %d recognized column names",
            text_like,
            len(cells),
            recognized,
        )
        return text_fraction > self._text_fraction_threshold or recognized > self._recognized_threshold

    @staticmethod
    def _looks_typed(cell: str) -> bool:
        return is_whole_number(cell) or is_decimal(cell) or is_date(cell)
