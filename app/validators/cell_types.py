"""
app/validators/cell_types.py

Type predicates and parsers for raw text cells.

The predicates drive column guessing; the parsers convert cells while mapping
rows. Both share the same cleaning and date-format rules so a column that
guesses as a type also parses as that type.
"""

from __future__ import annotations

import datetime as dt
import re
from collections.abc import Callable
from decimal import Decimal
from typing import Any

from openpyxl.utils.datetime import from_excel

from app.domain.ingestion_errors import MalformedFieldError
from app.domain.sales_columns import SemanticType

# Tried in this order; first success wins.
DATE_FORMATS: tuple[str, ...] = (
    "%d/%m/%Y",
    "%Y-%m-%d",
    "%m/%d/%Y",
    "%Y/%m/%d",
    "%m-%d-%Y",
    "%d-%m-%Y",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M",
)

SERIAL_DATE_EPOCH = dt.date(1899, 12, 31)
SERIAL_DATE_MAX = Decimal(100000)

_NUMERIC_NOISE = str.maketrans("", "", "$,()")
_SERIAL_PATTERN = re.compile(r"^\d+(\.\d+)?$")
# Plain positional notation only; exponent forms like "1e999999999" are rejected.
_PLAIN_NUMBER_PATTERN = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)$")


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    return str(value).strip() == ""


def clean_numeric(value: str) -> str:
    """
    Strip currency and accounting punctuation: ``$``, ``,``, ``(`` and ``)``.
    """

    return value.strip().translate(_NUMERIC_NOISE).strip()


def _to_decimal(cleaned: str) -> Decimal | None:
    if not _PLAIN_NUMBER_PATTERN.match(cleaned):
        return None
    return Decimal(cleaned)


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def is_whole_number(value: str | None) -> bool:
    if is_blank(value):
        return False
    number = _to_decimal(clean_numeric(str(value)))
    if number is None:
        return False
    return number == number.to_integral_value()


def is_decimal(value: str | None) -> bool:
    if is_blank(value):
        return False
    return _to_decimal(clean_numeric(str(value))) is not None


def is_date(value: str | None) -> bool:
    if is_blank(value):
        return False
    return _parse_date_value(str(value).strip()) is not None


def is_text(value: str | None) -> bool:
    return True


TYPE_PREDICATES: dict[SemanticType, Callable[[str | None], bool]] = {
    SemanticType.TEXT: is_text,
    SemanticType.WHOLE_NUMBER: is_whole_number,
    SemanticType.DECIMAL: is_decimal,
    SemanticType.DATE: is_date,
}


# ---------------------------------------------------------------------------
# Parsers
# ---------------------------------------------------------------------------


def parse_text(value: str | None) -> str | None:
    if is_blank(value):
        return None
    return str(value).strip()


def parse_decimal(value: str | None) -> Decimal | None:
    """
    Parse a numeric cell. Blank, empty-after-cleaning and a lone ``-`` give None.
    """

    if is_blank(value):
        return None
    cleaned = clean_numeric(str(value))
    if not cleaned or cleaned == "-":
        return None
    number = _to_decimal(cleaned)
    if number is None:
        raise MalformedFieldError(str(value), SemanticType.DECIMAL.value)
    return number


def parse_whole_number(value: str | None) -> int | None:
    number = parse_decimal(value)
    if number is None:
        return None
    if number != number.to_integral_value():
        raise MalformedFieldError(str(value), SemanticType.WHOLE_NUMBER.value)
    return int(number)


def parse_date(value: str | None) -> dt.date | None:
    if is_blank(value):
        return None
    parsed = _parse_date_value(str(value).strip())
    if parsed is None:
        raise MalformedFieldError(str(value), SemanticType.DATE.value)
    return parsed


TYPE_PARSERS: dict[SemanticType, Callable[[str | None], Any]] = {
    SemanticType.TEXT: parse_text,
    SemanticType.WHOLE_NUMBER: parse_whole_number,
    SemanticType.DECIMAL: parse_decimal,
    SemanticType.DATE: parse_date,
}


def serial_to_date(serial: Decimal | float | int) -> dt.date:
    """
    Convert a spreadsheet serial day number to a calendar date.

    Day 1 is 1900-01-01 (epoch 1899-12-31). Serials from 60 on follow the
    spreadsheet 1900 leap-year convention, so 44197 is 2021-01-01. Fractions
    are truncated to whole days.
    """

    whole_days = int(serial)
    if whole_days < 1:
        return SERIAL_DATE_EPOCH
    return from_excel(whole_days).date()


def _parse_date_value(raw: str) -> dt.date | None:
    for fmt in DATE_FORMATS:
        try:
            return dt.datetime.strptime(raw, fmt).date()
        except ValueError:
            continue

    if not _SERIAL_PATTERN.match(raw):
        return None
    serial = Decimal(raw)
    if 0 < serial < SERIAL_DATE_MAX:
        return serial_to_date(serial)
    return None
