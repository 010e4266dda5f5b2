"""
app/readers/row_sources.py

Decoders that turn uploaded CSV and XLSX bytes into raw text rows.

Every reader produces the same shape: a list of rows, each a list of cell
strings. Spreadsheet values are stringified here so the rest of the
pipeline only ever sees text: dates become ISO ``YYYY-MM-DD`` and numbers
become plain decimal text without exponents.
"""

from __future__ import annotations

import csv
import datetime as dt
import io
import logging
from decimal import Decimal
from typing import Any, Callable
from xml.etree.ElementTree import ParseError
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from app.domain.ingestion_errors import RowSourceReadError, UnsupportedFileTypeError

logger = logging.getLogger(__name__)

RawRows = list[list[str]]

CSV_EXTENSION = "csv"
XLSX_EXTENSION = "xlsx"
SUPPORTED_EXTENSIONS: tuple[str, ...] = (CSV_EXTENSION, XLSX_EXTENSION)


def normalize_extension(declared_extension: str | None) -> str:
    """
    Lower-case an extension and drop a leading dot: ``".XLSX"`` -> ``"xlsx"``.
    """

    if declared_extension is None:
        return ""
    return declared_extension.strip().lstrip(".").lower()


def extension_of(filename: str | None) -> str:
    if not filename or "." not in filename:
        return ""
    return normalize_extension(filename.rsplit(".", 1)[1])


def read_csv_rows(file_bytes: bytes) -> RawRows:
    try:
        text = file_bytes.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise RowSourceReadError(f"CSV file is not valid UTF-8: {exc}") from exc

    try:
        return [list(row) for row in csv.reader(io.StringIO(text, newline=""))]
    except csv.Error as exc:
        raise RowSourceReadError(f"CSV file could not be parsed: {exc}") from exc


def read_xlsx_rows(file_bytes: bytes) -> RawRows:
    """
    Read the first worksheet of an XLSX workbook.

    Cached formula results are read rather than formulas.
    """

    try:
        workbook = load_workbook(io.BytesIO(file_bytes), read_only=True, data_only=True)
    except (BadZipFile, InvalidFileException, KeyError, OSError, ParseError, ValueError) as exc:
        raise RowSourceReadError(f"XLSX file could not be opened: {exc}") from exc

    try:
        if not workbook.worksheets:
            return []
        sheet = workbook.worksheets[0]
        return [
            [stringify_cell(value) for value in values]
            for values in sheet.iter_rows(values_only=True)
        ]
    except (KeyError, OSError, ParseError, ValueError) as exc:
        raise RowSourceReadError(f"XLSX worksheet could not be read: {exc}") from exc
    finally:
        workbook.close()


def stringify_cell(value: Any) -> str:
    """
    Render one spreadsheet value as text.
    """

    if value is None:
        return ""
    if isinstance(value, dt.datetime):
        return value.date().isoformat()
    if isinstance(value, dt.date):
        return value.isoformat()
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _plain_number(value)
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def _plain_number(value: float) -> str:
    if value != value or value in (float("inf"), float("-inf")):
        return str(value)
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


_READERS: dict[str, Callable[[bytes], RawRows]] = {
    CSV_EXTENSION: read_csv_rows,
    XLSX_EXTENSION: read_xlsx_rows,
}


def read_raw(file_bytes: bytes, declared_extension: str | None) -> RawRows:
    """
    Decode a file into raw rows, choosing the reader by extension.

    Raises ``UnsupportedFileTypeError`` for anything but csv/xlsx and
    ``RowSourceReadError`` when the bytes cannot be decoded.
    """

    extension = normalize_extension(declared_extension)
    reader = _READERS.get(extension)
    if reader is None:
        raise UnsupportedFileTypeError(extension)

    rows = reader(file_bytes)
    logger.debug("Decoded %d raw rows from %s input", len(rows), extension)
    return rows
