"""
app/domain/ingestion_errors.py

Exceptions raised across the sales ingestion flow.
"""

from __future__ import annotations


class IngestionError(Exception):
    """Base exception for sales file ingestion failures."""


class UnsupportedFileTypeError(IngestionError, ValueError):
    """Raised when an upload has an extension other than csv or xlsx."""

    def __init__(self, extension: str) -> None:
        super().__init__(f"Unsupported file type: {extension or '<none>'}")
        self.extension = extension


class RowSourceReadError(IngestionError, IOError):
    """Raised when raw rows cannot be decoded from an uploaded file."""


class MalformedFieldError(IngestionError, ValueError):
    """Raised when one cell cannot be parsed into its column's type."""

    def __init__(self, value: str, expected_type: str) -> None:
        super().__init__(f"Cannot parse {value!r} as {expected_type}.")
        self.value = value
        self.expected_type = expected_type


class PersistenceFailure(IngestionError, RuntimeError):
    """Raised by a record sink when a batch cannot be stored."""
