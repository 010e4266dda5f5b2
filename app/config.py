"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files

DEFAULT_CHUNK_SIZE = 500
DEFAULT_SAMPLE_ROWS = 10
DEFAULT_MAX_ERROR_MESSAGE_LENGTH = 2000


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


POSITIVE_INT_ENV_VARS: tuple[str, ...] = (
    "SALES_INGEST_CHUNK_SIZE",
    "SALES_INGEST_SAMPLE_ROWS",
    "SALES_INGEST_MAX_WORKERS",
    "SALES_INGEST_MAX_ERROR_MESSAGE_LENGTH",
)


def invalid_positive_int_env(names: tuple[str, ...] = POSITIVE_INT_ENV_VARS) -> list[str]:
    """
    Return one message per set variable that is not an integer >= 1.
    """

    errors: list[str] = []
    for name in names:
        raw = os.getenv(name)
        if raw is None:
            continue
        value = raw.strip()
        if not value.isdigit() or int(value) < 1:
            errors.append(f"{name}='{raw}' must be a positive integer.")
    return errors


def default_max_workers() -> int:
    """Two workers per available CPU."""

    return (os.cpu_count() or 1) * 2


@dataclass(frozen=True)
class SalesIngestionSettings:
    """
    Runtime settings for sales file ingestion.
    """

    chunk_size: int = DEFAULT_CHUNK_SIZE
    sample_rows: int = DEFAULT_SAMPLE_ROWS
    max_workers: int = 2
    log_row_failures: bool = True
    max_error_message_length: int = DEFAULT_MAX_ERROR_MESSAGE_LENGTH


@lru_cache(maxsize=1)
def get_sales_ingestion_settings() -> SalesIngestionSettings:
    """
    Return cached sales ingestion settings from environment variables.
    """

    return SalesIngestionSettings(
        chunk_size=max(1, _get_int_env("SALES_INGEST_CHUNK_SIZE", DEFAULT_CHUNK_SIZE)),
        sample_rows=max(1, _get_int_env("SALES_INGEST_SAMPLE_ROWS", DEFAULT_SAMPLE_ROWS)),
        max_workers=max(1, _get_int_env("SALES_INGEST_MAX_WORKERS", default_max_workers())),
        log_row_failures=_get_bool_env("SALES_INGEST_LOG_ROW_FAILURES", True),
        max_error_message_length=max(
            80,
            _get_int_env("SALES_INGEST_MAX_ERROR_MESSAGE_LENGTH", DEFAULT_MAX_ERROR_MESSAGE_LENGTH),
        ),
    )
