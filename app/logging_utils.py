"""
app/logging_utils.py

Structured logging helpers for ingestion runs.
"""

from __future__ import annotations

import json
import logging
from typing import Any


def log_event(
    logger: logging.Logger,
    level: int,
    event: str,
    **fields: Any,
) -> None:
    """
    Emit one run milestone as a single JSON line.

    Values that are not JSON native (UUIDs, decimals, dates) are rendered
    with ``str``. Nothing is serialised when the level is disabled.
    """

    if not logger.isEnabledFor(level):
        return
    payload = {"event": event, **fields}
    logger.log(level, json.dumps(payload, default=str, sort_keys=True))
