"""
app/repositories/sales_record_repository.py

Persistence layer for mapped sales records.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Sequence
from typing import Any

from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.ingestion_errors import PersistenceFailure
from app.domain.sales_record import SalesRecord
from db.models.sales_data import SalesData

logger = logging.getLogger(__name__)

_DEFAULT_BATCH_SIZE = 1000


class SalesRecordRepository:
    """
    Repository for batch persistence of sales records.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def bulk_insert(
        self,
        records: Sequence[SalesRecord],
        *,
        file_id: uuid.UUID | None = None,
        batch_size: int = _DEFAULT_BATCH_SIZE,
    ) -> int:
        """
        Insert records with PostgreSQL multi-row INSERT statements.
        """

        if not records:
            return 0

        payloads: list[dict[str, Any]] = [
            {**record.to_payload(), "file_id": file_id}
            for record in records
        ]
        size = max(1, batch_size)
        inserted = 0
        for start in range(0, len(payloads), size):
            chunk = payloads[start : start + size]
            self._session.execute(insert(SalesData).values(chunk))
            inserted += len(chunk)
        return inserted


class SalesRecordSink:
    """
    Record sink that stores each batch in its own session and transaction.

    Every `save_all` call opens a fresh session from the factory, so chunks
    running on different threads never share one.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        *,
        file_id: uuid.UUID | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._file_id = file_id

    def save_all(self, batch: Sequence[SalesRecord]) -> None:
        if not batch:
            return

        session = self._session_factory()
        try:
            SalesRecordRepository(session).bulk_insert(batch, file_id=self._file_id)
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.warning("Sales batch of %d rows was rolled back: %s", len(batch), exc)
            raise PersistenceFailure(f"Could not store {len(batch)} sales rows: {exc}") from exc
        finally:
            session.close()
