"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation.
"""

from __future__ import annotations

import json
import os

from fastapi import File, HTTPException, Query, UploadFile, status

from app.domain.sales_columns import SalesColumn
from app.readers.row_sources import SUPPORTED_EXTENSIONS, extension_of
from app.validators.mapping_validator import MappingValidator, SchemaMappingError


def get_tabular_upload(file: UploadFile = File(...)) -> UploadFile:
    """
    Accept non-empty `.csv` and `.xlsx` uploads only.
    """

    if extension_of((file.filename or "").strip()) not in SUPPORTED_EXTENSIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only CSV and XLSX files are allowed.",
        )

    file.file.seek(0, os.SEEK_END)
    size = file.file.tell()
    file.file.seek(0)
    if size == 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please select a file to upload.",
        )

    return file


def get_manual_mapping(
    column_mapping: str | None = Query(
        default=None,
        description='Optional JSON object of column index to column name, e.g. {"0": "Segment"}',
    ),
) -> dict[int, SalesColumn] | None:
    """
    Parse and check optional manual column overrides.
    """

    if column_mapping is None or not column_mapping.strip():
        return None

    try:
        raw = json.loads(column_mapping)
    except json.JSONDecodeError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"column_mapping is not valid JSON: {exc.msg}",
        ) from exc
    if not isinstance(raw, dict):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="column_mapping must be a JSON object.",
        )

    overrides: dict[int, SalesColumn] = {}
    for key, value in raw.items():
        try:
            index = int(key)
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"column_mapping key {key!r} is not a column index.",
            ) from exc
        sales_column = SalesColumn.from_display_name(value if isinstance(value, str) else None)
        if sales_column is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"column_mapping entry {key!r}: {value!r} does not name a known column.",
            )
        overrides[index] = sales_column

    try:
        MappingValidator().validate(mapping=overrides)
    except SchemaMappingError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=exc.to_dict(),
        ) from exc
    return overrides
