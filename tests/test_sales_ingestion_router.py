"""
tests/test_sales_ingestion_router.py

HTTP contract tests for the sales ingestion router.

The orchestrator and database session are replaced through FastAPI
dependency overrides.
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.api.routers.sales_ingestion import HEALTH_MESSAGE, router
from app.domain.ingestion_errors import UnsupportedFileTypeError
from app.domain.sales_columns import SalesColumn
from app.services.ingestion_orchestrator_service import get_ingestion_orchestrator_service
from db.models.file_processing_status import FileStatus
from db.session import get_db

UPLOADED_AT = datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)


class FakeOrchestrator:
    def __init__(self) -> None:
        self.triggered: list[dict[str, Any]] = []
        self.statuses: dict[uuid.UUID, SimpleNamespace] = {}
        self.stats: list[SimpleNamespace] = []
        self.stats_limits: list[int] = []

    def trigger_file_ingestion(self, *, db, executor, upload_file, manual_mapping=None):
        if upload_file.filename.endswith(".xlsx") and upload_file.file.read(2) != b"PK":
            raise UnsupportedFileTypeError("xlsx")
        tracked = SimpleNamespace(
            id=uuid.uuid4(),
            original_filename=upload_file.filename,
            status=FileStatus.PENDING,
        )
        self.triggered.append({"file_name": upload_file.filename, "manual_mapping": manual_mapping})
        return tracked

    def get_file_status(self, *, db, file_id):
        return self.statuses.get(file_id)

    def list_processing_stats(self, *, db, limit=500):
        self.stats_limits.append(limit)
        return self.stats[:limit]


@pytest.fixture()
def orchestrator() -> FakeOrchestrator:
    return FakeOrchestrator()


@pytest.fixture()
def client(orchestrator: FakeOrchestrator) -> TestClient:
    app = FastAPI()
    app.include_router(router)
    app.dependency_overrides[get_db] = lambda: None
    app.dependency_overrides[get_ingestion_orchestrator_service] = lambda: orchestrator
    return TestClient(app)


def _csv_file(content: bytes = b"Segment,Country\nGovernment,Canada\n", name: str = "sales.csv"):
    return {"file": (name, content, "text/csv")}


# ---------------------------------------------------------------------------
# Upload
# ---------------------------------------------------------------------------


def test_upload_is_accepted_with_tracking_id(client: TestClient, orchestrator: FakeOrchestrator) -> None:
    response = client.post("/api/upload/large-file", files=_csv_file())

    assert response.status_code == 202
    payload = response.json()
    assert payload["status"] == FileStatus.PENDING
    assert payload["file_name"] == "sales.csv"
    assert payload["message"] == f"File upload initiated. Tracking ID: {payload['file_id']}"
    assert orchestrator.triggered == [{"file_name": "sales.csv", "manual_mapping": None}]


def test_upload_passes_parsed_column_mapping(client: TestClient, orchestrator: FakeOrchestrator) -> None:
    response = client.post(
        "/api/upload/large-file",
        params={"column_mapping": json.dumps({"0": "segment", "3": "Units Sold"})},
        files=_csv_file(),
    )

    assert response.status_code == 202
    assert orchestrator.triggered[0]["manual_mapping"] == {
        0: SalesColumn.SEGMENT,
        3: SalesColumn.UNITS_SOLD,
    }


@pytest.mark.parametrize("name", ["sales.txt", "sales.xls", "sales"])
def test_upload_rejects_other_file_types(client: TestClient, orchestrator: FakeOrchestrator, name: str) -> None:
    response = client.post("/api/upload/large-file", files=_csv_file(name=name))

    assert response.status_code == 400
    assert response.json()["detail"] == "Only CSV and XLSX files are allowed."
    assert orchestrator.triggered == []


def test_upload_rejects_empty_file(client: TestClient) -> None:
    response = client.post("/api/upload/large-file", files=_csv_file(content=b""))

    assert response.status_code == 400
    assert response.json()["detail"] == "Please select a file to upload."


def test_orchestrator_type_errors_become_bad_request(client: TestClient) -> None:
    response = client.post(
        "/api/upload/large-file",
        files={"file": ("sales.xlsx", b"not a zip", "application/octet-stream")},
    )

    assert response.status_code == 400
    assert "Unsupported file type" in response.json()["detail"]


@pytest.mark.parametrize(
    "column_mapping",
    ["{not json", "[1, 2]", '{"first": "Segment"}', '{"0": "Revenue"}', '{"0": 7}'],
)
def test_upload_rejects_malformed_column_mapping(client: TestClient, column_mapping: str) -> None:
    response = client.post(
        "/api/upload/large-file",
        params={"column_mapping": column_mapping},
        files=_csv_file(),
    )

    assert response.status_code == 400


def test_upload_rejects_duplicate_column_mapping(client: TestClient) -> None:
    response = client.post(
        "/api/upload/large-file",
        params={"column_mapping": json.dumps({"0": "Segment", "2": "segment"})},
        files=_csv_file(),
    )

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert [error["code"] for error in detail["errors"]] == ["duplicate_sales_column"]


def test_upload_rejects_negative_column_index(client: TestClient) -> None:
    response = client.post(
        "/api/upload/large-file",
        params={"column_mapping": json.dumps({"-1": "Segment"})},
        files=_csv_file(),
    )

    assert response.status_code == 400
    assert response.json()["detail"]["errors"][0]["code"] == "negative_column_index"


# ---------------------------------------------------------------------------
# Status and statistics
# ---------------------------------------------------------------------------


def test_file_status_returns_tracking_row(client: TestClient, orchestrator: FakeOrchestrator) -> None:
    file_id = uuid.uuid4()
    orchestrator.statuses[file_id] = SimpleNamespace(
        id=file_id,
        filename="sales_upload_abc.csv",
        original_filename="sales.csv",
        status=FileStatus.COMPLETED,
        error_message="1 of 3 rows failed.",
        uploaded_at=UPLOADED_AT,
        processed_at=UPLOADED_AT,
        updated_at=UPLOADED_AT,
    )

    response = client.get(f"/api/file-status/{file_id}")

    assert response.status_code == 200
    payload = response.json()
    assert payload["file_id"] == str(file_id)
    assert payload["status"] == FileStatus.COMPLETED
    assert payload["error_message"] == "1 of 3 rows failed."


def test_file_status_unknown_id_is_not_found(client: TestClient) -> None:
    file_id = uuid.uuid4()

    response = client.get(f"/api/file-status/{file_id}")

    assert response.status_code == 404
    assert response.json()["detail"] == f"File not found: {file_id}"


def test_file_status_rejects_malformed_id(client: TestClient) -> None:
    response = client.get("/api/file-status/not-a-uuid")

    assert response.status_code == 422


def test_processing_stats_lists_counters(client: TestClient, orchestrator: FakeOrchestrator) -> None:
    file_id = uuid.uuid4()
    orchestrator.stats = [
        SimpleNamespace(
            file_id=file_id,
            file=SimpleNamespace(original_filename="sales.csv"),
            total_rows=700,
            processed_rows=699,
            failed_rows=1,
            duration_seconds=2,
            created_at=UPLOADED_AT,
        )
    ]

    response = client.get("/api/processing-stats", params={"limit": 10})

    assert response.status_code == 200
    (item,) = response.json()
    assert item["original_filename"] == "sales.csv"
    assert (item["total_rows"], item["processed_rows"], item["failed_rows"]) == (700, 699, 1)
    assert orchestrator.stats_limits == [10]


def test_processing_stats_limit_is_bounded(client: TestClient) -> None:
    assert client.get("/api/processing-stats", params={"limit": 0}).status_code == 422


def test_health_check_returns_plain_text(client: TestClient) -> None:
    response = client.get("/api/")

    assert response.status_code == 200
    assert response.text == HEALTH_MESSAGE
