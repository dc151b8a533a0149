"""In-memory collaborators for flow tests."""
from datetime import datetime, timedelta, timezone
from typing import Any, Optional
import uuid

import pytest

from locations.errors import StoreError, UploadError
from locations.record import LocationState

BASE_TIME = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeLocationStore:
    """Dict-backed LocationStore that records calls and can be told to fail."""

    def __init__(self):
        self.rows: dict[str, dict[str, Any]] = {}
        self.calls: list[tuple] = []
        self.fail: set[str] = set()

    def add(self, name: str, tags: list[str], approved: bool = False, minutes: int = 0, **extra) -> str:
        record_id = str(uuid.uuid4())
        self.rows[record_id] = {
            "id": record_id,
            "place_name": name,
            "google_maps_landmark": name,
            "description": f"{name} is chill",
            "tags": tags,
            "coordinates": {"type": "Point", "coordinates": [114.17, 22.3]},
            "photo_url": None,
            "approved": approved,
            "created_at": BASE_TIME + timedelta(minutes=minutes),
            **extra,
        }
        return record_id

    def _check(self, operation: str) -> None:
        if operation in self.fail:
            raise StoreError(operation, "service unavailable")

    async def select(self, state: LocationState) -> list[dict[str, Any]]:
        self.calls.append(("select", state))
        self._check("select")
        rows = [dict(r) for r in self.rows.values() if r["approved"] == state.approved]
        return sorted(rows, key=lambda r: r["created_at"], reverse=True)

    async def insert(self, row: dict[str, Any]) -> str:
        self.calls.append(("insert", row))
        self._check("insert")
        record_id = str(uuid.uuid4())
        self.rows[record_id] = {**row, "id": record_id, "created_at": datetime.now(timezone.utc)}
        return record_id

    async def update(self, record_id: str, fields: dict[str, Any]) -> None:
        self.calls.append(("update", record_id, fields))
        self._check("update")
        self.rows[record_id].update(fields)

    async def delete(self, record_id: str) -> None:
        self.calls.append(("delete", record_id))
        self._check("delete")
        del self.rows[record_id]


class FakePhotoStore:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.uploads: list[tuple[str, bytes, Optional[str]]] = []

    async def upload(self, path: str, data: bytes, content_type: Optional[str] = None) -> None:
        if self.fail:
            raise UploadError("upload", "bucket not found")
        self.uploads.append((path, data, content_type))

    def public_url(self, path: Optional[str]) -> Optional[str]:
        return f"https://photos.test/photos/{path}" if path else None


@pytest.fixture
def store():
    return FakeLocationStore()


@pytest.fixture
def photos():
    return FakePhotoStore()
