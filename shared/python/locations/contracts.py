"""
Collaborator contracts consumed by the submission and moderation flows.

Implementations raise StoreError / UploadError on failure; the flows turn
those into user-facing messages. Each call is treated as atomic.
"""

from typing import Any, Optional, Protocol

from .record import LocationState


class LocationStore(Protocol):
    """Datastore holding location rows (see locations.record for the row shape)."""

    async def select(self, state: LocationState) -> list[dict[str, Any]]:
        """Rows in `state`, newest `created_at` first."""
        ...

    async def insert(self, row: dict[str, Any]) -> str:
        """Create a row and return its id."""
        ...

    async def update(self, record_id: str, fields: dict[str, Any]) -> None:
        ...

    async def delete(self, record_id: str) -> None:
        ...


class PhotoStore(Protocol):
    """Object storage for submission photos."""

    async def upload(self, path: str, data: bytes, content_type: Optional[str] = None) -> None:
        ...

    def public_url(self, path: Optional[str]) -> Optional[str]:
        ...
