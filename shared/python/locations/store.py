"""
PostGIS-backed location datastore.

Reads return coordinates in the structured (GeoJSON) form produced by
ST_AsGeoJSON; writes pass WKT text, which GeoAlchemy2 binds through
ST_GeogFromText.
"""

import asyncio
import json
import logging
import uuid
from typing import Any, Callable

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from models.base import AsyncSessionLocal
from models.location import LocationRow
from .errors import StoreError
from .record import LocationState

logger = logging.getLogger(__name__)

# asyncpg connect failures surface as OSError (ConnectionRefusedError) or
# timeouts, unwrapped by SQLAlchemy
_STORE_ERRORS = (SQLAlchemyError, OSError, asyncio.TimeoutError)

_WRITABLE = frozenset({
    "place_name", "google_maps_landmark", "description", "tags",
    "coordinates", "photo_url", "approved",
})


def _parse_id(record_id: str, operation: str) -> uuid.UUID:
    try:
        return uuid.UUID(str(record_id))
    except ValueError as e:
        raise StoreError(operation, f"invalid location id {record_id!r}") from e


def _check_columns(fields: dict[str, Any], operation: str) -> None:
    unknown = set(fields) - _WRITABLE
    if unknown:
        raise StoreError(operation, f"unknown columns {sorted(unknown)}")


class SqlLocationStore:
    """
    LocationStore implementation on SQLAlchemy async sessions.

    Usage:
        store = SqlLocationStore()
        rows = await store.select(LocationState.PENDING)
    """

    def __init__(self, session_factory: Callable[[], AsyncSession] = AsyncSessionLocal):
        self._session_factory = session_factory

    async def select(self, state: LocationState) -> list[dict[str, Any]]:
        stmt = (
            select(
                LocationRow.id,
                LocationRow.place_name,
                LocationRow.google_maps_landmark,
                LocationRow.description,
                LocationRow.tags,
                func.ST_AsGeoJSON(LocationRow.coordinates).label("coordinates"),
                LocationRow.photo_url,
                LocationRow.approved,
                LocationRow.created_at,
            )
            .where(LocationRow.approved == state.approved)
            .order_by(LocationRow.created_at.desc())
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                rows = result.mappings().all()
        except _STORE_ERRORS as e:
            logger.error(f"Location listing failed: {e}", extra={"state": state.value})
            raise StoreError("select", str(e)) from e

        records = []
        for row in rows:
            record = dict(row)
            record["id"] = str(record["id"])
            if record["coordinates"]:
                record["coordinates"] = json.loads(record["coordinates"])
            records.append(record)
        return records

    async def insert(self, row: dict[str, Any]) -> str:
        _check_columns(row, "insert")
        location = LocationRow(**row)
        try:
            async with self._session_factory() as session:
                session.add(location)
                await session.commit()
        except _STORE_ERRORS as e:
            logger.error(f"Location insert failed: {e}")
            raise StoreError("insert", str(e)) from e

        logger.info("Location stored", extra={"location_id": str(location.id)})
        return str(location.id)

    async def update(self, record_id: str, fields: dict[str, Any]) -> None:
        _check_columns(fields, "update")
        location_id = _parse_id(record_id, "update")
        stmt = update(LocationRow).where(LocationRow.id == location_id).values(**fields)
        await self._execute_single(stmt, "update", record_id)

    async def delete(self, record_id: str) -> None:
        location_id = _parse_id(record_id, "delete")
        stmt = delete(LocationRow).where(LocationRow.id == location_id)
        await self._execute_single(stmt, "delete", record_id)

    async def _execute_single(self, stmt, operation: str, record_id: str) -> None:
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                await session.commit()
        except _STORE_ERRORS as e:
            logger.error(f"Location {operation} failed: {e}", extra={"location_id": record_id})
            raise StoreError(operation, str(e)) from e

        if result.rowcount == 0:
            raise StoreError(operation, f"location {record_id} not found")
