"""Public map: approved locations with a tag filter and a focused marker."""

import logging
from typing import Optional

from config.constants import ALL_TAGS_FILTER, MapDefaults
from geo import GeoPoint
from locations.contracts import LocationStore, PhotoStore
from locations.errors import CollaboratorError, InvalidRecordError
from locations.record import LocationRecord, LocationState
from .results import ActionResult

logger = logging.getLogger(__name__)


class ExploreFlow:
    def __init__(self, store: LocationStore, photos: Optional[PhotoStore] = None):
        self._store = store
        self._photos = photos
        self.records: list[LocationRecord] = []
        # None means no tag filter
        self.active_filter: Optional[str] = None
        self.selected_id: Optional[str] = None

    async def refresh(self) -> ActionResult:
        try:
            rows = await self._store.select(LocationState.APPROVED)
        except CollaboratorError as e:
            logger.error("Failed to load approved locations")
            return ActionResult(success=False, error=f"Error fetching locations: {e.message}")

        records = []
        for row in rows:
            try:
                records.append(LocationRecord.from_row(row))
            except InvalidRecordError as e:
                logger.warning(f"Skipping malformed location: {e}")
        self.records = records
        if self.selected_id is not None and self._find(self.selected_id) is None:
            self.selected_id = None
        return ActionResult(success=True)

    def filters(self) -> list[tuple[str, Optional[str]]]:
        """
        Filter choices as (label, value) pairs.

        The first choice is labelled "All" with value None. A tag literally
        named "All" is listed as its own choice.
        """
        tags = sorted({tag for record in self.records for tag in record.tags})
        return [(ALL_TAGS_FILTER, None), *((tag, tag) for tag in tags)]

    def set_filter(self, tag: Optional[str]) -> None:
        self.active_filter = tag or None

    @property
    def filter_label(self) -> str:
        return ALL_TAGS_FILTER if self.active_filter is None else self.active_filter

    def visible(self) -> list[LocationRecord]:
        if self.active_filter is None:
            return list(self.records)
        return [r for r in self.records if self.active_filter in r.tags]

    def markers(self) -> list[tuple[LocationRecord, GeoPoint]]:
        """Visible records that can be placed on the map."""
        return [(r, r.coordinates) for r in self.visible() if r.coordinates is not None]

    def _find(self, record_id: str) -> Optional[LocationRecord]:
        return next((r for r in self.records if r.id == record_id), None)

    def select(self, record_id: Optional[str]) -> None:
        self.selected_id = record_id

    def focus(self) -> tuple[GeoPoint, int]:
        """Map centre and zoom: the selected marker, else the city overview."""
        record = self._find(self.selected_id) if self.selected_id else None
        if record is not None and record.coordinates is not None:
            return record.coordinates, MapDefaults.FOCUS_ZOOM
        return GeoPoint(lat=MapDefaults.CENTER_LAT, lng=MapDefaults.CENTER_LNG), MapDefaults.OVERVIEW_ZOOM

    def photo_url(self, record: LocationRecord) -> Optional[str]:
        if not record.photo_ref or self._photos is None:
            return None
        return self._photos.public_url(record.photo_ref)
