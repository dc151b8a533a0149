"""
Moderation flow: review pending submissions and manage approved ones.

The flow owns the list of records for the current view. A state change is
sent to the store first; the local list only changes once the store confirms,
so a failed write leaves the view exactly as it was.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from config.constants import MapDefaults
from geo import GeoPoint, format_point
from locations.contracts import LocationStore, PhotoStore
from locations.errors import CollaboratorError, InvalidRecordError, InvalidTransitionError
from locations.record import (
    LocationRecord,
    LocationState,
    Transition,
    edit_fields,
    parse_tag_list,
)
from observability import record_moderation_action
from .results import ActionResult

logger = logging.getLogger(__name__)

_ACTION_VERBS = {
    Transition.APPROVE: "approving",
    Transition.UNAPPROVE: "unapproving",
    Transition.REMOVE: "deleting",
}


@dataclass
class EditSession:
    """Pending edits to one record. Nothing is stored until saved."""

    record: LocationRecord
    changes: dict[str, Any] = field(default_factory=dict)

    def set(self, name: str, value: Any) -> None:
        self.changes[name] = value

    def set_tags_text(self, text: str) -> None:
        """Tags as typed in the edit box: comma separated."""
        self.changes["tags"] = parse_tag_list(text)

    def pick_point(self, point: GeoPoint) -> None:
        self.changes["coordinates"] = point

    @property
    def tags_text(self) -> str:
        return ", ".join(self.changes.get("tags", self.record.tags))

    def preview(self) -> LocationRecord:
        """The edited record. Raises InvalidRecordError if the edits are invalid."""
        return self.record.edit(**self.changes)


class ModerationFlow:
    def __init__(
        self,
        store: LocationStore,
        photos: Optional[PhotoStore] = None,
        view: LocationState = LocationState.PENDING,
    ):
        self._store = store
        self._photos = photos
        self.view = view
        self.records: list[LocationRecord] = []
        self.filter_tag: Optional[str] = None
        self.editing: Optional[EditSession] = None

    async def refresh(self) -> ActionResult:
        """Reload the current view. On failure the list is left untouched."""
        try:
            rows = await self._store.select(self.view)
        except CollaboratorError as e:
            logger.error("Failed to load locations", extra={"view": self.view.value})
            return ActionResult(success=False, error=f"Error fetching locations: {e.message}")

        records = []
        for row in rows:
            try:
                records.append(LocationRecord.from_row(row))
            except InvalidRecordError as e:
                logger.warning(f"Skipping malformed location: {e}")
        self.records = records
        return ActionResult(success=True)

    async def switch_view(self, view: LocationState) -> ActionResult:
        self.view = view
        self.filter_tag = None
        self.editing = None
        return await self.refresh()

    def set_filter(self, tag: Optional[str]) -> None:
        self.filter_tag = tag or None

    def visible(self) -> list[LocationRecord]:
        """Records in the view, narrowed by the tag filter, newest first."""
        if self.filter_tag is None:
            return list(self.records)
        return [r for r in self.records if self.filter_tag in r.tags]

    def all_tags(self) -> list[str]:
        return sorted({tag for record in self.records for tag in record.tags})

    def find(self, record_id: str) -> Optional[LocationRecord]:
        return next((r for r in self.records if r.id == record_id), None)

    async def approve(self, record_id: str) -> ActionResult:
        return await self._apply(record_id, Transition.APPROVE)

    async def unapprove(self, record_id: str) -> ActionResult:
        return await self._apply(record_id, Transition.UNAPPROVE)

    async def remove(self, record_id: str) -> ActionResult:
        """Hard delete. Used both for rejecting a submission and for deleting."""
        return await self._apply(record_id, Transition.REMOVE)

    async def _apply(self, record_id: str, transition: Transition) -> ActionResult:
        record = self.find(record_id)
        if record is None:
            return ActionResult(success=False, error="Location is not in the current view.")

        try:
            updated = record.transition(transition)
        except InvalidTransitionError as e:
            record_moderation_action(transition.value, False)
            return ActionResult(success=False, error=str(e))

        try:
            if updated is None:
                await self._store.delete(record_id)
            else:
                await self._store.update(record_id, {"approved": updated.state.approved})
        except CollaboratorError as e:
            logger.error(
                f"Moderation action failed: {transition.value}",
                extra={"location_id": record_id},
            )
            record_moderation_action(transition.value, False)
            return ActionResult(
                success=False,
                error=f"Error {_ACTION_VERBS[transition]} location: {e.message}",
            )

        # Every transition moves the record out of the current view
        self.records = [r for r in self.records if r.id != record_id]
        if self.editing is not None and self.editing.record.id == record_id:
            self.editing = None

        logger.info(
            f"Location {transition.value} confirmed",
            extra={"location_id": record_id},
        )
        record_moderation_action(transition.value, True)
        return ActionResult(success=True)

    def start_edit(self, record_id: str) -> Optional[EditSession]:
        record = self.find(record_id)
        if record is None:
            return None
        self.editing = EditSession(record=record)
        return self.editing

    def cancel_edit(self) -> None:
        self.editing = None

    async def save_edit(self) -> ActionResult:
        """Validate and store the open edit session, then update the list."""
        session = self.editing
        if session is None:
            return ActionResult(success=False, error="No edit in progress.")
        if not session.changes:
            self.editing = None
            return ActionResult(success=True)

        try:
            edited = session.preview()
        except InvalidRecordError as e:
            return ActionResult(success=False, error=str(e))

        try:
            await self._store.update(edited.id, edit_fields(edited, session.changes))
        except CollaboratorError as e:
            record_moderation_action("edit", False)
            return ActionResult(success=False, error=f"Error updating location: {e.message}")

        self.records = [edited if r.id == edited.id else r for r in self.records]
        self.editing = None
        record_moderation_action("edit", True)
        return ActionResult(success=True)

    def photo_url(self, record: LocationRecord) -> Optional[str]:
        if not record.photo_ref or self._photos is None:
            return None
        return self._photos.public_url(record.photo_ref)

    def display_coordinates(self, record: LocationRecord) -> Optional[str]:
        return format_point(record.coordinates, MapDefaults.MODERATION_PRECISION)
