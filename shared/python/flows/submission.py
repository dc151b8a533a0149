"""
Submission flow: a visitor proposes a new chill spot.

The form collects a landmark name, a description, tags and a point (from
place search or a manual map pin), plus an optional photo. Submitting:

1. validate locally, including tags; nothing is sent if anything is invalid
2. upload the photo, if any; a failed upload aborts before any row exists
3. insert the row as pending with WKT coordinates

Collaborator failures come back as SubmissionResult(success=False, error=...).
"""

import logging
import uuid
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Optional

from pydantic import ValidationError

from config import settings
from config.constants import SUGGESTED_TAGS, MapDefaults
from geo import GeoPoint, format_point
from locations.contracts import LocationStore, PhotoStore
from locations.errors import CollaboratorError
from locations.record import LocationDraft
from observability import LogContext, record_submission
from places.errors import PlaceSearchError
from places.google import PlaceSearch, PlaceSuggestion
from .results import ActionResult, SearchResult, SubmissionResult

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Place submitted successfully! Pending admin approval."

# Draft field -> form field
_FORM_FIELDS = {
    "display_name": "landmark",
    "landmark_label": "landmark",
    "description": "description",
    "tags": "tags",
    "coordinates": "point",
}


def _draft_errors(error: ValidationError) -> dict[str, str]:
    errors = {}
    for item in error.errors():
        name = item["loc"][0] if item["loc"] else "form"
        errors.setdefault(_FORM_FIELDS.get(name, str(name)), item["msg"])
    return errors


@dataclass
class PhotoUpload:
    filename: str
    data: bytes
    content_type: Optional[str] = None

    @property
    def extension(self) -> str:
        return PurePosixPath(self.filename).suffix.lstrip(".")


@dataclass
class SubmissionForm:
    """Form state, mutated by the visitor before submitting."""

    landmark: str = ""
    description: str = ""
    tags: list[str] = field(default_factory=list)
    point: Optional[GeoPoint] = None
    photo: Optional[PhotoUpload] = None

    suggested_tags: tuple[str, ...] = tuple(SUGGESTED_TAGS)

    def toggle_tag(self, tag: str) -> None:
        """Add a tag, or remove it if already selected. Blank tags are ignored."""
        tag = tag.strip()
        if not tag:
            return
        if tag in self.tags:
            self.tags.remove(tag)
        else:
            self.tags.append(tag)

    def add_custom_tag(self, text: str) -> bool:
        """Add a free-form tag. Blank input and exact duplicates are ignored."""
        tag = text.strip()
        if not tag or tag in self.tags:
            return False
        self.tags.append(tag)
        return True

    def pin(self, point: GeoPoint) -> None:
        """Manual point selection by clicking the map."""
        self.point = point

    @property
    def map_center(self) -> tuple[float, float]:
        if self.point is not None:
            return self.point.as_tuple()
        return (MapDefaults.CENTER_LAT, MapDefaults.CENTER_LNG)

    @property
    def point_label(self) -> Optional[str]:
        return format_point(self.point, MapDefaults.SUBMISSION_PRECISION)

    def validate(self) -> dict[str, str]:
        """Field name -> problem. Empty when the form can be submitted."""
        errors = {}
        if not self.landmark.strip():
            errors["landmark"] = "Please enter the landmark or location name."
        if not self.description.strip():
            errors["description"] = "Please describe why this spot is chill."
        if self.point is None:
            errors["point"] = "Please pick the location on the map or search for a landmark."
        return errors


class SubmissionFlow:
    """
    Orchestrates place search, photo upload and record creation.

    Usage:
        flow = SubmissionFlow(store, photos, places)
        form = SubmissionForm(landmark="Victoria Park", description="...")
        form.pin(GeoPoint(lat=22.28, lng=114.19))
        result = await flow.submit(form)
    """

    def __init__(
        self,
        store: LocationStore,
        photos: PhotoStore,
        places: Optional[PlaceSearch] = None,
        upload_prefix: str = settings.PHOTO_UPLOAD_PREFIX,
    ):
        self._store = store
        self._photos = photos
        self._places = places
        self._upload_prefix = upload_prefix.strip("/")

    async def search(self, text: str) -> SearchResult:
        """Landmark autocomplete. Failures are messages; map pinning still works."""
        if not text.strip() or self._places is None:
            return SearchResult(success=True)
        try:
            suggestions = await self._places.search(text)
        except PlaceSearchError as e:
            return SearchResult(success=False, error=e.user_message)
        return SearchResult(success=True, suggestions=suggestions)

    async def choose(self, form: SubmissionForm, suggestion: PlaceSuggestion) -> ActionResult:
        """Resolve a suggestion and use its point and name in the form."""
        if self._places is None:
            return ActionResult(success=False, error="Place search is not available.")
        try:
            details = await self._places.details(suggestion.place_id)
        except PlaceSearchError as e:
            return ActionResult(success=False, error=e.user_message)

        form.point = details.point
        form.landmark = details.name or suggestion.main_text
        logger.debug("Place selected", extra={"place_id": suggestion.place_id})
        return ActionResult(success=True)

    def _photo_path(self, photo: PhotoUpload) -> str:
        name = uuid.uuid4().hex
        if photo.extension:
            name = f"{name}.{photo.extension}"
        return f"{self._upload_prefix}/{name}"

    async def submit(self, form: SubmissionForm) -> SubmissionResult:
        field_errors = form.validate()
        draft = None
        if not field_errors:
            try:
                draft = LocationDraft(
                    display_name=form.landmark,
                    landmark_label=form.landmark,
                    description=form.description,
                    tags=form.tags,
                    coordinates=form.point,
                )
            except ValidationError as e:
                field_errors = _draft_errors(e)

        if field_errors:
            record_submission("invalid")
            return SubmissionResult(
                success=False,
                error=next(iter(field_errors.values())),
                field_errors=field_errors,
            )

        with LogContext(trace_id=uuid.uuid4().hex):
            photo_path = None
            if form.photo is not None:
                photo_path = self._photo_path(form.photo)
                try:
                    await self._photos.upload(photo_path, form.photo.data, form.photo.content_type)
                except CollaboratorError as e:
                    logger.warning("Submission aborted: photo upload failed", extra={"key": photo_path})
                    record_submission("upload_failed")
                    return SubmissionResult(success=False, error=f"Error uploading photo: {e.message}")
                draft = draft.model_copy(update={"photo_ref": photo_path})

            try:
                record_id = await self._store.insert(draft.to_row())
            except CollaboratorError as e:
                logger.error("Submission insert failed", extra={"photo_key": photo_path})
                record_submission("insert_failed")
                return SubmissionResult(success=False, error=f"Error saving location details: {e.message}")

            logger.info("Location submitted for review", extra={"location_id": record_id})
            record_submission("created")
            return SubmissionResult(success=True, record_id=record_id, message=SUCCESS_MESSAGE)
