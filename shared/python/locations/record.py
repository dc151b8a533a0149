"""
Location record and its moderation lifecycle.

States:
- PENDING:  submitted, waiting for a moderator (initial state)
- APPROVED: visible on the public map
- deleted:  terminal, the row no longer exists (this is how rejection works)

Transitions:
    approve:   PENDING  -> APPROVED
    unapprove: APPROVED -> PENDING
    remove:    PENDING | APPROVED -> deleted

Edits to text fields, tags and coordinates are allowed in both live states
and never change the state.

On the wire a record is a datastore row:
    id, place_name, google_maps_landmark, description, tags,
    coordinates (GeoJSON or WKT), photo_url, approved, created_at
"""

from datetime import datetime
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from geo import GeoPoint, decode, encode
from .errors import InvalidRecordError, InvalidTransitionError


class LocationState(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"

    @property
    def approved(self) -> bool:
        return self is LocationState.APPROVED

    @classmethod
    def from_approved(cls, approved: Optional[bool]) -> "LocationState":
        return cls.APPROVED if approved else cls.PENDING


class Transition(str, Enum):
    APPROVE = "approve"
    UNAPPROVE = "unapprove"
    REMOVE = "remove"


# (state, transition) -> next state; None means the record is deleted
_TRANSITIONS: dict[tuple[LocationState, Transition], Optional[LocationState]] = {
    (LocationState.PENDING, Transition.APPROVE): LocationState.APPROVED,
    (LocationState.APPROVED, Transition.UNAPPROVE): LocationState.PENDING,
    (LocationState.PENDING, Transition.REMOVE): None,
    (LocationState.APPROVED, Transition.REMOVE): None,
}

# Domain field -> datastore column
_COLUMNS = {
    "display_name": "place_name",
    "landmark_label": "google_maps_landmark",
    "description": "description",
    "tags": "tags",
    "coordinates": "coordinates",
}

EDITABLE_FIELDS = frozenset({"display_name", "landmark_label", "description", "tags", "coordinates"})


def next_state(state: LocationState, transition: Transition) -> Optional[LocationState]:
    """Apply the transition table. Raises InvalidTransitionError if not allowed."""
    try:
        return _TRANSITIONS[(state, transition)]
    except KeyError:
        raise InvalidTransitionError(transition.value, state.value) from None


def normalize_tags(tags: Iterable[str]) -> list[str]:
    """Trim every tag and drop exact duplicates, keeping first-seen order."""
    result: list[str] = []
    for tag in tags:
        cleaned = tag.strip()
        if not cleaned:
            raise ValueError("Tags must not be empty")
        if cleaned not in result:
            result.append(cleaned)
    return result


def parse_tag_list(text: str) -> list[str]:
    """Parse a comma-separated tag field, ignoring blank entries."""
    return normalize_tags(t for t in text.split(",") if t.strip())


class _LocationFields(BaseModel):
    model_config = ConfigDict(frozen=True)

    display_name: str
    landmark_label: str = ""
    description: str
    tags: list[str] = Field(default_factory=list)
    photo_ref: Optional[str] = None

    @field_validator("display_name", "description")
    @classmethod
    def _required_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v

    @field_validator("tags")
    @classmethod
    def _clean_tags(cls, v: list[str]) -> list[str]:
        return normalize_tags(v)


class LocationDraft(_LocationFields):
    """A submission that has not been stored yet. A point is mandatory."""

    coordinates: GeoPoint

    def to_row(self) -> dict[str, Any]:
        """Insert payload: always pending, coordinates as WKT."""
        return {
            "place_name": self.display_name,
            "google_maps_landmark": self.landmark_label,
            "description": self.description,
            "tags": list(self.tags),
            "coordinates": encode(self.coordinates),
            "photo_url": self.photo_ref,
            "approved": False,
        }


class LocationRecord(_LocationFields):
    """A stored location. Instances are immutable; transitions return copies."""

    id: str
    coordinates: Optional[GeoPoint] = None
    state: LocationState = LocationState.PENDING
    created_at: datetime

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "LocationRecord":
        """Build from a datastore row. Coordinates may be GeoJSON or WKT."""
        try:
            return cls(
                id=str(row["id"]),
                display_name=row.get("place_name") or "",
                landmark_label=row.get("google_maps_landmark") or "",
                description=row.get("description") or "",
                tags=row.get("tags") or [],
                coordinates=decode(row.get("coordinates")),
                photo_ref=row.get("photo_url"),
                state=LocationState.from_approved(row.get("approved")),
                created_at=row["created_at"],
            )
        except (KeyError, ValidationError) as e:
            raise InvalidRecordError(f"Malformed location row {row.get('id')!r}: {e}") from e

    def transition(self, transition: Transition) -> Optional["LocationRecord"]:
        """Return the record after `transition`, or None if it was removed."""
        state = next_state(self.state, transition)
        if state is None:
            return None
        return self.model_copy(update={"state": state})

    def approve(self) -> "LocationRecord":
        return self.transition(Transition.APPROVE)

    def unapprove(self) -> "LocationRecord":
        return self.transition(Transition.UNAPPROVE)

    def edit(self, **changes: Any) -> "LocationRecord":
        """Validated copy with edited fields. State is never changed by an edit."""
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise InvalidRecordError(f"Fields not editable: {sorted(unknown)}")
        if "coordinates" in changes and changes["coordinates"] is None and self.coordinates is not None:
            raise InvalidRecordError("Coordinates cannot be cleared once set")
        try:
            return LocationRecord(**{**dict(self), **changes})
        except ValidationError as e:
            raise InvalidRecordError(str(e)) from e


def edit_fields(record: LocationRecord, fields: Iterable[str]) -> dict[str, Any]:
    """Partial update payload for `fields`, in datastore column names."""
    payload: dict[str, Any] = {}
    for name in fields:
        value = getattr(record, name)
        if name == "coordinates":
            value = encode(value) if value is not None else None
        elif name == "tags":
            value = list(value)
        payload[_COLUMNS[name]] = value
    return payload
