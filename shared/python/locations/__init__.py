"""Location records, their moderation lifecycle, and datastore contracts."""

from .contracts import LocationStore, PhotoStore
from .errors import (
    ChillSpotError,
    CollaboratorError,
    InvalidRecordError,
    InvalidTransitionError,
    StoreError,
    UploadError,
)
from .record import (
    EDITABLE_FIELDS,
    LocationDraft,
    LocationRecord,
    LocationState,
    Transition,
    edit_fields,
    next_state,
    normalize_tags,
    parse_tag_list,
)

__all__ = [
    "LocationStore",
    "PhotoStore",
    "ChillSpotError",
    "CollaboratorError",
    "InvalidRecordError",
    "InvalidTransitionError",
    "StoreError",
    "UploadError",
    "EDITABLE_FIELDS",
    "LocationDraft",
    "LocationRecord",
    "LocationState",
    "Transition",
    "edit_fields",
    "next_state",
    "normalize_tags",
    "parse_tag_list",
]
