"""
Process wiring: logging plus flows bound to the configured collaborators.

Usage:
    from flows.runtime import configure, moderation_flow

    configure("moderation")
    flow = moderation_flow()
    await flow.refresh()
"""

from typing import Optional

from config import settings
from locations.contracts import LocationStore, PhotoStore
from observability import get_logger, setup_logging
from places.google import GooglePlacesClient, PlaceSearch
from .explore import ExploreFlow
from .moderation import ModerationFlow
from .submission import SubmissionFlow

logger = get_logger(__name__)


def configure(service_name: str) -> None:
    setup_logging(
        service_name=service_name,
        level=settings.LOG_LEVEL.upper(),
        json_format=settings.LOG_FORMAT.lower() != "console",
    )


def default_store() -> LocationStore:
    # Imported here so building flows with injected stores never touches the engine
    from locations.store import SqlLocationStore
    return SqlLocationStore()


def default_photos() -> PhotoStore:
    from storage.photos import MinioPhotoStore
    return MinioPhotoStore()


def place_search() -> Optional[PlaceSearch]:
    """Places client, or None when no API key is configured."""
    if not settings.has_place_search():
        logger.warning("GOOGLE_MAPS_API_KEY not set: landmark search disabled, manual pinning only")
        return None
    return GooglePlacesClient(api_key=settings.GOOGLE_MAPS_API_KEY)


def submission_flow(
    store: Optional[LocationStore] = None,
    photos: Optional[PhotoStore] = None,
    places: Optional[PlaceSearch] = None,
) -> SubmissionFlow:
    return SubmissionFlow(
        store or default_store(),
        photos or default_photos(),
        places if places is not None else place_search(),
    )


def moderation_flow(
    store: Optional[LocationStore] = None,
    photos: Optional[PhotoStore] = None,
) -> ModerationFlow:
    return ModerationFlow(store or default_store(), photos or default_photos())


def explore_flow(
    store: Optional[LocationStore] = None,
    photos: Optional[PhotoStore] = None,
) -> ExploreFlow:
    return ExploreFlow(store or default_store(), photos or default_photos())
