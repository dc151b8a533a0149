"""Place search (landmark autocomplete) collaborator."""

from .errors import PlaceSearchError, PlaceSearchStatus
from .google import GooglePlacesClient, PlaceDetails, PlaceSearch, PlaceSuggestion

__all__ = [
    "GooglePlacesClient",
    "PlaceDetails",
    "PlaceSearch",
    "PlaceSearchError",
    "PlaceSearchStatus",
    "PlaceSuggestion",
]
