"""Place-search failures and the messages shown for them."""

from enum import Enum


class PlaceSearchStatus(str, Enum):
    """Status values reported by the Places web service."""
    OK = "OK"
    ZERO_RESULTS = "ZERO_RESULTS"
    OVER_QUERY_LIMIT = "OVER_QUERY_LIMIT"
    REQUEST_DENIED = "REQUEST_DENIED"
    INVALID_REQUEST = "INVALID_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"

    @classmethod
    def parse(cls, value: str) -> "PlaceSearchStatus":
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN_ERROR


_SEARCH_MESSAGES = {
    PlaceSearchStatus.ZERO_RESULTS: "No results found for this landmark in Hong Kong.",
    PlaceSearchStatus.OVER_QUERY_LIMIT: "Search limit exceeded. Please try again later or click the map manually.",
    PlaceSearchStatus.REQUEST_DENIED: "Search service is currently unavailable (Request Denied).",
}
_SEARCH_FALLBACK = "Search failed. Please try clicking the map manually."

_DETAILS_RATE_LIMITED = "Rate limit exceeded fetching details. Please try manual pinning."


class PlaceSearchError(Exception):
    """
    Place search or place details lookup failed.

    Attributes:
        status: Upstream status
        stage: "search" (autocomplete) or "details"
    """

    def __init__(self, status: PlaceSearchStatus, stage: str = "search", detail: str = ""):
        self.status = status
        self.stage = stage
        self.detail = detail
        super().__init__(f"Place {stage} failed with {status.value}" + (f": {detail}" if detail else ""))

    @property
    def user_message(self) -> str:
        """Message shown next to the search box. Manual pinning always remains possible."""
        if self.stage == "details":
            if self.status is PlaceSearchStatus.OVER_QUERY_LIMIT:
                return _DETAILS_RATE_LIMITED
            return f"Failed to fetch location details (Status: {self.status.value})."
        return _SEARCH_MESSAGES.get(self.status, _SEARCH_FALLBACK)
