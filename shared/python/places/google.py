"""
Google Places web service client.

Two calls back the landmark search box on the submission form:
- autocomplete: free text -> suggestions (restricted to one country)
- details: suggestion place_id -> name + point

Any status other than OK is raised as PlaceSearchError; the caller decides
how to show it.
"""

import logging
from typing import Any, Optional, Protocol

import httpx
from pydantic import BaseModel

from config import settings
from config.constants import Timeouts
from geo import GeoPoint
from observability.metrics import record_place_search
from .errors import PlaceSearchError, PlaceSearchStatus

logger = logging.getLogger(__name__)

DETAIL_FIELDS = "name,geometry,formatted_address"


class PlaceSuggestion(BaseModel):
    place_id: str
    description: str
    main_text: str


class PlaceDetails(BaseModel):
    name: str
    point: GeoPoint
    address: Optional[str] = None


class PlaceSearch(Protocol):
    """Place-search collaborator used by the submission flow."""

    async def search(self, text: str) -> list[PlaceSuggestion]:
        ...

    async def details(self, suggestion_id: str) -> PlaceDetails:
        ...


class GooglePlacesClient:
    """
    Places API client on httpx.

    Usage:
        places = GooglePlacesClient(api_key=settings.GOOGLE_MAPS_API_KEY)
        suggestions = await places.search("Victoria Park")
        details = await places.details(suggestions[0].place_id)
    """

    def __init__(
        self,
        api_key: str,
        country: str = settings.PLACES_COUNTRY,
        base_url: str = settings.GOOGLE_PLACES_BASE_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api_key = api_key
        self._country = country
        self._base_url = base_url.rstrip("/")
        self._transport = transport

    async def _get(self, endpoint: str, params: dict[str, str], stage: str) -> dict[str, Any]:
        params = {**params, "key": self._api_key}
        try:
            async with httpx.AsyncClient(timeout=Timeouts.HTTP_SHORT, transport=self._transport) as client:
                response = await client.get(f"{self._base_url}/{endpoint}/json", params=params)
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Place {stage} request failed: {e}")
            record_place_search("TRANSPORT_ERROR")
            raise PlaceSearchError(PlaceSearchStatus.UNKNOWN_ERROR, stage, str(e)) from e

        status = PlaceSearchStatus.parse(payload.get("status", ""))
        record_place_search(status.value)
        if status is not PlaceSearchStatus.OK:
            logger.warning(
                f"Place {stage} returned {status.value}",
                extra={"error_message": payload.get("error_message")},
            )
            raise PlaceSearchError(status, stage, payload.get("error_message", ""))
        return payload

    async def search(self, text: str) -> list[PlaceSuggestion]:
        payload = await self._get(
            "autocomplete",
            {"input": text, "components": f"country:{self._country}"},
            stage="search",
        )
        return [
            PlaceSuggestion(
                place_id=p["place_id"],
                description=p.get("description", ""),
                main_text=p.get("structured_formatting", {}).get("main_text") or p.get("description", ""),
            )
            for p in payload.get("predictions", [])
        ]

    async def details(self, suggestion_id: str) -> PlaceDetails:
        payload = await self._get(
            "details",
            {"place_id": suggestion_id, "fields": DETAIL_FIELDS},
            stage="details",
        )
        result = payload.get("result") or {}
        location = (result.get("geometry") or {}).get("location")
        if not location:
            raise PlaceSearchError(PlaceSearchStatus.NOT_FOUND, "details", "place has no geometry")
        try:
            point = GeoPoint(lat=location["lat"], lng=location["lng"])
        except (KeyError, TypeError, ValueError) as e:
            raise PlaceSearchError(PlaceSearchStatus.INVALID_REQUEST, "details", str(e)) from e
        return PlaceDetails(
            name=result.get("name", ""),
            point=point,
            address=result.get("formatted_address"),
        )
