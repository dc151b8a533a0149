"""
Coordinate codec for stored spot locations.

A point travels in two wire shapes:
- structured (GeoJSON):  {"type": "Point", "coordinates": [lng, lat]}
- textual (WKT):         "POINT(lng lat)"

Both put longitude first. Internally we always work with GeoPoint(lat, lng).
decode() accepts either shape and never raises; encode() always emits WKT.
"""

import math
import re
from dataclasses import dataclass
from decimal import Decimal
from numbers import Real
from typing import Any, Optional

POINT_TYPE = "Point"

_NUMBER = r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?"
_WKT_POINT = re.compile(rf"POINT\s*\(\s*({_NUMBER})\s+({_NUMBER})\s*\)")


@dataclass(frozen=True)
class GeoPoint:
    """A WGS84 coordinate. Construction fails for out-of-range values."""

    lat: float
    lng: float

    def __post_init__(self) -> None:
        lat, lng = float(self.lat), float(self.lng)
        if not (math.isfinite(lat) and math.isfinite(lng)):
            raise ValueError(f"Non-finite coordinate: ({self.lat}, {self.lng})")
        if not -90.0 <= lat <= 90.0:
            raise ValueError(f"Latitude out of range: {lat}")
        if not -180.0 <= lng <= 180.0:
            raise ValueError(f"Longitude out of range: {lng}")
        object.__setattr__(self, "lat", lat)
        object.__setattr__(self, "lng", lng)

    def as_tuple(self) -> tuple[float, float]:
        """(lat, lng), the order map widgets expect."""
        return (self.lat, self.lng)


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _decode_geojson(raw: dict) -> Optional[GeoPoint]:
    if raw.get("type") != POINT_TYPE:
        return None
    pair = raw.get("coordinates")
    if not isinstance(pair, (list, tuple)) or len(pair) != 2:
        return None
    lng, lat = pair
    if not (_is_number(lng) and _is_number(lat)):
        return None
    return GeoPoint(lat=lat, lng=lng)


def _decode_wkt(raw: str) -> Optional[GeoPoint]:
    match = _WKT_POINT.search(raw)
    if not match:
        return None
    return GeoPoint(lat=float(match.group(2)), lng=float(match.group(1)))


def decode(raw: Any) -> Optional[GeoPoint]:
    """
    Decode a stored coordinate in either wire shape.

    Returns None for empty input, unrecognised shapes, and values that parse
    but are not a valid coordinate.
    """
    if raw is None:
        return None
    try:
        if isinstance(raw, dict):
            return _decode_geojson(raw)
        if isinstance(raw, str):
            return _decode_wkt(raw) if raw.strip() else None
    except (ValueError, TypeError, OverflowError):
        return None
    return None


def _plain(value: float) -> str:
    # Shortest round-tripping repr, written without an exponent
    return format(Decimal(repr(value)), "f")


def encode(point: GeoPoint) -> str:
    """Encode a point as WKT `POINT(<lng> <lat>)` without rounding."""
    return f"POINT({_plain(point.lng)} {_plain(point.lat)})"


def to_geojson(point: GeoPoint) -> dict:
    """Structured form, used when handing a point to map renderers."""
    return {"type": POINT_TYPE, "coordinates": [point.lng, point.lat]}


def format_point(point: Optional[GeoPoint], precision: int) -> Optional[str]:
    """Display string "lat, lng" rounded for presentation."""
    if point is None:
        return None
    return f"{point.lat:.{precision}f}, {point.lng:.{precision}f}"
