"""Geographic point value object and its wire encodings."""

from .codec import GeoPoint, POINT_TYPE, decode, encode, format_point, to_geojson

__all__ = ["GeoPoint", "POINT_TYPE", "decode", "encode", "format_point", "to_geojson"]
