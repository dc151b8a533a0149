"""Tests for the coordinate codec."""
import random

import pytest

from geo.codec import GeoPoint, decode, encode, format_point, to_geojson


def test_decode_geojson_inverts_axis_order():
    """GeoJSON stores [lng, lat]; decoding must return lat/lng correctly."""
    point = decode({"type": "Point", "coordinates": [114.1694, 22.3193]})
    assert point == GeoPoint(lat=22.3193, lng=114.1694)


def test_decode_wkt_inverts_axis_order():
    """WKT stores lng first as well."""
    point = decode("POINT(114.1694 22.3193)")
    assert point.lat == 22.3193
    assert point.lng == 114.1694


def test_decode_wkt_with_srid_prefix_and_signs():
    """EWKT as returned by PostGIS text output still decodes."""
    point = decode("SRID=4326;POINT(-0.1276 -51.5)")
    assert point == GeoPoint(lat=-51.5, lng=-0.1276)


def test_decode_wkt_integers_without_fraction():
    assert decode("POINT(114 22)") == GeoPoint(lat=22.0, lng=114.0)


@pytest.mark.parametrize(
    "raw",
    [
        None,
        "",
        "   ",
        "garbage",
        "POINT(114.1694)",
        "POINT(abc def)",
        "LINESTRING(0 0, 1 1)",
        {},
        {"type": "Polygon", "coordinates": [114.1, 22.3]},
        {"type": "Point", "coordinates": [114.1]},
        {"type": "Point", "coordinates": [114.1, 22.3, 5.0]},
        {"type": "Point", "coordinates": ["114.1", "22.3"]},
        {"type": "Point", "coordinates": [True, False]},
        {"type": "Point"},
        42,
        ["POINT(1 2)"],
    ],
)
def test_decode_rejects_unrecognised_input(raw):
    """Decoding is total: anything that is not a point yields None."""
    assert decode(raw) is None


@pytest.mark.parametrize(
    "raw",
    [
        "POINT(200 22)",
        "POINT(114 95)",
        "POINT(1e400 22)",
        {"type": "Point", "coordinates": [114.0, float("nan")]},
        {"type": "Point", "coordinates": [-181, 0]},
    ],
)
def test_decode_out_of_range_is_absent(raw):
    assert decode(raw) is None


def test_encode_emits_wkt_lng_first():
    assert encode(GeoPoint(lat=22.3193, lng=114.1694)) == "POINT(114.1694 22.3193)"


def test_encode_does_not_round():
    point = GeoPoint(lat=22.285512345678912, lng=114.15771234567891)
    assert encode(point) == "POINT(114.15771234567891 22.285512345678912)"


def test_encode_small_values_without_exponent():
    assert encode(GeoPoint(lat=0.00001, lng=-0.0000025)) == "POINT(-0.0000025 0.00001)"


def test_round_trip_preserves_points():
    """decode(encode(p)) == p across the whole valid range."""
    rng = random.Random(20240601)
    points = [
        GeoPoint(lat=90.0, lng=180.0),
        GeoPoint(lat=-90.0, lng=-180.0),
        GeoPoint(lat=0.0, lng=0.0),
        GeoPoint(lat=1e-12, lng=-3.5e-9),
        GeoPoint(lat=22.3193, lng=114.1694),
    ]
    points += [
        GeoPoint(lat=rng.uniform(-90, 90), lng=rng.uniform(-180, 180))
        for _ in range(500)
    ]

    for point in points:
        assert decode(encode(point)) == point


def test_to_geojson_round_trips_through_decode():
    point = GeoPoint(lat=22.2783, lng=114.1820)
    assert to_geojson(point) == {"type": "Point", "coordinates": [114.1820, 22.2783]}
    assert decode(to_geojson(point)) == point


def test_geopoint_validates_range():
    with pytest.raises(ValueError):
        GeoPoint(lat=91, lng=0)
    with pytest.raises(ValueError):
        GeoPoint(lat=0, lng=180.5)


def test_format_point_rounds_for_display():
    point = GeoPoint(lat=22.3193456, lng=114.1694321)
    assert format_point(point, 5) == "22.31935, 114.16943"
    assert format_point(None, 6) is None
