"""Tests for the public map flow."""
from unittest.mock import MagicMock

import pytest

from config.constants import ALL_TAGS_FILTER, MapDefaults
from geo import GeoPoint
from locations.store import SqlLocationStore
from flows.explore import ExploreFlow


@pytest.mark.asyncio
async def test_lists_only_approved_with_filter(store, photos):
    cafe = store.add("Chill Cafe Hub", ["咖啡廳"], approved=True, minutes=2)
    store.add("Pending Spot", ["咖啡廳"], approved=False, minutes=3)
    park = store.add("Victoria Park", ["安靜"], approved=True, minutes=1)
    flow = ExploreFlow(store, photos)

    assert (await flow.refresh()).success is True

    assert [r.id for r in flow.visible()] == [cafe, park]
    assert flow.filters() == [(ALL_TAGS_FILTER, None), *((t, t) for t in sorted(["咖啡廳", "安靜"]))]
    assert flow.filter_label == ALL_TAGS_FILTER

    flow.set_filter("安靜")
    assert [r.id for r in flow.visible()] == [park]

    flow.set_filter(None)
    assert len(flow.visible()) == 2


@pytest.mark.asyncio
async def test_markers_skip_records_without_point(store, photos):
    placed = store.add("Placed", [], approved=True, minutes=1)
    store.add("Unplaced", [], approved=True, coordinates="garbage")
    flow = ExploreFlow(store, photos)
    await flow.refresh()

    markers = flow.markers()

    assert [record.id for record, _ in markers] == [placed]
    assert markers[0][1] == GeoPoint(lat=22.3, lng=114.17)


@pytest.mark.asyncio
async def test_focus_follows_selection(store, photos):
    spot = store.add("Spot", [], approved=True, coordinates="POINT(114.182 22.2783)")
    flow = ExploreFlow(store, photos)
    await flow.refresh()

    point, zoom = flow.focus()
    assert point == GeoPoint(lat=MapDefaults.CENTER_LAT, lng=MapDefaults.CENTER_LNG)
    assert zoom == MapDefaults.OVERVIEW_ZOOM

    flow.select(spot)
    assert flow.focus() == (GeoPoint(lat=22.2783, lng=114.182), MapDefaults.FOCUS_ZOOM)


@pytest.mark.asyncio
async def test_failed_refresh_reports_error(store, photos):
    store.fail.add("select")
    flow = ExploreFlow(store, photos)

    result = await flow.refresh()

    assert result.success is False
    assert flow.records == []


@pytest.mark.asyncio
async def test_tag_named_all_is_filterable(store, photos):
    literal = store.add("Open Late", ["All"], approved=True, minutes=1)
    store.add("Quiet Nook", ["安靜"], approved=True)
    flow = ExploreFlow(store, photos)
    await flow.refresh()

    assert (ALL_TAGS_FILTER, None) in flow.filters()
    assert ("All", "All") in flow.filters()

    flow.set_filter("All")

    assert [r.id for r in flow.visible()] == [literal]
    assert flow.filter_label == "All"


@pytest.mark.asyncio
async def test_unreachable_database_is_reported(photos):
    factory = MagicMock()
    factory.return_value.__aenter__.side_effect = ConnectionRefusedError(111, "Connect call failed")
    flow = ExploreFlow(SqlLocationStore(session_factory=factory), photos)

    result = await flow.refresh()

    assert result.success is False
    assert result.error.startswith("Error fetching locations: ")
