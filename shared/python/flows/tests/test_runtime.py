"""Tests for flow wiring."""
from unittest.mock import patch

from config import settings
from flows import runtime
from flows.submission import SubmissionFlow
from places.google import GooglePlacesClient


def test_place_search_disabled_without_key():
    with patch.object(settings, "GOOGLE_MAPS_API_KEY", None):
        assert runtime.place_search() is None


def test_place_search_enabled_with_key():
    with patch.object(settings, "GOOGLE_MAPS_API_KEY", "real-key"):
        assert isinstance(runtime.place_search(), GooglePlacesClient)


def test_submission_flow_uses_injected_collaborators(store, photos):
    with patch.object(settings, "GOOGLE_MAPS_API_KEY", None):
        flow = runtime.submission_flow(store=store, photos=photos)

    assert isinstance(flow, SubmissionFlow)
    assert flow._store is store
    assert flow._photos is photos
    assert flow._places is None


def test_moderation_and_explore_flows_use_injected_store(store, photos):
    assert runtime.moderation_flow(store, photos)._store is store
    assert runtime.explore_flow(store, photos)._store is store
