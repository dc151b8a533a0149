"""
Shared configuration constants for WhereToChill.

This module centralizes magic numbers and default values used across the
submission, moderation and map components. Timeouts can be overridden via
environment variables.

Usage:
    from config.constants import Timeouts, MapDefaults

    async with httpx.AsyncClient(timeout=Timeouts.HTTP_DEFAULT) as client:
        ...
"""

import os


class Timeouts:
    """HTTP timeout constants (in seconds)."""

    HTTP_DEFAULT = float(os.getenv("HTTP_TIMEOUT_DEFAULT", "30.0"))
    """Default timeout for HTTP requests (embed SDK downloads)."""

    HTTP_SHORT = float(os.getenv("HTTP_TIMEOUT_SHORT", "10.0"))
    """Short timeout for quick API calls (place autocomplete)."""


class MapDefaults:
    """Map viewport defaults and coordinate display precision."""

    CENTER_LAT = 22.3193
    CENTER_LNG = 114.1694
    """Hong Kong centre, used when nothing is selected."""

    OVERVIEW_ZOOM = 13
    FOCUS_ZOOM = 15

    SUBMISSION_PRECISION = 5
    """Decimals shown after a point is picked on the submission form."""

    MODERATION_PRECISION = 6
    """Decimals shown on the moderation dashboard."""


SUGGESTED_TAGS = ["咖啡廳", "游樂場", "餐廳", "安靜", "有wifi"]
"""Tag catalog offered on the submission form."""

ALL_TAGS_FILTER = "All"
"""Label of the public map's "no tag filter" choice (its filter value is None)."""
