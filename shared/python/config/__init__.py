"""Configuration management module."""

from .settings import Settings, settings
from .constants import (
    ALL_TAGS_FILTER,
    SUGGESTED_TAGS,
    MapDefaults,
    Timeouts,
)

__all__ = [
    "Settings",
    "settings",
    "Timeouts",
    "MapDefaults",
    "SUGGESTED_TAGS",
    "ALL_TAGS_FILTER",
]
