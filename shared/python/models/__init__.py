"""Database models module."""

from .base import AsyncSessionLocal, Base, engine
from .location import LocationRow

__all__ = [
    # Base
    "Base",
    "engine",
    "AsyncSessionLocal",
    # Models
    "LocationRow",
]
