"""
Location Row Model - user-submitted chill spots.
"""

import uuid
from datetime import datetime
from typing import Optional

from geoalchemy2 import Geography
from sqlalchemy import ARRAY, Boolean, DateTime, Index, String, Text, func
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from config import settings
from .base import Base


class LocationRow(Base):
    """
    A submitted spot as stored in PostGIS.

    Workflow:
    - Visitor submits via the submission form -> approved = false
    - Moderator approves (approved = true) or unapproves (back to false)
    - Rejection deletes the row

    Row-level access rules live in the database; this model does not
    enforce who may flip `approved`.
    """

    __tablename__ = settings.LOCATIONS_TABLE
    __table_args__ = (
        Index("ix_locations_approved_created_at", "approved", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )

    place_name: Mapped[str] = mapped_column(String(255), nullable=False)
    google_maps_landmark: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    tags: Mapped[list[str]] = mapped_column(ARRAY(String), nullable=False, default=list)

    # Written as WKT text, read back as GeoJSON via ST_AsGeoJSON
    coordinates: Mapped[Optional[object]] = mapped_column(
        Geography(geometry_type="POINT", srid=4326), nullable=True
    )

    photo_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)  # storage object key
    approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<LocationRow(id={self.id}, name={self.place_name}, approved={self.approved})>"
