"""Noise report model with a GeoJSON point for spatial queries.

Each report keeps the raw location supplied by the client
(latitude, longitude, opaque address) next to a normalized
GeoJSON point. On PostgreSQL the point is covered by a GiST
index over ``ST_GeomFromGeoJSON`` so proximity and containment
queries stay index-backed.
"""

import enum
import uuid
from typing import Any, Optional

from geoalchemy2.functions import ST_GeomFromGeoJSON, ST_SetSRID
from sqlalchemy import JSON, CheckConstraint, Enum, Float, Index, String, Text, Uuid, cast
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from noisewatch.models.base import Base, CreatedAtMixin

# SRID 4326 = WGS 84 (standard GPS coordinates)
WGS84_SRID = 4326

JSONType = JSON(none_as_null=True).with_variant(JSONB(none_as_null=True), "postgresql")


class MediaType(str, enum.Enum):
    """Kind of media attached to a report."""

    AUDIO = "audio"
    VIDEO = "video"


class NoiseReport(Base, CreatedAtMixin):
    """A noise-disturbance report submitted by a user.

    Reports are created once and never updated or deleted by the
    service.

    Attributes:
        id: Primary key, generated on insert.
        user_id: Opaque reference to the submitting user.
        media_url: Reference to the previously stored media file.
        media_type: Either audio or video.
        reason: Free-text classification of the disturbance.
        comment: Optional free text, empty by default.
        latitude: Raw latitude, NULL when no location was supplied.
        longitude: Raw longitude, NULL when no location was supplied.
        address: Opaque address blob supplied with the location.
        geo_location: GeoJSON point ``{"type": "Point", "coordinates": [lon, lat]}``.
        created_at: Creation timestamp.
    """

    __tablename__ = "noise_reports"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    media_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    media_type: Mapped[MediaType] = mapped_column(
        Enum(
            MediaType,
            name="media_type_enum",
            values_callable=lambda members: [member.value for member in members],
        ),
        nullable=False,
    )
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    comment: Mapped[str] = mapped_column(Text, nullable=False, default="")

    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    address: Mapped[Optional[Any]] = mapped_column(JSONType, nullable=True)

    geo_location: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONType, nullable=True)

    __table_args__ = (
        # The raw location and the point are stored together or not at all
        CheckConstraint(
            "(latitude IS NULL AND longitude IS NULL AND geo_location IS NULL) OR "
            "(latitude IS NOT NULL AND longitude IS NOT NULL AND geo_location IS NOT NULL)",
            name="ck_noise_reports_location_geo_location",
        ),
        Index("ix_noise_reports_coordinates", "latitude", "longitude"),
    )

    @property
    def location(self) -> Optional[dict[str, Any]]:
        """Raw location object, or None when the report has no location."""
        if self.latitude is None or self.longitude is None:
            return None
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "address": self.address,
        }


# GiST index over the point for proximity/containment queries (PostGIS only)
Index(
    "ix_noise_reports_geo_location_gist",
    ST_SetSRID(ST_GeomFromGeoJSON(cast(NoiseReport.geo_location, Text)), WGS84_SRID),
    postgresql_using="gist",
).ddl_if(dialect="postgresql")
