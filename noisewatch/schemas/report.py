"""Pydantic schemas for the noise report API.

Wire payloads use camelCase keys; the attributes keep the
snake_case names of the ORM model so responses can be built
straight from ``NoiseReport`` instances.
"""

import math
import uuid
from datetime import datetime
from typing import Any, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from noisewatch.models.report import MediaType


class CamelModel(BaseModel):
    """Base schema that serializes field names as camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class RawLocation(CamelModel):
    """Location object as supplied by the client.

    Attributes:
        latitude: Latitude in decimal degrees (-90 to 90).
        longitude: Longitude in decimal degrees (-180 to 180).
        address: Opaque address blob (e.g. a reverse-geocoding result).
    """

    latitude: float
    longitude: float
    address: Optional[Any] = None

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def reject_non_numeric(cls, value: Any) -> Any:
        # bool is an int subclass and would otherwise coerce to 0.0/1.0
        if isinstance(value, bool):
            raise ValueError("coordinate must be a number")
        return value

    @field_validator("latitude", "longitude")
    @classmethod
    def reject_non_finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("coordinate must be finite")
        return value


class GeoPoint(CamelModel):
    """GeoJSON point geometry; coordinates are ``[longitude, latitude]``."""

    type: Literal["Point"] = "Point"
    coordinates: Tuple[float, float]


class NoiseReportCreate(CamelModel):
    """Validated report data ready to be persisted."""

    user_id: str
    media_url: str
    media_type: MediaType
    reason: str
    comment: str = ""
    location: Optional[RawLocation] = None
    geo_location: Optional[GeoPoint] = None


class NoiseReportResponse(CamelModel):
    """A stored noise report."""

    id: uuid.UUID
    user_id: str
    media_url: str
    media_type: MediaType
    reason: str
    comment: str
    location: Optional[RawLocation] = None
    geo_location: Optional[GeoPoint] = None
    created_at: datetime


class ReportCreatedResponse(BaseModel):
    """Body returned after a successful submission."""

    message: str
    report: NoiseReportResponse


class UserReportsResponse(BaseModel):
    """Body returned by the per-user listing."""

    message: str
    count: int
    reports: List[NoiseReportResponse]


class CoordinateCluster(BaseModel):
    """Number of reports sharing one exact coordinate pair.

    Attributes:
        coordinates: ``[longitude, latitude]`` of the group.
        count: Number of reports at that coordinate.
    """

    coordinates: Tuple[float, float]
    count: int = Field(ge=1)
