"""Location parsing and GeoJSON point normalization.

Clients send the location as a serialized JSON object inside the
multipart form. ``normalize_location`` turns that payload into the
raw location and its GeoJSON point, or into an enumerated error.
It never raises, so callers decide how a bad location is reported.
"""

import enum
import json
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from noisewatch.schemas.report import GeoPoint, RawLocation

LATITUDE_RANGE = (-90.0, 90.0)
LONGITUDE_RANGE = (-180.0, 180.0)

LocationPayload = Union[None, str, bytes, Mapping[str, Any]]


class LocationError(str, enum.Enum):
    """Reasons a location payload can be rejected."""

    MALFORMED = "malformed"
    NOT_AN_OBJECT = "not_an_object"
    MISSING_COORDINATE = "missing_coordinate"
    INVALID_COORDINATE = "invalid_coordinate"
    OUT_OF_RANGE = "out_of_range"

    @property
    def message(self) -> str:
        return _ERROR_MESSAGES[self]


_ERROR_MESSAGES = {
    LocationError.MALFORMED: "Location must be a valid JSON object.",
    LocationError.NOT_AN_OBJECT: "Location must be a JSON object.",
    LocationError.MISSING_COORDINATE: "Location requires both latitude and longitude.",
    LocationError.INVALID_COORDINATE: "Location latitude and longitude must be numbers.",
    LocationError.OUT_OF_RANGE: (
        "Location latitude must be between -90 and 90 "
        "and longitude between -180 and 180."
    ),
}


@dataclass(frozen=True)
class LocationResult:
    """Outcome of normalizing a location payload.

    Exactly one of two shapes: ``error`` set and both values None, or
    ``error`` None with ``location`` and ``geo_location`` either both
    set or both None (no location supplied).
    """

    location: Optional[RawLocation] = None
    geo_location: Optional[GeoPoint] = None
    error: Optional[LocationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def to_point(location: RawLocation) -> GeoPoint:
    """Build the GeoJSON point for a validated location.

    Args:
        location: Validated raw location.

    Returns:
        Point whose coordinates are ``[longitude, latitude]``.
    """
    return GeoPoint(coordinates=(location.longitude, location.latitude))


def _decode(payload: LocationPayload) -> Any:
    if isinstance(payload, (str, bytes)):
        if not payload.strip():
            return None
        return json.loads(payload)
    return payload


def normalize_location(payload: LocationPayload) -> LocationResult:
    """Parse a raw location payload and derive its point geometry.

    Args:
        payload: None, a serialized JSON object, or an already decoded mapping.

    Returns:
        LocationResult with the location and point, an empty result when
        no location was supplied, or the reason the payload was rejected.
    """
    try:
        decoded = _decode(payload)
    except (ValueError, RecursionError):
        return LocationResult(error=LocationError.MALFORMED)

    if decoded is None:
        return LocationResult()
    if not isinstance(decoded, Mapping):
        return LocationResult(error=LocationError.NOT_AN_OBJECT)

    if decoded.get("latitude") is None or decoded.get("longitude") is None:
        return LocationResult(error=LocationError.MISSING_COORDINATE)

    try:
        location = RawLocation.model_validate(dict(decoded))
    except ValidationError:
        return LocationResult(error=LocationError.INVALID_COORDINATE)

    if not (
        LATITUDE_RANGE[0] <= location.latitude <= LATITUDE_RANGE[1]
        and LONGITUDE_RANGE[0] <= location.longitude <= LONGITUDE_RANGE[1]
    ):
        return LocationResult(error=LocationError.OUT_OF_RANGE)

    return LocationResult(location=location, geo_location=to_point(location))
