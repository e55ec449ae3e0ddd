"""Travel-time estimation and address search models."""

from enum import Enum

from pydantic import Field

from backend.shiori.models.common import ApiModel


class TravelMode(str, Enum):
    """Travel mode understood by the routing provider."""

    driving = "driving"
    walking = "walking"
    cycling = "cycling"
    transit = "transit"


class GeoPoint(ApiModel):
    """Resolved address (WGS84)."""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    address: str


class RouteSummary(ApiModel):
    duration_seconds: float
    distance_meters: float


class TravelEstimate(ApiModel):
    """Travel time between two addresses with display strings."""

    duration_seconds: float
    distance_meters: float
    duration_text: str
    distance_text: str
    origin_address: str
    destination_address: str
    mode: TravelMode


class LocationCandidate(ApiModel):
    """One address search hit."""

    display_name: str
    formatted_address: str
    latitude: float
    longitude: float
