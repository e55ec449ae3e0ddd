"""Geocoding providers: GSI address search (primary) and Nominatim (fallback)."""

import logging
from typing import Any, Protocol

from backend.shiori.errors import GeocodingError
from backend.shiori.models.travel import GeoPoint, LocationCandidate
from backend.shiori.travel.provider import HttpProvider

logger = logging.getLogger(__name__)


class Geocoder(Protocol):
    """Address -> coordinates. Zero results is an empty list, not an error."""

    name: str

    async def geocode(self, address: str) -> list[GeoPoint]: ...


def _point(latitude: Any, longitude: Any, address: str) -> GeoPoint | None:
    try:
        lat, lon = float(latitude), float(longitude)
    except (TypeError, ValueError):
        return None
    if not (-90 <= lat <= 90 and -180 <= lon <= 180):
        return None
    return GeoPoint(latitude=lat, longitude=lon, address=address)


class GsiGeocoder(HttpProvider):
    """Geospatial Information Authority of Japan address search.

    Response: ``[{"geometry": {"coordinates": [lon, lat]}, "properties": {"title": ...}}]``
    """

    name = "gsi"
    error_cls = GeocodingError

    def __init__(self, base_url: str, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._base_url = base_url

    async def geocode(self, address: str) -> list[GeoPoint]:
        data = await self._request_json("geocode", "GET", self._base_url, params={"q": address})
        if not isinstance(data, list):
            return []

        points = []
        for feature in data:
            if not isinstance(feature, dict):
                continue
            coordinates = (feature.get("geometry") or {}).get("coordinates") or []
            if len(coordinates) < 2:
                continue
            title = (feature.get("properties") or {}).get("title") or address
            point = _point(coordinates[1], coordinates[0], title)
            if point is not None:
                points.append(point)
        return points


def format_address(result: dict[str, Any]) -> str:
    """Japanese-order address from a Nominatim result with address details.

    Prefecture, city (or county), district, road, house number, then the
    building or attraction name. Falls back to ``display_name`` when that
    is longer.
    """
    address = result.get("address") or {}
    parts = [
        address.get("state"),
        address.get("city") or address.get("county"),
        address.get("suburb") or address.get("quarter") or address.get("neighbourhood"),
        address.get("road"),
        address.get("house_number"),
        address.get("building") or address.get("tourism") or address.get("attraction"),
    ]
    formatted = "".join(part for part in parts if part)

    display_name = result.get("display_name") or ""
    if len(display_name) > len(formatted):
        return display_name
    return formatted


class NominatimGeocoder(HttpProvider):
    """OpenStreetMap Nominatim search.

    The usage policy requires an identifying User-Agent and at most one
    request per second; spacing is done by the caller's rate limiter.
    """

    name = "nominatim"
    error_cls = GeocodingError

    def __init__(self, base_url: str, user_agent: str, language: str = "ja", **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._base_url = base_url
        self._user_agent = user_agent
        self._language = language

    async def search(self, query: str, language: str | None = None) -> list[dict[str, Any]]:
        """Raw Nominatim results with address details."""
        data = await self._request_json(
            "search",
            "GET",
            self._base_url,
            params={
                "q": query,
                "format": "json",
                "addressdetails": 1,
                "accept-language": language or self._language,
            },
            headers={"User-Agent": self._user_agent},
        )
        if not isinstance(data, list):
            return []
        return [result for result in data if isinstance(result, dict)]

    async def geocode(self, address: str) -> list[GeoPoint]:
        points = []
        for result in await self.search(address):
            point = _point(result.get("lat"), result.get("lon"), format_address(result) or address)
            if point is not None:
                points.append(point)
        return points

    async def candidates(self, query: str, language: str | None = None) -> list[LocationCandidate]:
        """Address search hits for a location picker."""
        candidates = []
        for result in await self.search(query, language):
            point = _point(result.get("lat"), result.get("lon"), "")
            if point is None:
                logger.debug(f"[candidates] skipping result without coordinates: {result.get('place_id')}")
                continue
            candidates.append(
                LocationCandidate(
                    display_name=result.get("display_name") or "",
                    formatted_address=format_address(result),
                    latitude=point.latitude,
                    longitude=point.longitude,
                )
            )
        return candidates
