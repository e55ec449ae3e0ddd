"""OpenRouteService directions client."""

from typing import Any

from backend.shiori.errors import RoutingError
from backend.shiori.models.travel import GeoPoint, RouteSummary, TravelMode
from backend.shiori.travel.provider import HttpProvider

ORS_PROFILES: dict[TravelMode, str] = {
    TravelMode.driving: "driving-car",
    TravelMode.walking: "foot-walking",
    TravelMode.cycling: "cycling-regular",
    TravelMode.transit: "public-transport",
}


class OrsRoutingClient(HttpProvider):
    """Route summary (duration, distance) between two points."""

    name = "ors"
    error_cls = RoutingError

    def __init__(self, api_key: str, base_url: str, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")

    async def route(self, origin: GeoPoint, destination: GeoPoint, mode: TravelMode) -> RouteSummary:
        """Fetch the route summary.

        Raises:
            RoutingError: If the key is missing, the call fails or no route exists
        """
        if not self._api_key:
            raise RoutingError("ors: API key is not configured")

        data = await self._request_json(
            "route",
            "POST",
            f"{self._base_url}/{ORS_PROFILES[mode]}",
            json={
                "coordinates": [
                    [origin.longitude, origin.latitude],
                    [destination.longitude, destination.latitude],
                ]
            },
            headers={"Authorization": self._api_key, "Accept": "application/json"},
        )

        routes = data.get("routes") if isinstance(data, dict) else None
        if not routes:
            raise RoutingError("ors: no route found")
        # ORS omits zero-valued summary fields
        summary = routes[0].get("summary") or {}
        return RouteSummary(
            duration_seconds=float(summary.get("duration", 0)),
            distance_meters=float(summary.get("distance", 0)),
        )
