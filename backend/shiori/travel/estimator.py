"""Travel-time estimation: geocode both ends, then ask the router.

Three sequential round trips (origin, destination, route), each a single
attempt. The first provider error is surfaced as-is.
"""

import logging
from collections.abc import Sequence

import httpx

from backend.shiori.config import Settings
from backend.shiori.errors import GeocodingError, InvalidInputError
from backend.shiori.models.travel import GeoPoint, LocationCandidate, TravelEstimate, TravelMode
from backend.shiori.travel.formatting import format_distance, format_duration
from backend.shiori.travel.geocoding import Geocoder, GsiGeocoder, NominatimGeocoder
from backend.shiori.travel.rate_limit import MinIntervalRateLimiter
from backend.shiori.travel.routing import OrsRoutingClient

logger = logging.getLogger(__name__)


class TravelEstimator:
    """Owns the geocoder chain, the routing client and the geocoding rate limiter."""

    def __init__(
        self,
        geocoders: Sequence[Geocoder],
        router: OrsRoutingClient,
        *,
        search: NominatimGeocoder | None = None,
        rate_limiter: MinIntervalRateLimiter | None = None,
        locale: str = "ja",
    ) -> None:
        if not geocoders:
            raise ValueError("at least one geocoder is required")
        self._geocoders = list(geocoders)
        self._router = router
        self._search = search
        self._rate_limiter = rate_limiter or MinIntervalRateLimiter(0)
        self._locale = locale

    @classmethod
    def from_settings(
        cls, settings: Settings, client: httpx.AsyncClient | None = None
    ) -> "TravelEstimator":
        """Wire GSI -> Nominatim geocoding and ORS routing from settings."""
        common = {"client": client, "timeout_seconds": settings.http_timeout_seconds}
        nominatim = NominatimGeocoder(
            settings.nominatim_url,
            settings.nominatim_user_agent,
            settings.geocode_language,
            **common,
        )
        return cls(
            [GsiGeocoder(settings.gsi_geocoder_url, **common), nominatim],
            OrsRoutingClient(settings.ors_api_key, settings.ors_base_url, **common),
            search=nominatim,
            rate_limiter=MinIntervalRateLimiter(settings.geocode_min_interval_seconds),
            locale=settings.display_locale,
        )

    async def geocode(self, address: str) -> GeoPoint:
        """Resolve an address with the first geocoder that returns a result.

        Raises:
            InvalidInputError: If the address is blank
            GeocodingError: If every geocoder returns zero results, or a provider fails
        """
        if not address or not address.strip():
            raise InvalidInputError("address is required")

        for geocoder in self._geocoders:
            await self._rate_limiter.acquire()
            points = await geocoder.geocode(address)
            if points:
                return points[0]
            logger.info(f"[geocode] {geocoder.name} returned no results for {address!r}")

        raise GeocodingError(f"Address could not be resolved: {address}")

    async def estimate_travel(
        self, origin: str, destination: str, mode: TravelMode = TravelMode.driving
    ) -> TravelEstimate:
        """Estimate travel time and distance between two addresses.

        Args:
            origin: Free-text origin address
            destination: Free-text destination address
            mode: Travel mode

        Returns:
            Duration/distance with display strings in the configured locale
        """
        origin_point = await self.geocode(origin)
        destination_point = await self.geocode(destination)
        route = await self._router.route(origin_point, destination_point, mode)

        logger.info(
            f"[estimate_travel] {mode.value}: {route.duration_seconds:.0f}s, "
            f"{route.distance_meters:.0f}m"
        )
        return TravelEstimate(
            duration_seconds=route.duration_seconds,
            distance_meters=route.distance_meters,
            duration_text=format_duration(route.duration_seconds, self._locale),
            distance_text=format_distance(route.distance_meters),
            origin_address=origin_point.address,
            destination_address=destination_point.address,
            mode=mode,
        )

    async def search_addresses(
        self, query: str, language: str | None = None
    ) -> list[LocationCandidate]:
        """Address search candidates for a location picker (Nominatim)."""
        if not query or not query.strip():
            raise InvalidInputError("query is required")
        if self._search is None:
            return []
        await self._rate_limiter.acquire()
        return await self._search.candidates(query, language)
