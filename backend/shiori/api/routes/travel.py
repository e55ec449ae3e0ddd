"""Travel endpoints - GET /travel-time, GET /geocode/search."""

from typing import Annotated

from fastapi import APIRouter, Query

from backend.shiori.api.deps import EstimatorDep
from backend.shiori.models.travel import LocationCandidate, TravelEstimate, TravelMode

router = APIRouter(tags=["travel"])


@router.get("/travel-time", response_model=TravelEstimate)
async def travel_time(
    estimator: EstimatorDep,
    origin: Annotated[str, Query(min_length=1)],
    destination: Annotated[str, Query(min_length=1)],
    mode: TravelMode = TravelMode.driving,
) -> TravelEstimate:
    """Estimate travel time between two addresses.

    Geocoding failures answer 422, routing failures 502.
    """
    return await estimator.estimate_travel(origin, destination, mode)


@router.get("/geocode/search", response_model=list[LocationCandidate])
async def search_addresses(
    estimator: EstimatorDep,
    q: Annotated[str, Query(min_length=1)],
    language: str | None = None,
) -> list[LocationCandidate]:
    return await estimator.search_addresses(q, language)
