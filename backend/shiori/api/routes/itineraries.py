"""Itinerary endpoints - list/create/read/update/delete, summary, budget envelope."""

from fastapi import APIRouter, Response, status

from backend.shiori.api.deps import ManagerDep
from backend.shiori.models.itinerary import (
    BudgetEnvelope,
    ItineraryCreate,
    ItineraryRead,
    ItineraryUpdate,
)
from backend.shiori.models.summary import ItinerarySummary

router = APIRouter(prefix="/itineraries", tags=["itineraries"])


@router.get("", response_model=list[ItineraryRead])
async def list_itineraries(manager: ManagerDep) -> list[ItineraryRead]:
    """All itineraries, newest first."""
    return await manager.list_itineraries()


@router.post("", response_model=ItineraryRead, status_code=status.HTTP_201_CREATED)
async def create_itinerary(request: ItineraryCreate, manager: ManagerDep) -> ItineraryRead:
    return await manager.create_itinerary(request.title)


@router.get("/{itinerary_id}", response_model=ItineraryRead)
async def get_itinerary(itinerary_id: str, manager: ManagerDep) -> ItineraryRead:
    return await manager.get_itinerary(itinerary_id)


@router.patch("/{itinerary_id}", response_model=ItineraryRead)
async def update_itinerary(
    itinerary_id: str, patch: ItineraryUpdate, manager: ManagerDep
) -> ItineraryRead:
    """Partial update: only fields present in the body change."""
    return await manager.update_itinerary(itinerary_id, patch)


@router.delete("/{itinerary_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_itinerary(itinerary_id: str, manager: ManagerDep) -> Response:
    await manager.delete_itinerary(itinerary_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{itinerary_id}/summary", response_model=ItinerarySummary)
async def get_itinerary_summary(itinerary_id: str, manager: ManagerDep) -> ItinerarySummary:
    """Itinerary with ordered children, per-budget spent totals and total spent."""
    return await manager.get_itinerary_summary(itinerary_id)


@router.put("/{itinerary_id}/budget", response_model=ItineraryRead)
async def set_budget_envelope(
    itinerary_id: str, envelope: BudgetEnvelope, manager: ManagerDep
) -> ItineraryRead:
    return await manager.set_budget_envelope(
        itinerary_id, envelope.total_budget, envelope.currency
    )
