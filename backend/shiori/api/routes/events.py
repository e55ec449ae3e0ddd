"""Event endpoints, scoped by itinerary for list/create/reorder."""

from fastapi import APIRouter, Response, status

from backend.shiori.api.deps import ManagerDep
from backend.shiori.models.itinerary import EventCreate, EventRead, EventUpdate, ReorderRequest

router = APIRouter(tags=["events"])


@router.get("/itineraries/{itinerary_id}/events", response_model=list[EventRead])
async def list_events(itinerary_id: str, manager: ManagerDep) -> list[EventRead]:
    """Events ordered by date, start time, then orderIndex."""
    return await manager.list_events(itinerary_id)


@router.post(
    "/itineraries/{itinerary_id}/events",
    response_model=EventRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_event(itinerary_id: str, request: EventCreate, manager: ManagerDep) -> EventRead:
    return await manager.create_event(itinerary_id, request)


@router.post("/itineraries/{itinerary_id}/events/reorder", response_model=list[EventRead])
async def reorder_events(
    itinerary_id: str, request: ReorderRequest, manager: ManagerDep
) -> list[EventRead]:
    return await manager.reorder_events(itinerary_id, request.ordered_ids)


@router.get("/events/{event_id}", response_model=EventRead)
async def get_event(event_id: str, manager: ManagerDep) -> EventRead:
    return await manager.get_event(event_id)


@router.patch("/events/{event_id}", response_model=EventRead)
async def update_event(event_id: str, patch: EventUpdate, manager: ManagerDep) -> EventRead:
    return await manager.update_event(event_id, patch)


@router.delete("/events/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(event_id: str, manager: ManagerDep) -> Response:
    """Delete an event with its reservation; linked budgets are unlinked."""
    await manager.delete_event(event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
