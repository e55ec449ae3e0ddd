"""Reservation endpoints - at most one reservation per event."""

from typing import Annotated

from fastapi import APIRouter, Query, Response, status

from backend.shiori.api.deps import ManagerDep
from backend.shiori.models.itinerary import ReservationCreate, ReservationRead, ReservationUpdate

router = APIRouter(prefix="/reservations", tags=["reservations"])


@router.get("", response_model=list[ReservationRead])
async def list_reservations(
    manager: ManagerDep,
    itinerary_id: Annotated[str | None, Query(alias="itineraryId")] = None,
    event_id: Annotated[str | None, Query(alias="eventId")] = None,
) -> list[ReservationRead]:
    return await manager.list_reservations(itinerary_id=itinerary_id, event_id=event_id)


@router.post("", response_model=ReservationRead, status_code=status.HTTP_201_CREATED)
async def create_reservation(request: ReservationCreate, manager: ManagerDep) -> ReservationRead:
    """Create the reservation for an event; 409 if the event already has one."""
    return await manager.create_reservation(request.event_id, request.itinerary_id, request)


@router.get("/{reservation_id}", response_model=ReservationRead)
async def get_reservation(reservation_id: str, manager: ManagerDep) -> ReservationRead:
    return await manager.get_reservation(reservation_id)


@router.patch("/{reservation_id}", response_model=ReservationRead)
async def update_reservation(
    reservation_id: str, patch: ReservationUpdate, manager: ManagerDep
) -> ReservationRead:
    """Present fields are written (null clears), absent fields are kept."""
    return await manager.update_reservation(reservation_id, patch)


@router.delete("/{reservation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_reservation(reservation_id: str, manager: ManagerDep) -> Response:
    await manager.delete_reservation(reservation_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
