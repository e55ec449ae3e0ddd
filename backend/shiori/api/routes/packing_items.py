"""Packing list endpoints."""

from fastapi import APIRouter, Response, status

from backend.shiori.api.deps import ManagerDep
from backend.shiori.models.itinerary import (
    PackingItemCreate,
    PackingItemRead,
    PackingItemUpdate,
    ReorderRequest,
)

router = APIRouter(tags=["packing-items"])


@router.get("/itineraries/{itinerary_id}/packing-items", response_model=list[PackingItemRead])
async def list_packing_items(itinerary_id: str, manager: ManagerDep) -> list[PackingItemRead]:
    return await manager.list_packing_items(itinerary_id)


@router.post(
    "/itineraries/{itinerary_id}/packing-items",
    response_model=PackingItemRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_packing_item(
    itinerary_id: str, request: PackingItemCreate, manager: ManagerDep
) -> PackingItemRead:
    return await manager.create_packing_item(itinerary_id, request)


@router.post(
    "/itineraries/{itinerary_id}/packing-items/reorder", response_model=list[PackingItemRead]
)
async def reorder_packing_items(
    itinerary_id: str, request: ReorderRequest, manager: ManagerDep
) -> list[PackingItemRead]:
    return await manager.reorder_packing_items(itinerary_id, request.ordered_ids)


@router.get("/packing-items/{item_id}", response_model=PackingItemRead)
async def get_packing_item(item_id: str, manager: ManagerDep) -> PackingItemRead:
    return await manager.get_packing_item(item_id)


@router.patch("/packing-items/{item_id}", response_model=PackingItemRead)
async def update_packing_item(
    item_id: str, patch: PackingItemUpdate, manager: ManagerDep
) -> PackingItemRead:
    return await manager.update_packing_item(item_id, patch)


@router.delete("/packing-items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_packing_item(item_id: str, manager: ManagerDep) -> Response:
    await manager.delete_packing_item(item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
