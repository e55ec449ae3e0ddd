"""Budget line endpoints."""

from fastapi import APIRouter, Response, status

from backend.shiori.api.deps import ManagerDep
from backend.shiori.models.itinerary import BudgetCreate, BudgetRead, BudgetUpdate, ReorderRequest

router = APIRouter(tags=["budgets"])


@router.get("/itineraries/{itinerary_id}/budgets", response_model=list[BudgetRead])
async def list_budgets(itinerary_id: str, manager: ManagerDep) -> list[BudgetRead]:
    return await manager.list_budgets(itinerary_id)


@router.post(
    "/itineraries/{itinerary_id}/budgets",
    response_model=BudgetRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_budget(
    itinerary_id: str, request: BudgetCreate, manager: ManagerDep
) -> BudgetRead:
    return await manager.create_budget(itinerary_id, request)


@router.post("/itineraries/{itinerary_id}/budgets/reorder", response_model=list[BudgetRead])
async def reorder_budgets(
    itinerary_id: str, request: ReorderRequest, manager: ManagerDep
) -> list[BudgetRead]:
    return await manager.reorder_budgets(itinerary_id, request.ordered_ids)


@router.get("/budgets/{budget_id}", response_model=BudgetRead)
async def get_budget(budget_id: str, manager: ManagerDep) -> BudgetRead:
    return await manager.get_budget(budget_id)


@router.patch("/budgets/{budget_id}", response_model=BudgetRead)
async def update_budget(budget_id: str, patch: BudgetUpdate, manager: ManagerDep) -> BudgetRead:
    return await manager.update_budget(budget_id, patch)


@router.delete("/budgets/{budget_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_budget(budget_id: str, manager: ManagerDep) -> Response:
    """Delete a budget line and its expenses."""
    await manager.delete_budget(budget_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
