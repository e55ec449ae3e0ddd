"""Expense endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query, Response, status

from backend.shiori.api.deps import ManagerDep
from backend.shiori.models.common import ApiModel, BudgetCategory
from backend.shiori.models.itinerary import ExpenseCreate, ExpenseRead, ExpenseUpdate

router = APIRouter(tags=["expenses"])


class CreateExpenseRequest(ApiModel):
    """Request body for POST /itineraries/{id}/expenses."""

    budget_id: str
    date: str
    amount: float
    description: str
    category: BudgetCategory
    payment_method: str | None = None
    receipt_image: str | None = None


@router.get("/itineraries/{itinerary_id}/expenses", response_model=list[ExpenseRead])
async def list_expenses(
    itinerary_id: str,
    manager: ManagerDep,
    budget_id: Annotated[str | None, Query(alias="budgetId")] = None,
) -> list[ExpenseRead]:
    """Expenses of the itinerary, optionally for one budget, most recent first."""
    return await manager.list_expenses(itinerary_id, budget_id)


@router.post(
    "/itineraries/{itinerary_id}/expenses",
    response_model=ExpenseRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_expense(
    itinerary_id: str, request: CreateExpenseRequest, manager: ManagerDep
) -> ExpenseRead:
    return await manager.create_expense(
        ExpenseCreate(itinerary_id=itinerary_id, **request.model_dump())
    )


@router.get("/expenses/{expense_id}", response_model=ExpenseRead)
async def get_expense(expense_id: str, manager: ManagerDep) -> ExpenseRead:
    return await manager.get_expense(expense_id)


@router.patch("/expenses/{expense_id}", response_model=ExpenseRead)
async def update_expense(
    expense_id: str, patch: ExpenseUpdate, manager: ManagerDep
) -> ExpenseRead:
    return await manager.update_expense(expense_id, patch)


@router.delete("/expenses/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_expense(expense_id: str, manager: ManagerDep) -> Response:
    await manager.delete_expense(expense_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
