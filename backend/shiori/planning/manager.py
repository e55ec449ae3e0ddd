"""Itinerary aggregate manager.

Every operation validates its input and the existence of referenced parents
before writing, runs its writes in one gateway transaction, and returns the
materialized entity (a read model) or raises a typed PlannerError.
"""

import logging
import math
from collections import defaultdict
from collections.abc import Iterable
from typing import Any
from zoneinfo import ZoneInfo

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from backend.shiori.config import Settings, get_settings
from backend.shiori.db.gateway import PersistenceGateway
from backend.shiori.db.ids import IdFactory, new_id
from backend.shiori.db.models import Budget, Event, Expense, Itinerary, PackingItem, Reservation
from backend.shiori.db.ordering import apply_order, list_ordered, next_order_index
from backend.shiori.errors import ConflictError, InvalidInputError, NotFoundError
from backend.shiori.models.common import is_known_icon
from backend.shiori.models.itinerary import (
    BudgetCreate,
    BudgetRead,
    BudgetUpdate,
    EventCreate,
    EventRead,
    EventUpdate,
    ExpenseCreate,
    ExpenseRead,
    ExpenseUpdate,
    ItineraryRead,
    ItineraryUpdate,
    PackingItemCreate,
    PackingItemRead,
    PackingItemUpdate,
    ReservationFields,
    ReservationRead,
    ReservationUpdate,
    encode_attachment_urls,
)
from backend.shiori.models.summary import BudgetSummary, ItinerarySummary
from backend.shiori.utils.timeutil import Clock, minutes_of_day, now_millis

logger = logging.getLogger(__name__)


# Validation helpers


def _require_text(value: str | None, field: str) -> None:
    if value is None or not value.strip():
        raise InvalidInputError(f"{field} is required and cannot be empty")


def _require_amount(value: float | None, field: str) -> None:
    if value is None:
        raise InvalidInputError(f"{field} is required")
    if math.isnan(value) or math.isinf(value):
        raise InvalidInputError(f"{field} must be a finite number")
    if value < 0:
        raise InvalidInputError(f"{field} cannot be negative")


def _validate_coordinates(latitude: float | None, longitude: float | None) -> None:
    if (latitude is None) != (longitude is None):
        raise InvalidInputError("latitude and longitude must be provided together")
    if latitude is not None and not -90 <= latitude <= 90:
        raise InvalidInputError("latitude must be between -90 and 90")
    if longitude is not None and not -180 <= longitude <= 180:
        raise InvalidInputError("longitude must be between -180 and 180")


def _validate_icon(icon: str | None) -> None:
    if icon is not None and not is_known_icon(icon):
        raise InvalidInputError(f"Unknown icon: {icon}")


def _validate_quantity(quantity: int | None) -> None:
    if quantity is None or quantity < 1:
        raise InvalidInputError("quantity must be an integer of at least 1")


def _patch_fields(patch: BaseModel, required: Iterable[str]) -> dict[str, Any]:
    """Field mask of a patch: only supplied fields, with required ones non-null."""
    fields = patch.model_dump(mode="json", exclude_unset=True)
    for name in required:
        if name in fields and fields[name] is None:
            raise InvalidInputError(f"{name} cannot be cleared")
    return fields


class ItineraryManager:
    """Create/read/update/delete across an itinerary and its child collections."""

    def __init__(
        self,
        session: AsyncSession,
        *,
        id_factory: IdFactory = new_id,
        clock: Clock = now_millis,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.gateway = PersistenceGateway(session)
        self._new_id = id_factory
        self._clock = clock
        self._default_currency = settings.default_currency
        self._tz = ZoneInfo(settings.display_timezone)

    @property
    def timezone(self) -> ZoneInfo:
        """Zone used to interpret epoch-millis times and dates."""
        return self._tz

    def now(self) -> int:
        return self._clock()

    # Existence checks

    async def _itinerary_row(self, itinerary_id: str) -> Itinerary:
        row = await self.gateway.get(Itinerary, itinerary_id)
        if row is None:
            raise NotFoundError(f"Itinerary not found: {itinerary_id}")
        return row

    async def _event_row(self, event_id: str) -> Event:
        row = await self.gateway.get(Event, event_id)
        if row is None:
            raise NotFoundError(f"Event not found: {event_id}")
        return row

    async def _budget_row(self, budget_id: str) -> Budget:
        row = await self.gateway.get(Budget, budget_id)
        if row is None:
            raise NotFoundError(f"Budget not found: {budget_id}")
        return row

    async def _event_in(self, event_id: str, itinerary_id: str) -> Event:
        event = await self._event_row(event_id)
        if event.itinerary_id != itinerary_id:
            raise InvalidInputError(f"Event {event_id} does not belong to itinerary {itinerary_id}")
        return event

    async def _budget_in(self, budget_id: str, itinerary_id: str) -> Budget:
        budget = await self._budget_row(budget_id)
        if budget.itinerary_id != itinerary_id:
            raise InvalidInputError(
                f"Budget {budget_id} does not belong to itinerary {itinerary_id}"
            )
        return budget

    # Itineraries

    async def create_itinerary(self, title: str) -> ItineraryRead:
        """Create an empty itinerary with a zero budget in the default currency."""
        _require_text(title, "title")
        async with self.gateway.transaction():
            row = await self.gateway.insert(
                Itinerary(
                    id=self._new_id(),
                    title=title,
                    created_at=self._clock(),
                    total_budget=0,
                    currency=self._default_currency,
                )
            )
            result = ItineraryRead.model_validate(row)
        logger.info(f"[create_itinerary] created {result.id}")
        return result

    async def list_itineraries(self) -> list[ItineraryRead]:
        """All itineraries, newest first."""
        rows = await self.gateway.list_where(
            Itinerary, order_by=(Itinerary.created_at.desc(), Itinerary.id)
        )
        return [ItineraryRead.model_validate(row) for row in rows]

    async def get_itinerary(self, itinerary_id: str) -> ItineraryRead:
        return ItineraryRead.model_validate(await self._itinerary_row(itinerary_id))

    async def update_itinerary(self, itinerary_id: str, patch: ItineraryUpdate) -> ItineraryRead:
        fields = _patch_fields(patch, ("title", "total_budget", "currency"))
        if "title" in fields:
            _require_text(fields["title"], "title")
        if "total_budget" in fields:
            _require_amount(fields["total_budget"], "totalBudget")
        if "currency" in fields:
            _require_text(fields["currency"], "currency")

        async with self.gateway.transaction():
            await self._itinerary_row(itinerary_id)
            row = await self.gateway.update(Itinerary, itinerary_id, fields)
            return ItineraryRead.model_validate(row)

    async def delete_itinerary(self, itinerary_id: str) -> None:
        """Delete an itinerary; FK cascades remove every owned child."""
        async with self.gateway.transaction():
            if not await self.gateway.delete(Itinerary, itinerary_id):
                raise NotFoundError(f"Itinerary not found: {itinerary_id}")
        logger.info(f"[delete_itinerary] deleted {itinerary_id}")

    async def set_budget_envelope(
        self, itinerary_id: str, total_budget: float, currency: str | None = None
    ) -> ItineraryRead:
        """Set the itinerary's total budget (and currency, when given)."""
        _require_amount(total_budget, "totalBudget")
        fields: dict[str, Any] = {"total_budget": total_budget}
        if currency is not None:
            _require_text(currency, "currency")
            fields["currency"] = currency

        async with self.gateway.transaction():
            await self._itinerary_row(itinerary_id)
            row = await self.gateway.update(Itinerary, itinerary_id, fields)
            return ItineraryRead.model_validate(row)

    # Events

    def _event_sort_key(self, event: EventRead) -> tuple:
        start = minutes_of_day(event.start_time, self._tz)
        return (
            event.event_date is None,
            event.event_date or "",
            start is None,
            start or 0,
            event.order_index,
        )

    def sort_events(self, events: Iterable[EventRead]) -> list[EventRead]:
        """Order events by date, then start time, then orderIndex; missing values last."""
        return sorted(events, key=self._event_sort_key)

    async def create_event(self, itinerary_id: str, fields: EventCreate) -> EventRead:
        """Append an event to the itinerary."""
        _require_text(fields.title, "title")
        _validate_coordinates(fields.latitude, fields.longitude)
        _validate_icon(fields.icon)

        async with self.gateway.transaction():
            await self._itinerary_row(itinerary_id)
            order_index = await next_order_index(self.gateway, Event, "itinerary_id", itinerary_id)
            row = await self.gateway.insert(
                Event(
                    id=self._new_id(),
                    itinerary_id=itinerary_id,
                    order_index=order_index,
                    **fields.model_dump(),
                )
            )
            return EventRead.model_validate(row)

    async def list_events(self, itinerary_id: str) -> list[EventRead]:
        await self._itinerary_row(itinerary_id)
        rows = await list_ordered(self.gateway, Event, "itinerary_id", itinerary_id)
        return self.sort_events(EventRead.model_validate(row) for row in rows)

    async def get_event(self, event_id: str) -> EventRead:
        return EventRead.model_validate(await self._event_row(event_id))

    async def update_event(self, event_id: str, patch: EventUpdate) -> EventRead:
        fields = _patch_fields(patch, ("title",))
        if "title" in fields:
            _require_text(fields["title"], "title")
        if "icon" in fields:
            _validate_icon(fields["icon"])

        async with self.gateway.transaction():
            current = await self._event_row(event_id)
            if "latitude" in fields or "longitude" in fields:
                _validate_coordinates(
                    fields.get("latitude", current.latitude),
                    fields.get("longitude", current.longitude),
                )
            row = await self.gateway.update(Event, event_id, fields)
            return EventRead.model_validate(row)

    async def delete_event(self, event_id: str) -> None:
        """Delete an event; its reservation goes with it and linked budgets are unlinked."""
        async with self.gateway.transaction():
            if not await self.gateway.delete(Event, event_id):
                raise NotFoundError(f"Event not found: {event_id}")

    async def reorder_events(self, itinerary_id: str, ordered_ids: list[str]) -> list[EventRead]:
        """Reindex events from an ordered ID list; returns them in the new order."""
        async with self.gateway.transaction():
            await self._itinerary_row(itinerary_id)
            rows = await apply_order(self.gateway, Event, "itinerary_id", itinerary_id, ordered_ids)
            return [EventRead.model_validate(row) for row in rows]

    # Packing items

    async def create_packing_item(
        self, itinerary_id: str, fields: PackingItemCreate
    ) -> PackingItemRead:
        _require_text(fields.name, "name")
        _validate_quantity(fields.quantity)

        async with self.gateway.transaction():
            await self._itinerary_row(itinerary_id)
            order_index = await next_order_index(
                self.gateway, PackingItem, "itinerary_id", itinerary_id
            )
            row = await self.gateway.insert(
                PackingItem(
                    id=self._new_id(),
                    itinerary_id=itinerary_id,
                    order_index=order_index,
                    **fields.model_dump(mode="json"),
                )
            )
            return PackingItemRead.model_validate(row)

    async def list_packing_items(self, itinerary_id: str) -> list[PackingItemRead]:
        await self._itinerary_row(itinerary_id)
        rows = await list_ordered(self.gateway, PackingItem, "itinerary_id", itinerary_id)
        return [PackingItemRead.model_validate(row) for row in rows]

    async def get_packing_item(self, item_id: str) -> PackingItemRead:
        row = await self.gateway.get(PackingItem, item_id)
        if row is None:
            raise NotFoundError(f"Packing item not found: {item_id}")
        return PackingItemRead.model_validate(row)

    async def update_packing_item(self, item_id: str, patch: PackingItemUpdate) -> PackingItemRead:
        fields = _patch_fields(
            patch, ("name", "category", "is_packed", "quantity", "is_essential")
        )
        if "name" in fields:
            _require_text(fields["name"], "name")
        if "quantity" in fields:
            _validate_quantity(fields["quantity"])

        async with self.gateway.transaction():
            row = await self.gateway.update(PackingItem, item_id, fields)
            if row is None:
                raise NotFoundError(f"Packing item not found: {item_id}")
            return PackingItemRead.model_validate(row)

    async def delete_packing_item(self, item_id: str) -> None:
        async with self.gateway.transaction():
            if not await self.gateway.delete(PackingItem, item_id):
                raise NotFoundError(f"Packing item not found: {item_id}")

    async def reorder_packing_items(
        self, itinerary_id: str, ordered_ids: list[str]
    ) -> list[PackingItemRead]:
        async with self.gateway.transaction():
            await self._itinerary_row(itinerary_id)
            rows = await apply_order(
                self.gateway, PackingItem, "itinerary_id", itinerary_id, ordered_ids
            )
            return [PackingItemRead.model_validate(row) for row in rows]

    # Budgets

    async def create_budget(self, itinerary_id: str, fields: BudgetCreate) -> BudgetRead:
        """Append a budget line, optionally linked to an event of the same itinerary."""
        _require_text(fields.name, "name")
        _require_amount(fields.amount, "amount")

        async with self.gateway.transaction():
            await self._itinerary_row(itinerary_id)
            if fields.event_id is not None:
                await self._event_in(fields.event_id, itinerary_id)
            order_index = await next_order_index(self.gateway, Budget, "itinerary_id", itinerary_id)
            row = await self.gateway.insert(
                Budget(
                    id=self._new_id(),
                    itinerary_id=itinerary_id,
                    order_index=order_index,
                    **fields.model_dump(mode="json"),
                )
            )
            return BudgetRead.model_validate(row)

    async def list_budgets(self, itinerary_id: str) -> list[BudgetRead]:
        await self._itinerary_row(itinerary_id)
        rows = await list_ordered(self.gateway, Budget, "itinerary_id", itinerary_id)
        return [BudgetRead.model_validate(row) for row in rows]

    async def get_budget(self, budget_id: str) -> BudgetRead:
        return BudgetRead.model_validate(await self._budget_row(budget_id))

    async def update_budget(self, budget_id: str, patch: BudgetUpdate) -> BudgetRead:
        fields = _patch_fields(patch, ("category", "name", "amount"))
        if "name" in fields:
            _require_text(fields["name"], "name")
        if "amount" in fields:
            _require_amount(fields["amount"], "amount")

        async with self.gateway.transaction():
            current = await self._budget_row(budget_id)
            if fields.get("event_id") is not None:
                await self._event_in(fields["event_id"], current.itinerary_id)
            row = await self.gateway.update(Budget, budget_id, fields)
            return BudgetRead.model_validate(row)

    async def delete_budget(self, budget_id: str) -> None:
        """Delete a budget line together with its expenses."""
        async with self.gateway.transaction():
            if not await self.gateway.delete(Budget, budget_id):
                raise NotFoundError(f"Budget not found: {budget_id}")

    async def reorder_budgets(self, itinerary_id: str, ordered_ids: list[str]) -> list[BudgetRead]:
        async with self.gateway.transaction():
            await self._itinerary_row(itinerary_id)
            rows = await apply_order(self.gateway, Budget, "itinerary_id", itinerary_id, ordered_ids)
            return [BudgetRead.model_validate(row) for row in rows]

    # Expenses

    async def create_expense(self, fields: ExpenseCreate) -> ExpenseRead:
        """Record spend against a budget of the same itinerary."""
        if fields.description is None:
            raise InvalidInputError("description is required")
        _require_amount(fields.amount, "amount")
        _require_text(fields.date, "date")

        async with self.gateway.transaction():
            await self._itinerary_row(fields.itinerary_id)
            await self._budget_in(fields.budget_id, fields.itinerary_id)
            row = await self.gateway.insert(
                Expense(
                    id=self._new_id(),
                    created_at=self._clock(),
                    **fields.model_dump(mode="json"),
                )
            )
            return ExpenseRead.model_validate(row)

    async def list_expenses(
        self, itinerary_id: str, budget_id: str | None = None
    ) -> list[ExpenseRead]:
        """Expenses of an itinerary (optionally one budget), most recent first."""
        await self._itinerary_row(itinerary_id)
        filters: dict[str, Any] = {"itinerary_id": itinerary_id}
        if budget_id is not None:
            filters["budget_id"] = budget_id
        rows = await self.gateway.list_where(
            Expense,
            order_by=(Expense.date.desc(), Expense.created_at.desc(), Expense.id),
            **filters,
        )
        return [ExpenseRead.model_validate(row) for row in rows]

    async def get_expense(self, expense_id: str) -> ExpenseRead:
        row = await self.gateway.get(Expense, expense_id)
        if row is None:
            raise NotFoundError(f"Expense not found: {expense_id}")
        return ExpenseRead.model_validate(row)

    async def update_expense(self, expense_id: str, patch: ExpenseUpdate) -> ExpenseRead:
        fields = _patch_fields(
            patch, ("budget_id", "date", "amount", "description", "category")
        )
        if "amount" in fields:
            _require_amount(fields["amount"], "amount")
        if "date" in fields:
            _require_text(fields["date"], "date")

        async with self.gateway.transaction():
            current = await self.gateway.get(Expense, expense_id)
            if current is None:
                raise NotFoundError(f"Expense not found: {expense_id}")
            if "budget_id" in fields:
                await self._budget_in(fields["budget_id"], current.itinerary_id)
            row = await self.gateway.update(Expense, expense_id, fields)
            return ExpenseRead.model_validate(row)

    async def delete_expense(self, expense_id: str) -> None:
        async with self.gateway.transaction():
            if not await self.gateway.delete(Expense, expense_id):
                raise NotFoundError(f"Expense not found: {expense_id}")

    # Reservations

    async def create_reservation(
        self, event_id: str, itinerary_id: str, fields: ReservationFields
    ) -> ReservationRead:
        """Create the (single) reservation for an event.

        Raises:
            NotFoundError: If the itinerary or event does not exist
            ConflictError: If the event already has a reservation
        """
        if fields.price is not None:
            _require_amount(fields.price, "price")

        async with self.gateway.transaction():
            await self._itinerary_row(itinerary_id)
            await self._event_in(event_id, itinerary_id)
            if await self.gateway.list_where(Reservation, event_id=event_id):
                raise ConflictError(f"Reservation already exists for event: {event_id}")

            values = fields.model_dump(mode="json", include=set(ReservationFields.model_fields))
            values["attachment_urls"] = encode_attachment_urls(values.get("attachment_urls"))
            now = self._clock()
            row = await self.gateway.insert(
                Reservation(
                    id=self._new_id(),
                    event_id=event_id,
                    itinerary_id=itinerary_id,
                    created_at=now,
                    updated_at=now,
                    **values,
                )
            )
            return ReservationRead.model_validate(row)

    async def list_reservations(
        self, itinerary_id: str | None = None, event_id: str | None = None
    ) -> list[ReservationRead]:
        filters: dict[str, Any] = {}
        if itinerary_id is not None:
            filters["itinerary_id"] = itinerary_id
        if event_id is not None:
            filters["event_id"] = event_id
        rows = await self.gateway.list_where(
            Reservation, order_by=(Reservation.created_at, Reservation.id), **filters
        )
        return [ReservationRead.model_validate(row) for row in rows]

    async def get_reservation(self, reservation_id: str) -> ReservationRead:
        row = await self.gateway.get(Reservation, reservation_id)
        if row is None:
            raise NotFoundError(f"Reservation not found: {reservation_id}")
        return ReservationRead.model_validate(row)

    async def update_reservation(
        self, reservation_id: str, patch: ReservationUpdate
    ) -> ReservationRead:
        """Apply a reservation patch; ``updatedAt`` moves on every call."""
        fields = _patch_fields(patch, ("type", "status"))
        if fields.get("price") is not None:
            _require_amount(fields["price"], "price")
        if "attachment_urls" in fields:
            fields["attachment_urls"] = encode_attachment_urls(fields["attachment_urls"])
        fields["updated_at"] = self._clock()

        async with self.gateway.transaction():
            row = await self.gateway.update(Reservation, reservation_id, fields)
            if row is None:
                raise NotFoundError(f"Reservation not found: {reservation_id}")
            return ReservationRead.model_validate(row)

    async def delete_reservation(self, reservation_id: str) -> None:
        async with self.gateway.transaction():
            if not await self.gateway.delete(Reservation, reservation_id):
                raise NotFoundError(f"Reservation not found: {reservation_id}")

    # Aggregate read

    async def get_itinerary_summary(self, itinerary_id: str) -> ItinerarySummary:
        """Itinerary with ordered children and spending totals derived on read."""
        itinerary = await self.get_itinerary(itinerary_id)
        events = await self.list_events(itinerary_id)
        packing_items = await self.list_packing_items(itinerary_id)
        budgets = await self.list_budgets(itinerary_id)
        expenses = await self.list_expenses(itinerary_id)

        spent_by_budget: dict[str, float] = defaultdict(float)
        for expense in expenses:
            spent_by_budget[expense.budget_id] += expense.amount
        total_spent = sum(expense.amount for expense in expenses)

        return ItinerarySummary(
            itinerary=itinerary,
            events=events,
            packing_items=packing_items,
            budgets=[
                BudgetSummary(**budget.model_dump(), spent=spent_by_budget.get(budget.id, 0))
                for budget in budgets
            ],
            total_spent=total_spent,
            remaining_budget=itinerary.total_budget - total_spent,
        )
