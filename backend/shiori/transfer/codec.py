"""Transfer codec: export an itinerary graph to a document and import it back.

Export is a pure read. Import materializes a brand-new itinerary through the
manager's create operations inside one gateway transaction, so a failure on
any record leaves nothing behind.
"""

import logging
from enum import Enum
from typing import Any, TypeVar
from zoneinfo import ZoneInfo

from pydantic import ValidationError

from backend.shiori.errors import InvalidFormatError, PlannerError
from backend.shiori.models.common import (
    BudgetCategory,
    PackingCategory,
    ReservationStatus,
    ReservationType,
    is_known_icon,
)
from backend.shiori.models.itinerary import (
    BudgetCreate,
    EventCreate,
    ExpenseCreate,
    PackingItemCreate,
    ReservationFields,
)
from backend.shiori.models.transfer import (
    TRANSFER_VERSION,
    ImportResult,
    TransferBudget,
    TransferDocument,
    TransferEvent,
    TransferExpense,
    TransferItinerary,
    TransferPackingItem,
    TransferReservation,
)
from backend.shiori.planning.manager import ItineraryManager
from backend.shiori.utils.metrics import record_transfer
from backend.shiori.utils.timeutil import normalize_date, today

logger = logging.getLogger(__name__)

EnumT = TypeVar("EnumT", bound=Enum)

PLACEHOLDER_BUDGET_NAME = "Imported expenses"


def _coerce_enum(value: str | None, enum_cls: type[EnumT], fallback: EnumT) -> EnumT:
    """Known enum value, or the fallback for missing/unknown ones."""
    if value is None:
        return fallback
    try:
        return enum_cls(value)
    except ValueError:
        return fallback


def _describe_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"Malformed transfer document at {location or '<root>'}: {first.get('msg')}"


def _import_date(value: Any, tz: ZoneInfo, where: str) -> str | None:
    try:
        return normalize_date(value, tz)
    except ValueError as e:
        raise InvalidFormatError(f"Malformed transfer document at {where}: {e}") from e


class TransferCodec:
    """Serialize/deserialize a whole itinerary as one transfer document."""

    def __init__(self, manager: ItineraryManager) -> None:
        self.manager = manager

    async def export_itinerary(self, itinerary_id: str) -> TransferDocument:
        """Assemble the transfer document for one itinerary.

        Events are ordered by date (undated last) then orderIndex; budgets
        and packing items by orderIndex; expenses by date then createdAt.
        """
        try:
            document = await self._export(itinerary_id)
        except PlannerError:
            record_transfer("export", "failure")
            raise
        record_transfer("export", "success")
        logger.info(
            f"[export_itinerary] {itinerary_id}: {len(document.events)} events, "
            f"{len(document.expenses)} expenses"
        )
        return document

    async def _export(self, itinerary_id: str) -> TransferDocument:
        manager = self.manager
        itinerary = await manager.get_itinerary(itinerary_id)
        events = sorted(
            await manager.list_events(itinerary_id),
            key=lambda e: (e.event_date is None, e.event_date or "", e.order_index),
        )
        budgets = await manager.list_budgets(itinerary_id)
        expenses = sorted(
            await manager.list_expenses(itinerary_id),
            key=lambda e: (e.date, e.created_at),
        )
        packing_items = await manager.list_packing_items(itinerary_id)
        reservations = await manager.list_reservations(itinerary_id=itinerary_id)

        return TransferDocument(
            version=TRANSFER_VERSION,
            itinerary=TransferItinerary(
                id=itinerary.id,
                title=itinerary.title,
                created_at=itinerary.created_at,
                total_budget=itinerary.total_budget,
                currency=itinerary.currency,
            ),
            events=[TransferEvent(**event.model_dump()) for event in events],
            budgets=[
                TransferBudget(
                    id=budget.id,
                    category=budget.category.value,
                    name=budget.name,
                    amount=budget.amount,
                    notes=budget.notes,
                    event_id=budget.event_id,
                    order_index=budget.order_index,
                )
                for budget in budgets
            ],
            expenses=[
                TransferExpense(
                    id=expense.id,
                    budget_id=expense.budget_id,
                    itinerary_id=expense.itinerary_id,
                    description=expense.description,
                    amount=expense.amount,
                    category=expense.category.value,
                    expense_date=expense.date,
                    payment_method=expense.payment_method,
                )
                for expense in expenses
            ],
            packing_items=[
                TransferPackingItem(
                    id=item.id,
                    name=item.name,
                    category=item.category.value,
                    quantity=item.quantity,
                    is_packed=item.is_packed,
                    notes=item.notes,
                    is_essential=item.is_essential,
                    order_index=item.order_index,
                )
                for item in packing_items
            ],
            reservations=[
                TransferReservation(
                    **reservation.model_dump(
                        mode="json",
                        include=set(ReservationFields.model_fields) | {"event_id"},
                    )
                )
                for reservation in reservations
            ],
        )

    async def import_itinerary(self, document: Any) -> ImportResult:
        """Create a new itinerary from a transfer document.

        Args:
            document: Decoded JSON (a dict); ``itinerary`` and ``events`` are required

        Returns:
            The new itinerary ID and warnings for records that were skipped

        Raises:
            InvalidFormatError: If the document is not a transfer document
        """
        try:
            result = await self._import(document)
        except PlannerError as e:
            record_transfer("import", "failure")
            logger.warning(f"[import_itinerary] failed: {e.kind}: {e.message}")
            raise
        record_transfer("import", "success")
        logger.info(
            f"[import_itinerary] created {result.itinerary_id} "
            f"({len(result.warnings)} warning(s))"
        )
        return result

    async def _import(self, document: Any) -> ImportResult:
        if not isinstance(document, dict):
            raise InvalidFormatError("Transfer document must be a JSON object")
        if document.get("itinerary") is None or document.get("events") is None:
            raise InvalidFormatError("Transfer document must contain itinerary and events")
        try:
            doc = TransferDocument.model_validate(document)
        except ValidationError as e:
            raise InvalidFormatError(_describe_validation_error(e)) from e

        warnings: list[str] = []
        async with self.manager.gateway.transaction():
            itinerary = await self.manager.create_itinerary(doc.itinerary.title)
            await self.manager.set_budget_envelope(
                itinerary.id,
                doc.itinerary.total_budget if doc.itinerary.total_budget is not None else 0,
                doc.itinerary.currency or None,
            )

            event_ids = await self._import_events(itinerary.id, doc.events, warnings)
            budget_ids = await self._import_budgets(itinerary.id, doc.budgets, event_ids, warnings)
            await self._import_expenses(itinerary.id, doc.expenses, budget_ids)
            await self._import_packing_items(itinerary.id, doc.packing_items, warnings)
            await self._import_reservations(itinerary.id, doc.reservations, event_ids, warnings)

        return ImportResult(itinerary_id=itinerary.id, warnings=warnings)

    async def _import_events(
        self, itinerary_id: str, events: list[TransferEvent], warnings: list[str]
    ) -> dict[str, str]:
        """Create events in input order; returns exported ID -> new ID."""
        tz = self.manager.timezone
        event_ids: dict[str, str] = {}
        for position, event in enumerate(events):
            icon = event.icon if event.icon and is_known_icon(event.icon) else None
            latitude, longitude = event.latitude, event.longitude
            if (latitude is None) != (longitude is None):
                warnings.append(f"events[{position}]: incomplete coordinates dropped")
                latitude = longitude = None

            created = await self.manager.create_event(
                itinerary_id,
                EventCreate(
                    title=event.title,
                    description=event.description,
                    location=event.location,
                    latitude=latitude,
                    longitude=longitude,
                    event_date=_import_date(event.event_date, tz, f"events[{position}].eventDate"),
                    start_time=event.start_time,
                    end_time=event.end_time,
                    icon=icon,
                    link=event.link,
                ),
            )
            if event.id:
                event_ids[event.id] = created.id
        return event_ids

    async def _import_budgets(
        self,
        itinerary_id: str,
        budgets: list[TransferBudget],
        event_ids: dict[str, str],
        warnings: list[str],
    ) -> dict[str, str]:
        """Create budgets in input order, re-linked to the new events."""
        budget_ids: dict[str, str] = {}
        for position, budget in enumerate(budgets):
            if not budget.name or not budget.name.strip():
                warnings.append(f"budgets[{position}]: skipped budget without a name")
                continue
            created = await self.manager.create_budget(
                itinerary_id,
                BudgetCreate(
                    category=_coerce_enum(budget.category, BudgetCategory, BudgetCategory.other),
                    name=budget.name,
                    amount=budget.amount if budget.amount is not None else 0,
                    notes=budget.notes,
                    event_id=event_ids.get(budget.event_id) if budget.event_id else None,
                ),
            )
            if budget.id:
                budget_ids[budget.id] = created.id
        return budget_ids

    async def _import_expenses(
        self, itinerary_id: str, expenses: list[TransferExpense], budget_ids: dict[str, str]
    ) -> None:
        """Create expenses; ones without a resolvable budget share a placeholder budget."""
        tz = self.manager.timezone
        placeholder_id: str | None = None
        for position, expense in enumerate(expenses):
            budget_id = budget_ids.get(expense.budget_id) if expense.budget_id else None
            if budget_id is None:
                if placeholder_id is None:
                    placeholder = await self.manager.create_budget(
                        itinerary_id,
                        BudgetCreate(
                            category=BudgetCategory.other,
                            name=PLACEHOLDER_BUDGET_NAME,
                            amount=0,
                        ),
                    )
                    placeholder_id = placeholder.id
                budget_id = placeholder_id

            raw_date = expense.expense_date if expense.expense_date is not None else expense.date
            await self.manager.create_expense(
                ExpenseCreate(
                    budget_id=budget_id,
                    itinerary_id=itinerary_id,
                    date=_import_date(raw_date, tz, f"expenses[{position}].expenseDate")
                    or today(self.manager.now, tz),
                    amount=expense.amount if expense.amount is not None else 0,
                    description=expense.description if expense.description is not None else "",
                    category=_coerce_enum(expense.category, BudgetCategory, BudgetCategory.other),
                    payment_method=expense.payment_method,
                )
            )

    async def _import_packing_items(
        self, itinerary_id: str, items: list[TransferPackingItem], warnings: list[str]
    ) -> None:
        for position, item in enumerate(items):
            if not item.name or not item.name.strip():
                warnings.append(f"packingItems[{position}]: skipped item without a name")
                continue
            if item.checked is not None:
                is_packed = item.checked
            else:
                is_packed = bool(item.is_packed)
            await self.manager.create_packing_item(
                itinerary_id,
                PackingItemCreate(
                    name=item.name,
                    category=_coerce_enum(item.category, PackingCategory, PackingCategory.other),
                    is_packed=is_packed,
                    quantity=item.quantity if item.quantity and item.quantity >= 1 else 1,
                    notes=item.notes,
                    is_essential=bool(item.is_essential),
                ),
            )

    async def _import_reservations(
        self,
        itinerary_id: str,
        reservations: list[TransferReservation],
        event_ids: dict[str, str],
        warnings: list[str],
    ) -> None:
        reserved: set[str] = set()
        for position, reservation in enumerate(reservations):
            event_id = event_ids.get(reservation.event_id) if reservation.event_id else None
            if event_id is None:
                warnings.append(f"reservations[{position}]: skipped, event not in document")
                continue
            if event_id in reserved:
                warnings.append(
                    f"reservations[{position}]: skipped, event already has a reservation"
                )
                continue
            reserved.add(event_id)
            await self.manager.create_reservation(
                event_id,
                itinerary_id,
                ReservationFields(
                    type=_coerce_enum(reservation.type, ReservationType, ReservationType.other),
                    status=_coerce_enum(
                        reservation.status, ReservationStatus, ReservationStatus.notBooked
                    ),
                    confirmation_number=reservation.confirmation_number,
                    provider=reservation.provider,
                    booking_date=reservation.booking_date,
                    price=reservation.price,
                    currency=reservation.currency,
                    notes=reservation.notes,
                    contact_info=reservation.contact_info,
                    attachment_urls=reservation.attachment_urls or [],
                ),
            )
