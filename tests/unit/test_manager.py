"""Tests for the itinerary aggregate manager."""

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from backend.shiori.db.gateway import PersistenceGateway
from backend.shiori.db.models import Budget, Event, Expense, PackingItem, Reservation
from backend.shiori.errors import ConflictError, InvalidInputError, NotFoundError, StorageError
from backend.shiori.models.common import BudgetCategory, ReservationStatus, ReservationType
from backend.shiori.models.itinerary import (
    BudgetCreate,
    BudgetUpdate,
    EventCreate,
    EventUpdate,
    ExpenseCreate,
    ExpenseUpdate,
    ItineraryUpdate,
    PackingItemCreate,
    PackingItemUpdate,
    ReservationFields,
    ReservationUpdate,
)
from backend.shiori.planning.manager import ItineraryManager


async def _budget(manager: ItineraryManager, itinerary_id: str, amount: float = 10000, **kw):
    return await manager.create_budget(
        itinerary_id,
        BudgetCreate(category=BudgetCategory.food, name="Meals", amount=amount, **kw),
    )


async def _expense(manager: ItineraryManager, itinerary_id: str, budget_id: str, amount: float):
    return await manager.create_expense(
        ExpenseCreate(
            budget_id=budget_id,
            itinerary_id=itinerary_id,
            date="2024-05-01",
            amount=amount,
            description="Lunch",
            category=BudgetCategory.food,
        )
    )


@pytest.mark.asyncio
async def test_create_itinerary_defaults(manager: ItineraryManager, clock) -> None:
    """New itineraries start with a zero budget in JPY and createdAt = now."""
    itinerary = await manager.create_itinerary("Tokyo Trip")

    assert itinerary.title == "Tokyo Trip"
    assert itinerary.total_budget == 0
    assert itinerary.currency == "JPY"
    assert itinerary.created_at == clock.now


@pytest.mark.asyncio
async def test_create_itinerary_rejects_blank_title(manager: ItineraryManager) -> None:
    with pytest.raises(InvalidInputError):
        await manager.create_itinerary("   ")


@pytest.mark.asyncio
async def test_list_itineraries_newest_first(manager: ItineraryManager, clock) -> None:
    first = await manager.create_itinerary("First")
    clock.advance(1000)
    second = await manager.create_itinerary("Second")

    listed = await manager.list_itineraries()

    assert [i.id for i in listed] == [second.id, first.id]


@pytest.mark.asyncio
async def test_append_and_reorder_scenario(manager: ItineraryManager) -> None:
    """Append uses max+1 (gaps tolerated); reorder reindexes to list positions."""
    itinerary = await manager.create_itinerary("Tokyo Trip")
    e0 = await manager.create_event(itinerary.id, EventCreate(title="Arrive"))
    e1 = await manager.create_event(itinerary.id, EventCreate(title="Lunch"))
    e2 = await manager.create_event(itinerary.id, EventCreate(title="Museum"))
    assert [e0.order_index, e1.order_index, e2.order_index] == [0, 1, 2]

    await manager.delete_event(e1.id)
    e3 = await manager.create_event(itinerary.id, EventCreate(title="Dinner"))
    assert e3.order_index == 3

    reordered = await manager.reorder_events(itinerary.id, [e2.id, e0.id, e3.id])

    assert [(e.id, e.order_index) for e in reordered] == [(e2.id, 0), (e0.id, 1), (e3.id, 2)]


@pytest.mark.asyncio
async def test_reorder_is_idempotent(manager: ItineraryManager) -> None:
    itinerary = await manager.create_itinerary("Trip")
    items = [
        await manager.create_packing_item(itinerary.id, PackingItemCreate(name=name))
        for name in ("Passport", "Charger", "Socks")
    ]
    order = [items[2].id, items[0].id, items[1].id]

    first = await manager.reorder_packing_items(itinerary.id, order)
    second = await manager.reorder_packing_items(itinerary.id, order)

    assert [(i.id, i.order_index) for i in first] == [(i.id, i.order_index) for i in second]
    assert [i.order_index for i in second] == [0, 1, 2]


@pytest.mark.asyncio
async def test_reorder_subset_keeps_unlisted_after_listed(manager: ItineraryManager) -> None:
    """A partial list moves listed items first; the rest keep their relative order."""
    itinerary = await manager.create_itinerary("Trip")
    a, b, c, d = [
        await manager.create_event(itinerary.id, EventCreate(title=t)) for t in "abcd"
    ]

    result = await manager.reorder_events(itinerary.id, [c.id, a.id])

    assert [e.id for e in result] == [c.id, a.id, b.id, d.id]
    assert [e.order_index for e in result] == [0, 1, 2, 3]


@pytest.mark.asyncio
async def test_reorder_ignores_foreign_unknown_and_repeated_ids(
    manager: ItineraryManager,
) -> None:
    mine = await manager.create_itinerary("Mine")
    other = await manager.create_itinerary("Other")
    a = await manager.create_event(mine.id, EventCreate(title="a"))
    b = await manager.create_event(mine.id, EventCreate(title="b"))
    foreign = await manager.create_event(other.id, EventCreate(title="x"))
    await manager.create_event(other.id, EventCreate(title="y"))

    result = await manager.reorder_events(mine.id, [foreign.id, b.id, "missing", b.id, a.id])

    assert [(e.id, e.order_index) for e in result] == [(b.id, 0), (a.id, 1)]
    assert (await manager.get_event(foreign.id)).order_index == 0


@pytest.mark.asyncio
async def test_reorder_budgets(manager: ItineraryManager) -> None:
    itinerary = await manager.create_itinerary("Trip")
    first = await _budget(manager, itinerary.id)
    second = await _budget(manager, itinerary.id)

    result = await manager.reorder_budgets(itinerary.id, [second.id, first.id])

    assert [(b.id, b.order_index) for b in result] == [(second.id, 0), (first.id, 1)]


@pytest.mark.asyncio
async def test_reorder_missing_itinerary_is_not_found(manager: ItineraryManager) -> None:
    with pytest.raises(NotFoundError):
        await manager.reorder_events("nope", [])


@pytest.mark.asyncio
async def test_second_reservation_for_event_conflicts(manager: ItineraryManager) -> None:
    itinerary = await manager.create_itinerary("Trip")
    event = await manager.create_event(itinerary.id, EventCreate(title="Flight to Osaka"))
    fields = ReservationFields(type=ReservationType.flight, status=ReservationStatus.notBooked)

    reservation = await manager.create_reservation(event.id, itinerary.id, fields)
    assert reservation.event_id == event.id
    assert reservation.attachment_urls == []

    with pytest.raises(ConflictError):
        await manager.create_reservation(event.id, itinerary.id, fields)

    assert len(await manager.list_reservations(event_id=event.id)) == 1


@pytest.mark.asyncio
async def test_reservation_requires_event_of_same_itinerary(manager: ItineraryManager) -> None:
    first = await manager.create_itinerary("First")
    second = await manager.create_itinerary("Second")
    event = await manager.create_event(first.id, EventCreate(title="Hotel"))
    fields = ReservationFields(type=ReservationType.hotel)

    with pytest.raises(InvalidInputError):
        await manager.create_reservation(event.id, second.id, fields)
    with pytest.raises(NotFoundError):
        await manager.create_reservation("missing-event", first.id, fields)


@pytest.mark.asyncio
async def test_unique_reservation_enforced_by_storage(manager: ItineraryManager) -> None:
    """A write that bypasses validation still cannot create a second reservation."""
    itinerary = await manager.create_itinerary("Trip")
    event = await manager.create_event(itinerary.id, EventCreate(title="Train"))
    await manager.create_reservation(
        event.id, itinerary.id, ReservationFields(type=ReservationType.train)
    )

    with pytest.raises(StorageError):
        async with manager.gateway.transaction():
            await manager.gateway.insert(
                Reservation(
                    id="dup",
                    event_id=event.id,
                    itinerary_id=itinerary.id,
                    type="train",
                    status="notBooked",
                    created_at=0,
                    updated_at=0,
                )
            )

    assert len(await manager.list_reservations(itinerary_id=itinerary.id)) == 1


@pytest.mark.asyncio
async def test_run_in_transaction_commits_and_returns_result(manager: ItineraryManager) -> None:
    async def create_pair(gateway: PersistenceGateway) -> str:
        itinerary = await manager.create_itinerary("Trip")
        await manager.create_event(itinerary.id, EventCreate(title="Arrive"))
        return itinerary.id

    itinerary_id = await manager.gateway.run_in_transaction(create_pair)

    assert [i.id for i in await manager.list_itineraries()] == [itinerary_id]
    assert [e.title for e in await manager.list_events(itinerary_id)] == ["Arrive"]


@pytest.mark.asyncio
async def test_run_in_transaction_rolls_back_on_error(manager: ItineraryManager) -> None:
    async def create_then_fail(gateway: PersistenceGateway) -> None:
        itinerary = await manager.create_itinerary("Trip")
        await manager.create_event(itinerary.id, EventCreate(title="Arrive"))
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        await manager.gateway.run_in_transaction(create_then_fail)

    assert await manager.list_itineraries() == []
    assert manager.gateway.in_transaction is False


@pytest.mark.asyncio
async def test_update_reservation_patch_semantics(
    manager: ItineraryManager, clock
) -> None:
    """Present fields are written (None clears), absent fields are kept, updatedAt moves."""
    itinerary = await manager.create_itinerary("Trip")
    event = await manager.create_event(itinerary.id, EventCreate(title="Dinner"))
    created = await manager.create_reservation(
        event.id,
        itinerary.id,
        ReservationFields(
            type=ReservationType.restaurant,
            provider="Sushi Dai",
            notes="Counter seats",
            attachment_urls=["https://example.com/a.pdf", "https://example.com/b.pdf"],
        ),
    )
    assert created.attachment_urls == ["https://example.com/a.pdf", "https://example.com/b.pdf"]

    clock.advance(5000)
    updated = await manager.update_reservation(
        created.id,
        ReservationUpdate(status=ReservationStatus.confirmed, notes=None, attachment_urls=[]),
    )

    assert updated.status == ReservationStatus.confirmed
    assert updated.provider == "Sushi Dai"
    assert updated.notes is None
    assert updated.attachment_urls == []
    assert updated.created_at == created.created_at
    assert updated.updated_at == created.updated_at + 5000

    row = await manager.gateway.get(Reservation, created.id)
    assert row is not None
    assert row.attachment_urls is None


@pytest.mark.asyncio
async def test_update_reservation_empty_patch_still_bumps_updated_at(
    manager: ItineraryManager, clock
) -> None:
    itinerary = await manager.create_itinerary("Trip")
    event = await manager.create_event(itinerary.id, EventCreate(title="Ferry"))
    created = await manager.create_reservation(
        event.id, itinerary.id, ReservationFields(type=ReservationType.ferry)
    )
    clock.advance(1)

    updated = await manager.update_reservation(created.id, ReservationUpdate())

    assert updated.updated_at == created.updated_at + 1
    with pytest.raises(InvalidInputError):
        await manager.update_reservation(created.id, ReservationUpdate(type=None))
    with pytest.raises(NotFoundError):
        await manager.update_reservation("missing", ReservationUpdate())


@pytest.mark.asyncio
async def test_summary_reports_spent_per_budget(manager: ItineraryManager) -> None:
    itinerary = await manager.create_itinerary("Trip")
    budget = await _budget(manager, itinerary.id, amount=10000)
    other = await _budget(manager, itinerary.id, amount=5000)
    await _expense(manager, itinerary.id, budget.id, 3000)
    await _expense(manager, itinerary.id, budget.id, 4500)
    await manager.set_budget_envelope(itinerary.id, 20000, "JPY")

    summary = await manager.get_itinerary_summary(itinerary.id)

    spent = {b.id: b.spent for b in summary.budgets}
    assert spent[budget.id] == 7500
    assert spent[other.id] == 0
    assert summary.total_spent == 7500
    assert summary.remaining_budget == 12500


@pytest.mark.asyncio
async def test_summary_orders_events_by_date_time_then_index(
    manager: ItineraryManager,
) -> None:
    """HH:MM and epoch-millis start times are compared on the same clock."""
    tokyo = ZoneInfo("Asia/Tokyo")
    early_epoch = str(int(datetime(2024, 5, 1, 8, 30, tzinfo=tokyo).timestamp() * 1000))
    itinerary = await manager.create_itinerary("Trip")
    undated = await manager.create_event(itinerary.id, EventCreate(title="Someday"))
    day2 = await manager.create_event(
        itinerary.id, EventCreate(title="Day 2", event_date="2024-05-02", start_time="09:00")
    )
    afternoon = await manager.create_event(
        itinerary.id, EventCreate(title="Afternoon", event_date="2024-05-01", start_time="14:00")
    )
    morning = await manager.create_event(
        itinerary.id, EventCreate(title="Morning", event_date="2024-05-01", start_time=early_epoch)
    )
    no_time = await manager.create_event(
        itinerary.id, EventCreate(title="Sometime", event_date="2024-05-01")
    )

    summary = await manager.get_itinerary_summary(itinerary.id)

    assert [e.id for e in summary.events] == [
        morning.id,
        afternoon.id,
        no_time.id,
        day2.id,
        undated.id,
    ]


@pytest.mark.asyncio
async def test_negative_budget_envelope_rejected(manager: ItineraryManager) -> None:
    itinerary = await manager.create_itinerary("Trip")

    with pytest.raises(InvalidInputError):
        await manager.set_budget_envelope(itinerary.id, -100, "JPY")

    assert (await manager.get_itinerary(itinerary.id)).total_budget == 0


@pytest.mark.asyncio
async def test_budget_envelope_keeps_currency_when_omitted(manager: ItineraryManager) -> None:
    itinerary = await manager.create_itinerary("Trip")
    await manager.set_budget_envelope(itinerary.id, 500, "USD")

    updated = await manager.set_budget_envelope(itinerary.id, 800)

    assert updated.total_budget == 800
    assert updated.currency == "USD"
    with pytest.raises(NotFoundError):
        await manager.set_budget_envelope("missing", 10)


@pytest.mark.asyncio
async def test_delete_itinerary_cascades_everything(manager: ItineraryManager) -> None:
    itinerary = await manager.create_itinerary("Trip")
    keep = await manager.create_itinerary("Keep")
    event = await manager.create_event(itinerary.id, EventCreate(title="Hotel"))
    await manager.create_event(keep.id, EventCreate(title="Other"))
    await manager.create_packing_item(itinerary.id, PackingItemCreate(name="Passport"))
    budget = await _budget(manager, itinerary.id, event_id=event.id)
    await _expense(manager, itinerary.id, budget.id, 100)
    await manager.create_reservation(
        event.id, itinerary.id, ReservationFields(type=ReservationType.hotel)
    )

    await manager.delete_itinerary(itinerary.id)

    gateway = manager.gateway
    for model in (Event, PackingItem, Budget, Expense, Reservation):
        assert await gateway.list_where(model, itinerary_id=itinerary.id) == []
    assert len(await gateway.list_where(Event, itinerary_id=keep.id)) == 1
    with pytest.raises(NotFoundError):
        await manager.get_itinerary(itinerary.id)
    with pytest.raises(NotFoundError):
        await manager.delete_itinerary(itinerary.id)


@pytest.mark.asyncio
async def test_delete_budget_cascades_expenses(manager: ItineraryManager) -> None:
    itinerary = await manager.create_itinerary("Trip")
    budget = await _budget(manager, itinerary.id)
    other = await _budget(manager, itinerary.id)
    await _expense(manager, itinerary.id, budget.id, 100)
    kept = await _expense(manager, itinerary.id, other.id, 200)

    await manager.delete_budget(budget.id)

    assert [e.id for e in await manager.list_expenses(itinerary.id)] == [kept.id]


@pytest.mark.asyncio
async def test_delete_event_removes_reservation_and_unlinks_budget(
    manager: ItineraryManager,
) -> None:
    itinerary = await manager.create_itinerary("Trip")
    event = await manager.create_event(itinerary.id, EventCreate(title="Concert"))
    budget = await _budget(manager, itinerary.id, event_id=event.id)
    reservation = await manager.create_reservation(
        event.id, itinerary.id, ReservationFields(type=ReservationType.activity)
    )

    await manager.delete_event(event.id)

    assert (await manager.get_budget(budget.id)).event_id is None
    with pytest.raises(NotFoundError):
        await manager.get_reservation(reservation.id)


@pytest.mark.asyncio
async def test_update_event_changes_only_supplied_fields(manager: ItineraryManager) -> None:
    itinerary = await manager.create_itinerary("Trip")
    event = await manager.create_event(
        itinerary.id,
        EventCreate(
            title="Temple",
            description="Morning visit",
            location="Asakusa",
            latitude=35.7148,
            longitude=139.7967,
            icon="landmark",
        ),
    )

    renamed = await manager.update_event(event.id, EventUpdate(title="Senso-ji"))
    assert renamed.title == "Senso-ji"
    assert renamed.description == "Morning visit"
    assert renamed.location == "Asakusa"
    assert renamed.icon == "landmark"
    assert renamed.order_index == event.order_index

    cleared = await manager.update_event(event.id, EventUpdate(description=None))
    assert cleared.description is None
    assert cleared.title == "Senso-ji"


@pytest.mark.asyncio
async def test_update_event_validation(manager: ItineraryManager) -> None:
    itinerary = await manager.create_itinerary("Trip")
    event = await manager.create_event(
        itinerary.id, EventCreate(title="Park", latitude=35.0, longitude=139.0)
    )

    with pytest.raises(InvalidInputError):
        await manager.update_event(event.id, EventUpdate(title=None))
    with pytest.raises(InvalidInputError):
        await manager.update_event(event.id, EventUpdate(latitude=None))
    with pytest.raises(InvalidInputError):
        await manager.update_event(event.id, EventUpdate(icon="unicorn"))
    with pytest.raises(NotFoundError):
        await manager.update_event("missing", EventUpdate(title="x"))

    cleared = await manager.update_event(event.id, EventUpdate(latitude=None, longitude=None))
    assert cleared.latitude is None and cleared.longitude is None


@pytest.mark.asyncio
async def test_create_event_validation(manager: ItineraryManager) -> None:
    itinerary = await manager.create_itinerary("Trip")

    with pytest.raises(NotFoundError):
        await manager.create_event("missing", EventCreate(title="x"))
    with pytest.raises(InvalidInputError):
        await manager.create_event(itinerary.id, EventCreate(title=""))
    with pytest.raises(InvalidInputError):
        await manager.create_event(itinerary.id, EventCreate(title="x", latitude=35.0))
    with pytest.raises(InvalidInputError):
        await manager.create_event(
            itinerary.id, EventCreate(title="x", latitude=95.0, longitude=139.0)
        )
    with pytest.raises(InvalidInputError):
        await manager.create_event(itinerary.id, EventCreate(title="x", icon="unicorn"))

    assert await manager.list_events(itinerary.id) == []


@pytest.mark.asyncio
async def test_update_itinerary_partial(manager: ItineraryManager) -> None:
    itinerary = await manager.create_itinerary("Trip")

    updated = await manager.update_itinerary(itinerary.id, ItineraryUpdate(title="Kyoto Trip"))

    assert updated.title == "Kyoto Trip"
    assert updated.currency == "JPY"
    assert updated.created_at == itinerary.created_at
    with pytest.raises(InvalidInputError):
        await manager.update_itinerary(itinerary.id, ItineraryUpdate(title=" "))
    with pytest.raises(InvalidInputError):
        await manager.update_itinerary(itinerary.id, ItineraryUpdate(total_budget=-1))
    with pytest.raises(NotFoundError):
        await manager.update_itinerary("missing", ItineraryUpdate(title="x"))


@pytest.mark.asyncio
async def test_packing_item_defaults_and_updates(manager: ItineraryManager) -> None:
    itinerary = await manager.create_itinerary("Trip")
    item = await manager.create_packing_item(itinerary.id, PackingItemCreate(name="Adapter"))

    assert item.quantity == 1
    assert item.is_packed is False
    assert item.is_essential is False

    packed = await manager.update_packing_item(item.id, PackingItemUpdate(is_packed=True))
    assert packed.is_packed is True
    assert packed.name == "Adapter"

    with pytest.raises(InvalidInputError):
        await manager.update_packing_item(item.id, PackingItemUpdate(quantity=0))
    with pytest.raises(InvalidInputError):
        await manager.create_packing_item(itinerary.id, PackingItemCreate(name="x", quantity=0))
    with pytest.raises(NotFoundError):
        await manager.update_packing_item("missing", PackingItemUpdate(is_packed=True))


@pytest.mark.asyncio
async def test_budget_event_link_must_match_itinerary(manager: ItineraryManager) -> None:
    first = await manager.create_itinerary("First")
    second = await manager.create_itinerary("Second")
    foreign_event = await manager.create_event(second.id, EventCreate(title="Elsewhere"))
    own_event = await manager.create_event(first.id, EventCreate(title="Here"))

    with pytest.raises(InvalidInputError):
        await _budget(manager, first.id, event_id=foreign_event.id)
    with pytest.raises(NotFoundError):
        await _budget(manager, first.id, event_id="missing")
    with pytest.raises(InvalidInputError):
        await _budget(manager, first.id, amount=-5)

    budget = await _budget(manager, first.id)
    linked = await manager.update_budget(budget.id, BudgetUpdate(event_id=own_event.id))
    assert linked.event_id == own_event.id
    with pytest.raises(InvalidInputError):
        await manager.update_budget(budget.id, BudgetUpdate(event_id=foreign_event.id))

    unlinked = await manager.update_budget(budget.id, BudgetUpdate(event_id=None))
    assert unlinked.event_id is None
    assert unlinked.name == "Meals"


@pytest.mark.asyncio
async def test_expense_requires_budget_of_same_itinerary(manager: ItineraryManager) -> None:
    first = await manager.create_itinerary("First")
    second = await manager.create_itinerary("Second")
    budget = await _budget(manager, first.id)
    foreign_budget = await _budget(manager, second.id)

    with pytest.raises(NotFoundError):
        await _expense(manager, first.id, "missing", 10)
    with pytest.raises(InvalidInputError):
        await _expense(manager, first.id, foreign_budget.id, 10)
    with pytest.raises(InvalidInputError):
        await _expense(manager, first.id, budget.id, -10)

    expense = await _expense(manager, first.id, budget.id, 10)
    with pytest.raises(InvalidInputError):
        await manager.update_expense(expense.id, ExpenseUpdate(budget_id=foreign_budget.id))
    with pytest.raises(InvalidInputError):
        await manager.update_expense(expense.id, ExpenseUpdate(description=None))

    updated = await manager.update_expense(expense.id, ExpenseUpdate(amount=25))
    assert updated.amount == 25
    assert updated.description == "Lunch"
    assert updated.created_at == expense.created_at


@pytest.mark.asyncio
async def test_list_expenses_filters_by_budget(
    manager: ItineraryManager, clock
) -> None:
    itinerary = await manager.create_itinerary("Trip")
    budget = await _budget(manager, itinerary.id)
    other = await _budget(manager, itinerary.id)
    older = await _expense(manager, itinerary.id, budget.id, 1)
    clock.advance(10)
    newer = await _expense(manager, itinerary.id, budget.id, 2)
    await _expense(manager, itinerary.id, other.id, 3)

    listed = await manager.list_expenses(itinerary.id, budget_id=budget.id)

    assert [e.id for e in listed] == [newer.id, older.id]
    assert len(await manager.list_expenses(itinerary.id)) == 3


@pytest.mark.asyncio
async def test_transaction_rolls_back_on_error(manager: ItineraryManager) -> None:
    """Writes inside a failed transaction scope leave nothing behind."""
    with pytest.raises(RuntimeError):
        async with manager.gateway.transaction():
            itinerary = await manager.create_itinerary("Doomed")
            await manager.create_event(itinerary.id, EventCreate(title="Never"))
            raise RuntimeError("boom")

    assert await manager.list_itineraries() == []
    assert await manager.gateway.list_where(Event) == []
