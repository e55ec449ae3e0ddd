"""Itinerary aggregate models: read shapes, create payloads and patches.

Patch models (``*Update``) carry only the fields the caller supplied:
``model_fields_set`` is the field mask. A field present with ``None`` means
"clear it", a field that is absent means "leave it unchanged".
"""

import json
from typing import Any

from pydantic import Field, field_validator

from backend.shiori.models.common import (
    ApiModel,
    BudgetCategory,
    PackingCategory,
    ReservationStatus,
    ReservationType,
)

# Itinerary


class ItineraryRead(ApiModel):
    """Root planning document for one trip."""

    id: str
    title: str
    created_at: int
    total_budget: float = 0
    currency: str = "JPY"


class ItineraryCreate(ApiModel):
    title: str


class ItineraryUpdate(ApiModel):
    title: str | None = None
    total_budget: float | None = None
    currency: str | None = None


class BudgetEnvelope(ApiModel):
    """Body of the budget-envelope call; omitted currency keeps the current one."""

    total_budget: float
    currency: str | None = None


# Event


class EventFields(ApiModel):
    title: str
    description: str | None = None
    location: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    event_date: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    icon: str | None = None
    link: str | None = None


class EventCreate(EventFields):
    pass


class EventUpdate(ApiModel):
    title: str | None = None
    description: str | None = None
    location: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    event_date: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    icon: str | None = None
    link: str | None = None


class EventRead(EventFields):
    """A single dated/timed activity within an itinerary."""

    id: str
    itinerary_id: str
    order_index: int


# Packing item


class PackingItemCreate(ApiModel):
    name: str
    category: PackingCategory = PackingCategory.other
    is_packed: bool = False
    quantity: int = 1
    notes: str | None = None
    is_essential: bool = False


class PackingItemUpdate(ApiModel):
    name: str | None = None
    category: PackingCategory | None = None
    is_packed: bool | None = None
    quantity: int | None = None
    notes: str | None = None
    is_essential: bool | None = None


class PackingItemRead(PackingItemCreate):
    id: str
    itinerary_id: str
    order_index: int


# Budget


class BudgetCreate(ApiModel):
    category: BudgetCategory
    name: str
    amount: float
    notes: str | None = None
    event_id: str | None = None


class BudgetUpdate(ApiModel):
    category: BudgetCategory | None = None
    name: str | None = None
    amount: float | None = None
    notes: str | None = None
    event_id: str | None = None


class BudgetRead(BudgetCreate):
    id: str
    itinerary_id: str
    order_index: int


# Expense


class ExpenseCreate(ApiModel):
    budget_id: str
    itinerary_id: str
    date: str
    amount: float
    description: str
    category: BudgetCategory
    payment_method: str | None = None
    receipt_image: str | None = None


class ExpenseUpdate(ApiModel):
    budget_id: str | None = None
    date: str | None = None
    amount: float | None = None
    description: str | None = None
    category: BudgetCategory | None = None
    payment_method: str | None = None
    receipt_image: str | None = None


class ExpenseRead(ExpenseCreate):
    id: str
    created_at: int


# Reservation


class ReservationFields(ApiModel):
    type: ReservationType
    status: ReservationStatus = ReservationStatus.notBooked
    confirmation_number: str | None = None
    provider: str | None = None
    booking_date: str | None = None
    price: float | None = None
    currency: str | None = None
    notes: str | None = None
    contact_info: str | None = None
    attachment_urls: list[str] = Field(default_factory=list)


class ReservationCreate(ReservationFields):
    """Reservation create payload including the owning event and itinerary."""

    event_id: str
    itinerary_id: str


class ReservationUpdate(ApiModel):
    type: ReservationType | None = None
    status: ReservationStatus | None = None
    confirmation_number: str | None = None
    provider: str | None = None
    booking_date: str | None = None
    price: float | None = None
    currency: str | None = None
    notes: str | None = None
    contact_info: str | None = None
    attachment_urls: list[str] | None = None


class ReservationRead(ReservationFields):
    """Booking record attached to exactly one event."""

    id: str
    event_id: str
    itinerary_id: str
    created_at: int
    updated_at: int

    @field_validator("attachment_urls", mode="before")
    @classmethod
    def decode_attachment_urls(cls, value: Any) -> Any:
        """Stored as a JSON text blob (NULL when empty); always read as a list."""
        if value is None or value == "":
            return []
        if isinstance(value, str):
            decoded = json.loads(value)
            return decoded if isinstance(decoded, list) else []
        return value


def encode_attachment_urls(urls: list[str] | None) -> str | None:
    """Encode attachment URLs for storage; an empty list is stored as NULL."""
    if not urls:
        return None
    return json.dumps(list(urls))


# Ordering


class ReorderRequest(ApiModel):
    """Desired sibling order; may be a subset of the siblings."""

    ordered_ids: list[str]
