"""Transfer document: the self-contained JSON form of one itinerary.

Export always produces version 2. Import is lenient: every section other
than ``itinerary`` and ``events`` may be missing or null, and most fields
may be absent (defaults are filled in by the codec).
"""

from typing import Any

from pydantic import Field, field_validator

from backend.shiori.models.common import ApiModel

TRANSFER_VERSION = 2

# Dates may arrive as ISO strings or epoch millis
DateLike = str | int | float


class TransferItinerary(ApiModel):
    id: str | None = None
    title: str
    created_at: int | None = None
    total_budget: float | None = None
    currency: str | None = None


class TransferEvent(ApiModel):
    id: str | None = None
    itinerary_id: str | None = None
    title: str
    description: str | None = None
    location: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    event_date: DateLike | None = None
    start_time: str | None = None
    end_time: str | None = None
    icon: str | None = None
    link: str | None = None
    order_index: int | None = None

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def stringify_time(cls, value: Any) -> Any:
        """Epoch-millis times may arrive as numbers; they are stored as text."""
        if isinstance(value, bool):
            return value
        if isinstance(value, int | float):
            return str(int(value))
        return value


class TransferBudget(ApiModel):
    id: str | None = None
    category: str | None = None
    name: str | None = None
    amount: float | None = None
    notes: str | None = None
    event_id: str | None = None
    order_index: int | None = None


class TransferExpense(ApiModel):
    id: str | None = None
    budget_id: str | None = None
    itinerary_id: str | None = None
    description: str | None = None
    amount: float | None = None
    category: str | None = None
    expense_date: DateLike | None = None
    date: DateLike | None = None
    payment_method: str | None = None


class TransferPackingItem(ApiModel):
    id: str | None = None
    name: str | None = None
    category: str | None = None
    quantity: int | None = None
    # Older documents use "checked"; it wins when both spellings are present
    checked: bool | None = None
    is_packed: bool | None = None
    notes: str | None = None
    is_essential: bool | None = None
    order_index: int | None = None


class TransferReservation(ApiModel):
    event_id: str | None = None
    type: str | None = None
    status: str | None = None
    confirmation_number: str | None = None
    provider: str | None = None
    booking_date: str | None = None
    price: float | None = None
    currency: str | None = None
    notes: str | None = None
    contact_info: str | None = None
    attachment_urls: list[str] | None = None


class TransferDocument(ApiModel):
    """Full itinerary graph for export/import."""

    version: int = TRANSFER_VERSION
    itinerary: TransferItinerary
    events: list[TransferEvent]
    budgets: list[TransferBudget] = Field(default_factory=list)
    expenses: list[TransferExpense] = Field(default_factory=list)
    packing_items: list[TransferPackingItem] = Field(default_factory=list)
    reservations: list[TransferReservation] = Field(default_factory=list)

    @field_validator("budgets", "expenses", "packing_items", "reservations", mode="before")
    @classmethod
    def null_section_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class ImportResult(ApiModel):
    """Outcome of an import: the new itinerary ID plus any skipped-record warnings."""

    itinerary_id: str
    warnings: list[str] = Field(default_factory=list)
