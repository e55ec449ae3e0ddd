"""SQLAlchemy ORM models for the itinerary aggregate.

Cascade and nullify rules live in the foreign keys themselves so every
backend enforces them the same way:

- itinerary delete cascades to events, packing items, budgets, expenses
  and reservations
- event delete cascades to its reservation and sets ``budgets.event_id``
  to NULL
- budget delete cascades to its expenses
"""

from sqlalchemy import (
    BigInteger,
    Boolean,
    Float,
    ForeignKey,
    Index,
    Integer,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class Itinerary(Base):
    """Itinerary table - root of ownership for one trip."""

    __tablename__ = "itineraries"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    # Epoch milliseconds, immutable after insert
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    total_budget: Mapped[float] = mapped_column(
        "totalBudget", Float, nullable=False, default=0, server_default=text("0")
    )
    currency: Mapped[str] = mapped_column(
        Text, nullable=False, default="JPY", server_default=text("'JPY'")
    )


class Event(Base):
    """Event table - one dated/timed activity within an itinerary."""

    __tablename__ = "events"
    __table_args__ = (Index("idx_events_itinerary_order", "itinerary_id", "order_index"),)

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    itinerary_id: Mapped[str] = mapped_column(
        Text, ForeignKey("itineraries.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str | None] = mapped_column(Text, nullable=True)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    event_date: Mapped[str | None] = mapped_column(Text, nullable=True)
    # "HH:MM" or epoch millis as text; both are accepted on read
    start_time: Mapped[str | None] = mapped_column(Text, nullable=True)
    end_time: Mapped[str | None] = mapped_column(Text, nullable=True)
    icon: Mapped[str | None] = mapped_column(Text, nullable=True)
    link: Mapped[str | None] = mapped_column(Text, nullable=True)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)


class PackingItem(Base):
    """Packing item table - checklist entries for the trip."""

    __tablename__ = "packing_items"
    __table_args__ = (Index("idx_packing_items_itinerary_order", "itinerary_id", "order_index"),)

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    itinerary_id: Mapped[str] = mapped_column(
        Text, ForeignKey("itineraries.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(Text, nullable=False)
    is_packed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_essential: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)


class Budget(Base):
    """Budget table - planned spending envelope, optionally tied to an event."""

    __tablename__ = "budgets"
    __table_args__ = (Index("idx_budgets_itinerary_order", "itinerary_id", "order_index"),)

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    itinerary_id: Mapped[str] = mapped_column(
        Text, ForeignKey("itineraries.id", ondelete="CASCADE"), nullable=False
    )
    category: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    event_id: Mapped[str | None] = mapped_column(
        Text, ForeignKey("events.id", ondelete="SET NULL"), nullable=True
    )
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)


class Expense(Base):
    """Expense table - actual spend recorded against a budget."""

    __tablename__ = "expenses"
    __table_args__ = (
        Index("idx_expenses_itinerary", "itinerary_id"),
        Index("idx_expenses_budget", "budget_id"),
    )

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    budget_id: Mapped[str] = mapped_column(
        Text, ForeignKey("budgets.id", ondelete="CASCADE"), nullable=False
    )
    itinerary_id: Mapped[str] = mapped_column(
        Text, ForeignKey("itineraries.id", ondelete="CASCADE"), nullable=False
    )
    date: Mapped[str] = mapped_column(Text, nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(Text, nullable=False)
    payment_method: Mapped[str | None] = mapped_column(Text, nullable=True)
    receipt_image: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False)


class Reservation(Base):
    """Reservation table - at most one booking record per event."""

    __tablename__ = "reservations"
    __table_args__ = (
        UniqueConstraint("event_id", name="uq_reservations_event"),
        Index("idx_reservations_itinerary", "itinerary_id"),
    )

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    event_id: Mapped[str] = mapped_column(
        Text, ForeignKey("events.id", ondelete="CASCADE"), nullable=False
    )
    itinerary_id: Mapped[str] = mapped_column(
        Text, ForeignKey("itineraries.id", ondelete="CASCADE"), nullable=False
    )
    type: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(Text, nullable=False)
    confirmation_number: Mapped[str | None] = mapped_column(Text, nullable=True)
    provider: Mapped[str | None] = mapped_column(Text, nullable=True)
    booking_date: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[float | None] = mapped_column(Float, nullable=True)
    currency: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    contact_info: Mapped[str | None] = mapped_column(Text, nullable=True)
    # JSON-encoded list of strings; NULL when there are no attachments
    attachment_urls: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    updated_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
