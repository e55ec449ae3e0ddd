"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-19

Creates the itinerary aggregate tables:
- itineraries
- events, packing_items, budgets
- expenses, reservations
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create all tables."""
    # itineraries table
    op.create_table(
        "itineraries",
        sa.Column("id", sa.Text(), primary_key=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("created_at", sa.BigInteger(), nullable=False),
        sa.Column("totalBudget", sa.Float(), server_default=sa.text("0"), nullable=False),
        sa.Column("currency", sa.Text(), server_default=sa.text("'JPY'"), nullable=False),
    )

    # events table
    op.create_table(
        "events",
        sa.Column("id", sa.Text(), primary_key=True),
        sa.Column("itinerary_id", sa.Text(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("location", sa.Text(), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("event_date", sa.Text(), nullable=True),
        sa.Column("start_time", sa.Text(), nullable=True),
        sa.Column("end_time", sa.Text(), nullable=True),
        sa.Column("icon", sa.Text(), nullable=True),
        sa.Column("link", sa.Text(), nullable=True),
        sa.Column("order_index", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["itinerary_id"], ["itineraries.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_events_itinerary_order", "events", ["itinerary_id", "order_index"])

    # packing_items table
    op.create_table(
        "packing_items",
        sa.Column("id", sa.Text(), primary_key=True),
        sa.Column("itinerary_id", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("category", sa.Text(), nullable=False),
        sa.Column("is_packed", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("quantity", sa.Integer(), server_default=sa.text("1"), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("is_essential", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("order_index", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["itinerary_id"], ["itineraries.id"], ondelete="CASCADE"),
    )
    op.create_index(
        "idx_packing_items_itinerary_order", "packing_items", ["itinerary_id", "order_index"]
    )

    # budgets table
    op.create_table(
        "budgets",
        sa.Column("id", sa.Text(), primary_key=True),
        sa.Column("itinerary_id", sa.Text(), nullable=False),
        sa.Column("category", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("event_id", sa.Text(), nullable=True),
        sa.Column("order_index", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["itinerary_id"], ["itineraries.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["event_id"], ["events.id"], ondelete="SET NULL"),
    )
    op.create_index("idx_budgets_itinerary_order", "budgets", ["itinerary_id", "order_index"])

    # expenses table
    op.create_table(
        "expenses",
        sa.Column("id", sa.Text(), primary_key=True),
        sa.Column("budget_id", sa.Text(), nullable=False),
        sa.Column("itinerary_id", sa.Text(), nullable=False),
        sa.Column("date", sa.Text(), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.Text(), nullable=False),
        sa.Column("payment_method", sa.Text(), nullable=True),
        sa.Column("receipt_image", sa.Text(), nullable=True),
        sa.Column("created_at", sa.BigInteger(), nullable=False),
        sa.ForeignKeyConstraint(["budget_id"], ["budgets.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["itinerary_id"], ["itineraries.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_expenses_itinerary", "expenses", ["itinerary_id"])
    op.create_index("idx_expenses_budget", "expenses", ["budget_id"])

    # reservations table
    op.create_table(
        "reservations",
        sa.Column("id", sa.Text(), primary_key=True),
        sa.Column("event_id", sa.Text(), nullable=False),
        sa.Column("itinerary_id", sa.Text(), nullable=False),
        sa.Column("type", sa.Text(), nullable=False),
        sa.Column("status", sa.Text(), nullable=False),
        sa.Column("confirmation_number", sa.Text(), nullable=True),
        sa.Column("provider", sa.Text(), nullable=True),
        sa.Column("booking_date", sa.Text(), nullable=True),
        sa.Column("price", sa.Float(), nullable=True),
        sa.Column("currency", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("contact_info", sa.Text(), nullable=True),
        sa.Column("attachment_urls", sa.Text(), nullable=True),
        sa.Column("created_at", sa.BigInteger(), nullable=False),
        sa.Column("updated_at", sa.BigInteger(), nullable=False),
        sa.ForeignKeyConstraint(["event_id"], ["events.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["itinerary_id"], ["itineraries.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("event_id", name="uq_reservations_event"),
    )
    op.create_index("idx_reservations_itinerary", "reservations", ["itinerary_id"])


def downgrade() -> None:
    """Drop all tables (children first)."""
    op.drop_index("idx_reservations_itinerary", table_name="reservations")
    op.drop_table("reservations")
    op.drop_index("idx_expenses_budget", table_name="expenses")
    op.drop_index("idx_expenses_itinerary", table_name="expenses")
    op.drop_table("expenses")
    op.drop_index("idx_budgets_itinerary_order", table_name="budgets")
    op.drop_table("budgets")
    op.drop_index("idx_packing_items_itinerary_order", table_name="packing_items")
    op.drop_table("packing_items")
    op.drop_index("idx_events_itinerary_order", table_name="events")
    op.drop_table("events")
    op.drop_table("itineraries")
