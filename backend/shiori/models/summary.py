"""Aggregate read model returned by the itinerary summary."""

from backend.shiori.models.common import ApiModel
from backend.shiori.models.itinerary import (
    BudgetRead,
    EventRead,
    ItineraryRead,
    PackingItemRead,
)


class BudgetSummary(BudgetRead):
    """Budget line with its spent total (sum of linked expenses)."""

    spent: float = 0


class ItinerarySummary(ApiModel):
    """Itinerary with ordered children and derived spending totals.

    Derived values are computed on every read and never stored.
    """

    itinerary: ItineraryRead
    events: list[EventRead]
    packing_items: list[PackingItemRead]
    budgets: list[BudgetSummary]
    total_spent: float
    remaining_budget: float
