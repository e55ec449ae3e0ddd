"""Models package - re-exports for convenience."""

from backend.shiori.models.common import (
    EVENT_ICONS,
    ApiModel,
    BudgetCategory,
    IconGroup,
    PackingCategory,
    ReservationStatus,
    ReservationType,
    is_known_icon,
)
from backend.shiori.models.itinerary import (
    BudgetCreate,
    BudgetEnvelope,
    BudgetRead,
    BudgetUpdate,
    EventCreate,
    EventRead,
    EventUpdate,
    ExpenseCreate,
    ExpenseRead,
    ExpenseUpdate,
    ItineraryCreate,
    ItineraryRead,
    ItineraryUpdate,
    PackingItemCreate,
    PackingItemRead,
    PackingItemUpdate,
    ReorderRequest,
    ReservationCreate,
    ReservationRead,
    ReservationUpdate,
)
from backend.shiori.models.summary import BudgetSummary, ItinerarySummary
from backend.shiori.models.transfer import ImportResult, TransferDocument
from backend.shiori.models.travel import (
    GeoPoint,
    LocationCandidate,
    RouteSummary,
    TravelEstimate,
    TravelMode,
)

__all__ = [
    # Common
    "ApiModel",
    "PackingCategory",
    "BudgetCategory",
    "ReservationType",
    "ReservationStatus",
    "IconGroup",
    "EVENT_ICONS",
    "is_known_icon",
    # Itinerary aggregate
    "ItineraryRead",
    "ItineraryCreate",
    "ItineraryUpdate",
    "BudgetEnvelope",
    "EventRead",
    "EventCreate",
    "EventUpdate",
    "PackingItemRead",
    "PackingItemCreate",
    "PackingItemUpdate",
    "BudgetRead",
    "BudgetCreate",
    "BudgetUpdate",
    "ExpenseRead",
    "ExpenseCreate",
    "ExpenseUpdate",
    "ReservationRead",
    "ReservationCreate",
    "ReservationUpdate",
    "ReorderRequest",
    # Summary
    "ItinerarySummary",
    "BudgetSummary",
    # Transfer
    "TransferDocument",
    "ImportResult",
    # Travel
    "TravelMode",
    "GeoPoint",
    "RouteSummary",
    "TravelEstimate",
    "LocationCandidate",
]
