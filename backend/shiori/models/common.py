"""Common types and enums shared across all models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for every wire model: camelCase on the wire, snake_case in Python.

    ``from_attributes`` lets read models be built straight from ORM rows.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PackingCategory(str, Enum):
    """Packing list category."""

    clothing = "clothing"
    toiletries = "toiletries"
    electronics = "electronics"
    documents = "documents"
    medicine = "medicine"
    accessories = "accessories"
    food = "food"
    other = "other"


class BudgetCategory(str, Enum):
    """Budget and expense category."""

    transportation = "transportation"
    accommodation = "accommodation"
    food = "food"
    activities = "activities"
    shopping = "shopping"
    other = "other"


class ReservationType(str, Enum):
    """Kind of booking."""

    flight = "flight"
    hotel = "hotel"
    rentalCar = "rentalCar"
    activity = "activity"
    restaurant = "restaurant"
    train = "train"
    bus = "bus"
    ferry = "ferry"
    other = "other"


class ReservationStatus(str, Enum):
    """Booking progress."""

    notBooked = "notBooked"
    pending = "pending"
    confirmed = "confirmed"
    paid = "paid"
    cancelled = "cancelled"
    completed = "completed"


class IconGroup(str, Enum):
    """Grouping of event icons in the picker."""

    transport = "transport"
    accommodation = "accommodation"
    food = "food"
    activity = "activity"
    other = "other"


# Event icon catalog: icon key -> picker group
EVENT_ICONS: dict[str, IconGroup] = {
    "plane": IconGroup.transport,
    "train": IconGroup.transport,
    "bus": IconGroup.transport,
    "car": IconGroup.transport,
    "ship": IconGroup.transport,
    "walking": IconGroup.transport,
    "bicycle": IconGroup.transport,
    "subway": IconGroup.transport,
    "hotel": IconGroup.accommodation,
    "bed": IconGroup.accommodation,
    "home": IconGroup.accommodation,
    "building": IconGroup.accommodation,
    "restaurant": IconGroup.food,
    "coffee": IconGroup.food,
    "bar": IconGroup.food,
    "icecream": IconGroup.food,
    "shopping": IconGroup.food,
    "camera": IconGroup.activity,
    "landmark": IconGroup.activity,
    "nature": IconGroup.activity,
    "mountain": IconGroup.activity,
    "beach": IconGroup.activity,
    "pool": IconGroup.activity,
    "ticket": IconGroup.activity,
    "theater": IconGroup.activity,
    "music": IconGroup.activity,
    "movie": IconGroup.activity,
    "location": IconGroup.other,
    "info": IconGroup.other,
    "warning": IconGroup.other,
    "star": IconGroup.other,
}


def is_known_icon(icon: str) -> bool:
    """True if ``icon`` is a key of the event icon catalog."""
    return icon in EVENT_ICONS
