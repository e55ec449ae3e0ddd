"""Typed failures raised by the planner core.

Every operation failure carries a classification (``kind``) and a
human-readable message. The HTTP layer maps kinds to status codes; the core
never deals with transport concerns.
"""


class PlannerError(Exception):
    """Base class for all classified planner failures."""

    kind = "planner_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(PlannerError):
    """Referenced entity or parent does not exist."""

    kind = "not_found"


class InvalidInputError(PlannerError):
    """Missing required field, negative amount, empty title, and similar."""

    kind = "invalid_input"


class ConflictError(PlannerError):
    """Write would violate a uniqueness rule (e.g. second reservation for an event)."""

    kind = "conflict"


class InvalidFormatError(PlannerError):
    """Transfer document is missing required sections or is malformed."""

    kind = "invalid_format"


class GeocodingError(PlannerError):
    """Address could not be resolved to coordinates."""

    kind = "geocoding_error"


class RoutingError(PlannerError):
    """Routing provider found no route or failed."""

    kind = "routing_error"


class StorageError(PlannerError):
    """Persistence-layer failure, including constraint violations."""

    kind = "storage_error"
