"""Identifier generation.

IDs are opaque strings; callers must not parse them. The manager takes any
zero-argument callable so tests can supply deterministic sequences.
"""

import uuid
from collections.abc import Callable

IdFactory = Callable[[], str]


def new_id() -> str:
    """Return a fresh unique identifier."""
    return str(uuid.uuid4())
