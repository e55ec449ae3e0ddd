"""Clock and date/time normalization helpers.

Event times are stored exactly as supplied: either ``"HH:MM"`` or epoch
milliseconds as a string. Both are normalized here when something needs to
compare or display them.
"""

import re
import time
from collections.abc import Callable
from datetime import datetime
from zoneinfo import ZoneInfo

Clock = Callable[[], int]

_HHMM = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")
_DIGITS = re.compile(r"^-?\d+(\.\d+)?$")


def now_millis() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


def _from_epoch_millis(value: float, tz: ZoneInfo) -> datetime:
    return datetime.fromtimestamp(value / 1000, tz)


def minutes_of_day(value: str | None, tz: ZoneInfo) -> int | None:
    """Minutes since local midnight for an ``HH:MM`` or epoch-millis string.

    Returns None for missing or unparseable values.
    """
    if value is None:
        return None
    text = str(value).strip()
    match = _HHMM.match(text)
    if match:
        hours, minutes = int(match.group(1)), int(match.group(2))
        if hours > 23 or minutes > 59:
            return None
        return hours * 60 + minutes
    if _DIGITS.match(text):
        try:
            moment = _from_epoch_millis(float(text), tz)
        except (OverflowError, OSError, ValueError):
            return None
        return moment.hour * 60 + moment.minute
    return None


def normalize_date(value: str | int | float | None, tz: ZoneInfo) -> str | None:
    """Normalize a calendar date for storage.

    Numbers are epoch milliseconds and become ``YYYY-MM-DD`` in ``tz``.
    Strings are kept exactly as given (blank ones become None) so a stored
    date survives an export/import round trip unchanged.

    Raises:
        ValueError: If an epoch value is out of range or not finite
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        try:
            return _from_epoch_millis(float(value), tz).date().isoformat()
        except (OverflowError, OSError, ValueError) as e:
            raise ValueError(f"epoch milliseconds out of range: {value}") from e

    if not value.strip():
        return None
    return value


def today(clock: Clock, tz: ZoneInfo) -> str:
    """Calendar day of ``clock()`` in ``tz`` as ``YYYY-MM-DD``."""
    return _from_epoch_millis(clock(), tz).date().isoformat()
