"""Display formatting for travel duration and distance."""


def format_duration(seconds: float, locale: str = "ja") -> str:
    """Hours and minutes, e.g. ``1時間 5分`` / ``45分`` (ja) or ``1 h 5 min`` (en).

    Minutes are truncated, not rounded; a zero minute part is omitted when
    there is at least one hour.
    """
    total = max(0, int(seconds))
    hours = total // 3600
    minutes = (total % 3600) // 60

    if locale == "ja":
        if hours > 0:
            return f"{hours}時間" + (f" {minutes}分" if minutes > 0 else "")
        return f"{minutes}分"

    if hours > 0:
        return f"{hours} h" + (f" {minutes} min" if minutes > 0 else "")
    return f"{minutes} min"


def format_distance(meters: float) -> str:
    """``12.3km`` at 1000 m or more (one decimal), otherwise whole metres (``850m``)."""
    if meters >= 1000:
        return f"{meters / 1000:.1f}km"
    return f"{round(meters)}m"
