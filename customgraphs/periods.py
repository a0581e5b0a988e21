"""Standard lookback periods offered when displaying a custom graph."""
from __future__ import annotations

from typing import Callable, Dict, Optional

SECONDS_PER_HOUR = 3600

STANDARD_PERIOD_HOURS = (1, 2, 3, 6, 12, 24, 48, 360, 720, 4320)


def _identity(text: str) -> str:
    return text


def list_standard_periods(translate: Optional[Callable[[str], str]] = None) -> Dict[int, str]:
    """Return the selectable periods as ``{hours: label}`` in ascending order.

    ``translate`` localizes the label text; multi-hour entries only translate
    the unit word.
    """

    _ = translate or _identity
    return {
        1: _("1 hour"),
        2: "2 " + _("hours"),
        3: "3 " + _("hours"),
        6: "6 " + _("hours"),
        12: "12 " + _("hours"),
        24: _("1 day"),
        48: _("2 days"),
        360: _("1 week"),
        720: _("1 month"),
        4320: _("6 months"),
    }


def period_to_seconds(hours: int) -> int:
    """Convert a period entry to the seconds value used for rendering."""

    if hours not in STANDARD_PERIOD_HOURS:
        raise ValueError(f"Unknown period: {hours}")
    return hours * SECONDS_PER_HOUR
