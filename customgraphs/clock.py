"""Utility helpers for timestamps."""
from __future__ import annotations

import datetime as _dt
import time


def utc_now() -> str:
    """Return the current UTC time formatted as an ISO 8601 string."""

    return _dt.datetime.now(_dt.timezone.utc).isoformat()


def epoch_now() -> float:
    """Return the current time as seconds since the epoch."""

    return time.time()
