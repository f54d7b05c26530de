"""Time-of-day filtering for trips."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Union

import pandas as pd

NO_FILTER = -1
WINDOW_MINUTES = 60
MINUTES_PER_DAY = 1440


def validate_time_filter(value) -> int:
    """Return ``value`` as an int, or raise if it is neither NO_FILTER nor a minute of day."""
    if isinstance(value, bool):
        raise ValueError(f"Time filter must be an integer, got {value!r}")
    try:
        minute = int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Time filter must be an integer, got {value!r}") from exc
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"Time filter must be a whole minute, got {value!r}")
    if minute != NO_FILTER and not 0 <= minute < MINUTES_PER_DAY:
        raise ValueError(f"Time filter must be {NO_FILTER} or within 0-{MINUTES_PER_DAY - 1}, got {minute}")
    return minute


def minutes_since_midnight(ts: Union[datetime, pd.Series]):
    """Minute of day (0-1439) for a timestamp or a Series of timestamps."""
    if isinstance(ts, pd.Series):
        return ts.dt.hour * 60 + ts.dt.minute
    return ts.hour * 60 + ts.minute


def in_time_window(started_minutes: int, ended_minutes: int, time_filter: int) -> bool:
    """True if a trip started or ended within WINDOW_MINUTES of ``time_filter``.

    The distance is a plain difference of minutes of day and does not wrap
    around midnight: 00:30 and 23:50 are 1400 minutes apart.
    """
    if time_filter == NO_FILTER:
        return True
    return (
        abs(started_minutes - time_filter) <= WINDOW_MINUTES
        or abs(ended_minutes - time_filter) <= WINDOW_MINUTES
    )


def add_minute_columns(trips: pd.DataFrame) -> pd.DataFrame:
    """Return a copy of ``trips`` with ``started_minutes``/``ended_minutes`` precomputed."""
    trips = trips.copy()
    trips["started_minutes"] = minutes_since_midnight(trips["started_at"])
    trips["ended_minutes"] = minutes_since_midnight(trips["ended_at"])
    return trips


def filter_trips_by_time(trips: pd.DataFrame, time_filter: int) -> pd.DataFrame:
    """Trips matching the window around ``time_filter``; all trips for NO_FILTER."""
    if time_filter == NO_FILTER:
        return trips

    if "started_minutes" in trips.columns:
        started = trips["started_minutes"]
    else:
        started = minutes_since_midnight(trips["started_at"])
    if "ended_minutes" in trips.columns:
        ended = trips["ended_minutes"]
    else:
        ended = minutes_since_midnight(trips["ended_at"])

    mask = ((started - time_filter).abs() <= WINDOW_MINUTES) | (
        (ended - time_filter).abs() <= WINDOW_MINUTES
    )
    return trips[mask]


def format_time(minutes: int) -> str:
    """Format a minute of day as ``H:MM AM``."""
    stamp = datetime(1900, 1, 1) + timedelta(minutes=minutes)
    return stamp.strftime("%I:%M %p").lstrip("0")


def time_label(time_filter: int) -> str:
    if time_filter == NO_FILTER:
        return "(any time)"
    return format_time(time_filter)
