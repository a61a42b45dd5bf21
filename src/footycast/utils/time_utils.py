"""
Time helpers: fixtures are stored in UTC and displayed in DISPLAY_TIMEZONE.
"""

from __future__ import annotations

from typing import Tuple

import pandas as pd

from footycast.config import DISPLAY_TIMEZONE

DISPLAY_FORMAT = "%d %b %Y, %I:%M %p"


def now_local(tz: str = DISPLAY_TIMEZONE) -> pd.Timestamp:
    """Current time in the display timezone."""
    return pd.Timestamp.now(tz=tz)


def now_utc() -> pd.Timestamp:
    return pd.Timestamp.now(tz="UTC")


def today_local(tz: str = DISPLAY_TIMEZONE) -> str:
    """Today's date (YYYY-MM-DD) in the display timezone."""
    return now_local(tz).strftime("%Y-%m-%d")


def to_utc(value) -> pd.Timestamp:
    """
    Parse a provider date into a UTC timestamp.

    Naive values are assumed to already be UTC. Unparseable values give NaT.
    """
    return pd.to_datetime(value, errors="coerce", utc=True)


def format_local(value, tz: str = DISPLAY_TIMEZONE) -> str:
    """
    Format a date for display, e.g. "19 Oct 2026, 08:30 PM".

    Returns an empty string for missing/unparseable dates.
    """
    ts = to_utc(value)
    if pd.isna(ts):
        return ""
    return ts.tz_convert(tz).strftime(DISPLAY_FORMAT)


def local_day_bounds(tz: str = DISPLAY_TIMEZONE) -> Tuple[pd.Timestamp, pd.Timestamp]:
    """Start and end of today in the display timezone, as UTC timestamps."""
    start = now_local(tz).normalize()
    end = start + pd.Timedelta(days=1) - pd.Timedelta(microseconds=1)
    return start.tz_convert("UTC"), end.tz_convert("UTC")
