"""Date utilities for duka.

Pure functions for expiry-date arithmetic and parsing.
"""

import math
from datetime import date, datetime, time, timedelta

import pandas as pd

ONE_DAY = timedelta(days=1)


def as_datetime(value: date | datetime) -> datetime:
    """Promote a bare date to midnight on that day."""
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def days_until(expiry: date | datetime, now: datetime) -> int:
    """Count whole days from now until expiry, rounding up.

    Part of a day counts as a full day, so something expiring later today
    is 1 day away and something that expired an hour ago is 0 days away.

    Args:
        expiry: Expiry date or instant. A bare date means midnight.
        now: Reference instant.

    Returns:
        Ceiling of the difference in days (negative once expired).
    """
    expiry_dt = as_datetime(expiry)

    # Naive values are local time; align them with an aware counterpart
    if expiry_dt.tzinfo is not None and now.tzinfo is None:
        now = now.astimezone(expiry_dt.tzinfo)
    elif expiry_dt.tzinfo is None and now.tzinfo is not None:
        expiry_dt = expiry_dt.astimezone(now.tzinfo)

    return math.ceil((expiry_dt - now) / ONE_DAY)


def parse_expiry_date(raw: str) -> datetime | None:
    """Parse an expiry date from free-form text.

    Uses pandas.to_datetime so stock sheets exported from different tools
    (ISO, day-first, month names) all parse.

    Args:
        raw: Raw date string, e.g. "2025-03-01", "01/03/2025" or "1 Mar 2025".

    Returns:
        Parsed datetime, or None if the text is blank.

    Raises:
        ValueError: If date cannot be parsed.
    """
    raw = raw.strip()
    if not raw:
        return None

    # ISO dates are unambiguous, so skip day-first guessing for them
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        pass

    try:
        parsed = pd.to_datetime(raw, dayfirst=True)
    except (ValueError, pd.errors.ParserError) as e:
        raise ValueError(f"Could not parse date '{raw}': {e}") from e

    if pd.isna(parsed):
        return None
    return parsed.to_pydatetime()
