"""
endorser/core/time.py

THE ONLY CLOCK CONVERSION IN THE ENDORSER.

The authority never reads the wall clock on its own. Every operation
takes `now` from the caller and converts it here to whole unix seconds
(floored), so decisions are reproducible for a given input.
"""

import math
from datetime import datetime, timezone
from typing import Union

Now = Union[datetime, int, float]


def unix_seconds(now: Now) -> int:
    """
    Floor `now` to whole unix seconds.

    Accepts an aware datetime, a naive datetime (taken as UTC), or a
    number of unix seconds.

    Raises TypeError for any other type and ValueError for NaN or
    infinite seconds.
    """
    if isinstance(now, datetime):
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return math.floor(now.timestamp())
    if isinstance(now, bool) or not isinstance(now, (int, float)):
        raise TypeError(f"now must be a datetime or unix seconds, got {type(now).__name__}")
    if isinstance(now, float) and not math.isfinite(now):
        raise ValueError(f"now must be a finite number of unix seconds, got {now!r}")
    return math.floor(now)


def utc_now() -> datetime:
    """Current UTC time. For callers at the process edge (CLI), not the core."""
    return datetime.now(timezone.utc)
