"""Reset period helpers.

A reset period is one calendar day in server local time. Daily quest status and
penalty quest completions are both keyed by the period's date.
"""

from __future__ import annotations

import datetime as dt

__all__ = ["next_reset_at", "now", "reset_key"]


def now() -> dt.datetime:
    """Return the current server-local time as an aware datetime."""
    return dt.datetime.now().astimezone()


def reset_key(at: dt.datetime | None = None) -> dt.date:
    """Return the reset key of the period containing ``at``.

    Args:
        at: Point in time. Defaults to now. Aware values are converted to server local time.

    Returns:
        The local calendar date of ``at``.
    """
    at = at or now()
    if at.tzinfo is not None:
        at = at.astimezone()
    return at.date()


def next_reset_at(at: dt.datetime | None = None) -> dt.datetime:
    """Return the start of the period after the one containing ``at``.

    Args:
        at: Point in time. Defaults to now.

    Returns:
        Next local midnight as an aware datetime.
    """
    tomorrow = reset_key(at) + dt.timedelta(days=1)
    return dt.datetime.combine(tomorrow, dt.time.min).astimezone()
