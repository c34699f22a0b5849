"""Timestamp utilities for surveyreport."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return current UTC time with timezone awareness.

    Resolved views are stamped with this instead of datetime.now() so
    timestamps always carry tzinfo.

    Returns:
        datetime: Current UTC time with timezone info
    """
    return datetime.now(timezone.utc)
