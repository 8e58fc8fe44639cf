"""
Clock and timestamp helpers.

The reconciliation engine never reads the wall clock itself; callers pass a
zero-argument ``clock`` returning an aware UTC ``datetime``. Production code
uses ``utcnow``; tests use ``fixed_clock(...)`` so summaries are
reproducible byte-for-byte.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

ISO_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def utcnow() -> datetime:
    """Return the current UTC datetime with timezone info.

    Prefer this over ``datetime.utcnow()`` (which returns naive datetimes).
    """
    return datetime.now(tz=timezone.utc)


def fixed_clock(moment: datetime) -> Callable[[], datetime]:
    """Return a clock that always reports ``moment``.

    Naive datetimes are taken to be UTC.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)

    def _clock() -> datetime:
        return moment

    return _clock


def format_utc(moment: datetime) -> str:
    """Format ``moment`` as ``YYYY-MM-DDTHH:MM:SSZ`` in UTC.

    Naive datetimes are taken to be UTC; aware ones are converted.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime(ISO_FORMAT)
