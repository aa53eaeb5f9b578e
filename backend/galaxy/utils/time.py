"""Timezone helpers – provide a single UTC-aware *now()* function.

Wire timestamps are ISO-8601 in UTC with millisecond precision and a ``Z``
suffix so every galaxy member, whatever it is written in, parses them the
same way.
"""

from datetime import datetime
from datetime import timezone


def utc_now() -> datetime:  # noqa: D401 – simple utility
    """Return *aware* current time in UTC."""

    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """Return the current UTC time as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""

    return utc_now().isoformat(timespec="milliseconds").replace("+00:00", "Z")


def epoch_millis() -> int:
    return int(utc_now().timestamp() * 1000)


__all__ = ["utc_now", "utc_now_iso", "epoch_millis"]
