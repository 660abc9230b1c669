"""FILETIME conversion for PR_CLIENT_SUBMIT_TIME / PR_MESSAGE_DELIVERY_TIME.

The display string uses a simplified breakdown (365-day years, 30-day
months).  Dates drift by several days per decade and the last days of a
year render as month 13; callers that need real dates should parse
the transport headers instead.
"""

from __future__ import annotations

import struct

# FILETIME value of 1970-01-01T00:00:00Z.
FILETIME_UNIX_EPOCH = 116_444_736_000_000_000
TICKS_PER_SECOND = 10_000_000

_SECONDS_PER_DAY = 86_400


def read_filetime(data: bytes) -> int | None:
    """Read the little-endian 64-bit tick count at the start of *data*."""
    if len(data) < 8:
        return None
    (ticks,) = struct.unpack_from("<Q", data)
    return ticks


def filetime_to_display(ticks: int) -> str | None:
    """Render *ticks* as ``YYYY-MM-DD HH:MM:SS (UTC)``.

    Returns ``None`` for zero and for any value before the Unix epoch.
    """
    if ticks < FILETIME_UNIX_EPOCH:
        return None

    unix_seconds = (ticks - FILETIME_UNIX_EPOCH) // TICKS_PER_SECOND
    total_days, day_seconds = divmod(unix_seconds, _SECONDS_PER_DAY)

    hours, rest = divmod(day_seconds, 3600)
    minutes, seconds = divmod(rest, 60)

    year = 1970 + total_days // 365
    day_of_year = total_days % 365
    month = day_of_year // 30 + 1
    day = day_of_year % 30 + 1

    return f"{year}-{month:02d}-{day:02d} {hours:02d}:{minutes:02d}:{seconds:02d} (UTC)"
