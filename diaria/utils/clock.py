"""Draw-calendar dates."""

from __future__ import annotations

import datetime as dt
from zoneinfo import ZoneInfo


def local_today(tz_name: str) -> dt.date:
    """Today's date in the lottery's timezone (not the host's)."""

    return dt.datetime.now(ZoneInfo(tz_name)).date()
