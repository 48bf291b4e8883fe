"""Per-invocation state threaded through the pipeline."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field


@dataclass
class RunContext:
    """``today`` is the local draw-calendar date; ``notified`` lives for one run only."""

    today: dt.date
    notified: set[tuple[dt.date, str]] = field(default_factory=set)

    def claim_notification(self, draw_date: dt.date, draw_time: str) -> bool:
        """Return True the first time a slot is claimed in this run."""

        key = (draw_date, draw_time)
        if key in self.notified:
            return False
        self.notified.add(key)
        return True
