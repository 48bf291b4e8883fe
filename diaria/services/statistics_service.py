"""Frequency, recency and hot/cold classification over trailing windows."""

from __future__ import annotations

import datetime as dt
import logging
import statistics
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from diaria.errors import ConfigurationError
from diaria.models.number_stat import NumberStat
from diaria.repositories.draw_repository import DrawRepository
from diaria.repositories.stat_repository import StatRepository
from diaria.schemas.draw import DRAW_TIMES

logger = logging.getLogger(__name__)

HOT_FLOOR = 5
MIN_SPREAD_NUMBERS = 3


@dataclass(frozen=True)
class NumberSummary:
    number: int
    frequency: int
    last_appearance: dt.date
    gap_days: int
    is_hot: bool
    is_cold: bool


def hot_threshold(frequencies: Sequence[int]) -> float:
    """mean + sample stddev of the per-number frequencies.

    Falls back to ``HOT_FLOOR`` below ``MIN_SPREAD_NUMBERS`` numbers. With two
    numbers the larger one can never reach mean + stddev unless they tie, so
    lowering it would turn it hot; from three numbers on, lowering one
    number's frequency never does.
    """

    if len(frequencies) < MIN_SPREAD_NUMBERS:
        return float(HOT_FLOOR)
    return statistics.mean(frequencies) + statistics.stdev(frequencies)


def cold_threshold(period_days: int) -> int:
    return int(period_days) // 3


def summarize_window(
    observations: Iterable[tuple[dt.date, int]],
    *,
    period_days: int,
    today: dt.date,
) -> list[NumberSummary]:
    """Summarize (draw_date, number) observations within the trailing window."""

    since = today - dt.timedelta(days=int(period_days))
    frequency: Counter[int] = Counter()
    last_seen: dict[int, dt.date] = {}

    for draw_date, number in observations:
        if draw_date < since:
            continue
        frequency[number] += 1
        if number not in last_seen or draw_date > last_seen[number]:
            last_seen[number] = draw_date

    hot = hot_threshold(list(frequency.values()))
    cold = cold_threshold(period_days)

    out: list[NumberSummary] = []
    for number in sorted(frequency):
        gap = (today - last_seen[number]).days
        out.append(
            NumberSummary(
                number=number,
                frequency=frequency[number],
                last_appearance=last_seen[number],
                gap_days=gap,
                is_hot=frequency[number] >= hot,
                is_cold=gap >= cold,
            )
        )
    return out


class StatisticsService:
    """Rebuild the stats table for every (period, slot-or-combined) scope."""

    def __init__(self, draws: DrawRepository | None = None, stats: StatRepository | None = None) -> None:
        self._draws = draws or DrawRepository()
        self._stats = stats or StatRepository()

    def recompute(self, session: Session, periods: Sequence[int], *, today: dt.date) -> int:
        if not periods or any(int(p) <= 0 for p in periods):
            raise ConfigurationError(f"Invalid statistics periods: {list(periods)!r}")

        draws = self._draws.list_since(session, today - dt.timedelta(days=max(int(p) for p in periods)))

        rows: list[NumberStat] = []
        for period in periods:
            for draw_time in (*DRAW_TIMES, None):
                observations = [
                    (d.draw_date, int(d.main_number))
                    for d in draws
                    if draw_time is None or d.draw_time == draw_time
                ]
                for s in summarize_window(observations, period_days=int(period), today=today):
                    rows.append(
                        NumberStat(
                            number=s.number,
                            draw_time=draw_time,
                            period_days=int(period),
                            frequency=s.frequency,
                            last_appearance=s.last_appearance,
                            gap_days=s.gap_days,
                            is_hot=s.is_hot,
                            is_cold=s.is_cold,
                        )
                    )

        try:
            written = self._stats.replace_all(session, rows)
            session.commit()
        except SQLAlchemyError:
            session.rollback()
            raise

        logger.info("Statistics updated: %s rows over periods %s", written, list(periods))
        return written
