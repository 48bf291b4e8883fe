"""Materialized per-number statistics (fully recomputed each run)."""

from __future__ import annotations

import datetime as dt

from sqlalchemy import Boolean, Date, DateTime, Integer, SmallInteger, String, func
from sqlalchemy.orm import Mapped, mapped_column

from diaria.models.base import Base


class NumberStat(Base):
    """Frequency / recency of one number within one scope.

    ``draw_time`` is NULL for the combined (all slots) scope.
    """

    __tablename__ = "lottery_stats"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    number: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    draw_time: Mapped[str | None] = mapped_column(String(8), nullable=True)
    period_days: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    frequency: Mapped[int] = mapped_column(Integer, nullable=False)
    last_appearance: Mapped[dt.date] = mapped_column(Date, nullable=False)
    gap_days: Mapped[int] = mapped_column(Integer, nullable=False)
    is_hot: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_cold: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    calculated_at: Mapped[dt.datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())
