"""Lottery draw model.

One row per (draw_date, draw_time, lottery_type) slot.
"""

from __future__ import annotations

import datetime as dt

from sqlalchemy import CheckConstraint, Date, DateTime, Integer, SmallInteger, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from diaria.models.base import Base


class Draw(Base):
    """A single draw result for one time slot of one day."""

    __tablename__ = "lottery_draws"
    __table_args__ = (
        UniqueConstraint("draw_date", "draw_time", "lottery_type", name="uq_lottery_draws_slot"),
        CheckConstraint("main_number BETWEEN 0 AND 99", name="main_number_range"),
        CheckConstraint("companion_number BETWEEN 0 AND 9", name="companion_number_range"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    draw_date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    draw_time: Mapped[str] = mapped_column(String(8), nullable=False)
    lottery_type: Mapped[str] = mapped_column(String(32), nullable=False, default="diaria")

    main_number: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    companion_number: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=0)
    animal_name: Mapped[str | None] = mapped_column(String(64), nullable=True)

    scraped_from: Mapped[str | None] = mapped_column(String(32), nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())
