"""First-order transition counts between consecutive draws."""

from __future__ import annotations

import datetime as dt

from sqlalchemy import DateTime, Float, Integer, SmallInteger, String, func
from sqlalchemy.orm import Mapped, mapped_column

from diaria.models.base import Base


class MarkovEdge(Base):
    __tablename__ = "lottery_markov"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    from_number: Mapped[int] = mapped_column(SmallInteger, nullable=False, index=True)
    to_number: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    draw_time: Mapped[str | None] = mapped_column(String(8), nullable=True)  # NULL: all slots

    transitions: Mapped[int] = mapped_column(Integer, nullable=False)
    probability: Mapped[float] = mapped_column(Float, nullable=False)

    updated_at: Mapped[dt.datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())
