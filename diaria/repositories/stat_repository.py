"""Repository layer for the materialized number statistics."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy import delete, desc, select
from sqlalchemy.orm import Session

from diaria.models.number_stat import NumberStat


class StatRepository:
    """The stats table is replaced wholesale on every recomputation."""

    def replace_all(self, session: Session, rows: Iterable[NumberStat]) -> int:
        """Clear the table and insert ``rows``. Caller commits."""

        session.execute(delete(NumberStat))
        items = list(rows)
        session.add_all(items)
        session.flush()
        return len(items)

    def list_scope(self, session: Session, period_days: int, draw_time: str | None = None) -> Sequence[NumberStat]:
        stmt = select(NumberStat).where(NumberStat.period_days == int(period_days))
        if draw_time is None:
            stmt = stmt.where(NumberStat.draw_time.is_(None))
        else:
            stmt = stmt.where(NumberStat.draw_time == draw_time)
        stmt = stmt.order_by(desc(NumberStat.frequency), NumberStat.number.asc())
        return list(session.scalars(stmt).all())

    def hot_numbers(
        self,
        session: Session,
        period_days: int = 30,
        draw_time: str | None = None,
        limit: int = 10,
    ) -> Sequence[NumberStat]:
        return [s for s in self.list_scope(session, period_days, draw_time) if s.is_hot][:limit]
