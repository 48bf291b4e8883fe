"""Repository layer for Markov transition edges."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy import delete, desc, select
from sqlalchemy.orm import Session

from diaria.models.markov_edge import MarkovEdge


class MarkovRepository:
    """Time-specific rows and combined (NULL draw_time) rows are replaced independently."""

    def replace_scope(self, session: Session, edges: Iterable[MarkovEdge], *, time_specific: bool) -> int:
        """Delete the rows of one scope and insert ``edges``. Caller commits."""

        if time_specific:
            session.execute(delete(MarkovEdge).where(MarkovEdge.draw_time.is_not(None)))
        else:
            session.execute(delete(MarkovEdge).where(MarkovEdge.draw_time.is_(None)))

        items = list(edges)
        session.add_all(items)
        session.flush()
        return len(items)

    def outgoing(self, session: Session, from_number: int, draw_time: str | None = None) -> Sequence[MarkovEdge]:
        stmt = select(MarkovEdge).where(MarkovEdge.from_number == int(from_number))
        if draw_time is None:
            stmt = stmt.where(MarkovEdge.draw_time.is_(None))
        else:
            stmt = stmt.where(MarkovEdge.draw_time == draw_time)
        stmt = stmt.order_by(desc(MarkovEdge.probability), MarkovEdge.to_number.asc())
        return list(session.scalars(stmt).all())
