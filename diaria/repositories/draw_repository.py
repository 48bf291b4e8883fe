"""Repository layer for draw persistence.

Writes are committed one record at a time: a failure on one record is
logged and skipped, earlier records stay committed.
"""

from __future__ import annotations

import datetime as dt
import logging
from collections.abc import Iterable, Sequence
from dataclasses import asdict, dataclass

from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy import case, desc, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from diaria.errors import ConfigurationError, PersistenceError
from diaria.models.draw import Draw
from diaria.schemas.draw import DRAW_TIMES, DrawRecordSchema

logger = logging.getLogger(__name__)

LOTTERY_TYPE = "diaria"

# Chronological position of each slot within a day.
SLOT_ORDER: dict[str, int] = {slot: i for i, slot in enumerate(DRAW_TIMES)}

_SLOT_KEY = ("draw_date", "draw_time", "lottery_type")
_DRAWS = Draw.__table__


@dataclass(frozen=True)
class DrawRecord:
    draw_date: dt.date
    draw_time: str
    main_number: int
    companion_number: int = 0
    animal_name: str | None = None
    lottery_type: str = LOTTERY_TYPE
    scraped_from: str | None = None


def _slot_rank():  # type: ignore[no-untyped-def]
    return case(SLOT_ORDER, value=Draw.draw_time, else_=len(SLOT_ORDER))


class DrawRepository:
    """Idempotent writes and simple reads for draws."""

    def __init__(self) -> None:
        self._schema = DrawRecordSchema()

    @staticmethod
    def _insert_for(session: Session):  # type: ignore[no-untyped-def]
        dialect = session.get_bind().dialect.name
        if dialect == "postgresql":
            return postgresql.insert
        if dialect == "sqlite":
            return sqlite.insert
        raise ConfigurationError(f"Upserts are not supported for the {dialect!r} dialect")

    def _validated(self, record: DrawRecord) -> dict[str, object]:
        payload = asdict(record)
        payload["draw_date"] = record.draw_date.isoformat()
        try:
            return self._schema.load(payload)
        except MarshmallowValidationError as exc:
            raise PersistenceError(f"Invalid draw record: {exc.messages}") from exc

    def _write_each(self, session: Session, records: Iterable[DrawRecord], *, overwrite: bool) -> int:
        insert = self._insert_for(session)
        affected = 0

        for record in records:
            try:
                values = self._validated(record)
                stmt = insert(_DRAWS).values(**values)
                if overwrite:
                    stmt = stmt.on_conflict_do_update(
                        index_elements=list(_SLOT_KEY),
                        set_={
                            "main_number": stmt.excluded.main_number,
                            "companion_number": stmt.excluded.companion_number,
                            # Keep a known name when the incoming source has none.
                            "animal_name": func.coalesce(stmt.excluded.animal_name, _DRAWS.c.animal_name),
                            "scraped_from": stmt.excluded.scraped_from,
                        },
                    )
                else:
                    stmt = stmt.on_conflict_do_nothing(index_elements=list(_SLOT_KEY))

                result = session.execute(stmt)
                session.commit()
            except PersistenceError as exc:
                logger.warning("Skipping %s %s: %s", record.draw_date, record.draw_time, exc)
                continue
            except SQLAlchemyError as exc:
                session.rollback()
                logger.warning("Failed to store %s %s: %s", record.draw_date, record.draw_time, exc)
                continue

            if result.rowcount > 0:
                affected += 1

        # Rows were written through Core; drop any stale ORM copies.
        session.expire_all()
        return affected

    def upsert(self, session: Session, records: Iterable[DrawRecord]) -> int:
        """Insert or update each record keyed on its slot.

        Returns the number of rows affected.
        """

        return self._write_each(session, records, overwrite=True)

    def insert_if_absent(self, session: Session, records: Iterable[DrawRecord]) -> int:
        """Insert records whose slot is not stored yet; existing slots are left untouched."""

        return self._write_each(session, records, overwrite=False)

    def count(self, session: Session) -> int:
        return int(session.scalar(select(func.count()).select_from(Draw)) or 0)

    def latest(self, session: Session, limit: int = 5) -> Sequence[Draw]:
        """Most recent draws, newest slot first."""

        stmt = select(Draw).order_by(desc(Draw.draw_date), desc(_slot_rank())).limit(int(limit))
        return list(session.scalars(stmt).all())

    def list_since(
        self,
        session: Session,
        since: dt.date | None = None,
        *,
        lottery_type: str = LOTTERY_TYPE,
    ) -> list[Draw]:
        """Draws on or after ``since`` in chronological order (date, then slot)."""

        stmt = select(Draw).where(Draw.lottery_type == lottery_type)
        if since is not None:
            stmt = stmt.where(Draw.draw_date >= since)
        stmt = stmt.order_by(Draw.draw_date.asc(), _slot_rank().asc(), Draw.id.asc())
        return list(session.scalars(stmt).all())

    def date_range(self, session: Session) -> tuple[dt.date | None, dt.date | None]:
        row = session.execute(select(func.min(Draw.draw_date), func.max(Draw.draw_date))).one()
        return row[0], row[1]
