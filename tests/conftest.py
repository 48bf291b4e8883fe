from __future__ import annotations

import pytest

from diaria.db import create_app_engine, create_session_factory
from diaria.repositories.draw_repository import DrawRecord, DrawRepository


@pytest.fixture
def session_factory():
    engine = create_app_engine("sqlite://")
    factory = create_session_factory(engine)
    yield factory
    engine.dispose()


@pytest.fixture
def session(session_factory):
    with session_factory() as s:
        yield s


@pytest.fixture
def store_draws(session):
    """Insert ``(date, slot, number)`` triples."""

    repo = DrawRepository()

    def _store(rows):
        records = [DrawRecord(draw_date=d, draw_time=t, main_number=n) for d, t, n in rows]
        return repo.upsert(session, records)

    return _store
