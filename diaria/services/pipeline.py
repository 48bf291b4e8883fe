"""Orchestrates one batch run: scrape -> persist -> notify -> statistics -> Markov."""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from diaria.repositories.draw_repository import DrawRecord, DrawRepository
from diaria.services.api_scraper import ApiScraper
from diaria.services.html_scraper import HtmlScraper
from diaria.services.markov_service import MarkovService
from diaria.services.notifier import Notifier
from diaria.services.run_context import RunContext
from diaria.services.sample_service import generate_sample_records
from diaria.services.statistics_service import StatisticsService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecomputeReport:
    stat_rows: int = 0
    slot_edges: int = 0
    combined_edges: int = 0


@dataclass(frozen=True)
class ScrapeReport:
    html_records: int
    api_records: int
    stored: int
    notified: int
    recompute: RecomputeReport


class Pipeline:
    """Sequential batch job. Only failing to reach the database aborts a run."""

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        html_scraper: HtmlScraper,
        api_scraper: ApiScraper,
        notifier: Notifier,
        periods: Sequence[int] = (30, 60, 90, 180),
        draws: DrawRepository | None = None,
        statistics: StatisticsService | None = None,
        markov: MarkovService | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._html = html_scraper
        self._api = api_scraper
        self._notifier = notifier
        self._periods = tuple(periods)
        self._draws = draws or DrawRepository()
        self._statistics = statistics or StatisticsService(draws=self._draws)
        self._markov = markov or MarkovService(draws=self._draws)

    def scrape(self, run: RunContext) -> ScrapeReport:
        html_records = self._html.scrape()
        api_records = self._api.scrape()

        # API rows go last so they win on conflicting slots and contribute sign names.
        records = [*html_records, *api_records]
        with self._session_factory() as session:
            stored = self._draws.upsert(session, records)
        logger.info("Saved/updated %s of %s scraped records", stored, len(records))

        notified = self._notify_today(records, run)
        report = self.recompute(run)

        return ScrapeReport(
            html_records=len(html_records),
            api_records=len(api_records),
            stored=stored,
            notified=notified,
            recompute=report,
        )

    def _notify_today(self, records: Sequence[DrawRecord], run: RunContext) -> int:
        # Same precedence as the upsert: the last record for a slot is what got stored.
        todays = {(r.draw_date, r.draw_time): r for r in records if r.draw_date == run.today}

        notified = 0
        for r in todays.values():
            if self._notifier.notify(r.draw_date, r.draw_time, r.main_number, run=run):
                notified += 1
        return notified

    def recompute(self, run: RunContext) -> RecomputeReport:
        stat_rows = slot_edges = combined_edges = 0

        with self._session_factory() as session:
            try:
                stat_rows = self._statistics.recompute(session, self._periods, today=run.today)
            except SQLAlchemyError:
                logger.exception("Statistics update failed")

            try:
                slot_edges, combined_edges = self._markov.recompute(session)
            except SQLAlchemyError:
                logger.exception("Markov update failed")

        return RecomputeReport(stat_rows=stat_rows, slot_edges=slot_edges, combined_edges=combined_edges)

    def sample(self, run: RunContext, days: int, *, rng: random.Random | None = None) -> tuple[int, RecomputeReport]:
        """Insert synthetic history (existing slots untouched), then recompute."""

        records = generate_sample_records(days, today=run.today, rng=rng, progress=True)
        with self._session_factory() as session:
            inserted = self._draws.insert_if_absent(session, records)
        logger.info("Sample data: inserted %s of %s generated draws", inserted, len(records))
        return inserted, self.recompute(run)
