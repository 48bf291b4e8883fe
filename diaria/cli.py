"""Command line entry point for the ingestion/analysis batch job.

Usage:
  diaria scrape          Scrape both sources, persist, notify, recompute
  diaria stats           Recompute statistics and the Markov matrix
  diaria status          Show row count, latest results and hot numbers
  diaria sample [days]   Generate synthetic history (default 180 days)
"""

from __future__ import annotations

import argparse
import logging
import pathlib
from collections.abc import Callable, Sequence

from dotenv import load_dotenv
from sqlalchemy.orm import Session, sessionmaker

from diaria.config import SITE_GAMES, BaseConfig, get_config
from diaria.db import create_app_engine, create_session_factory
from diaria.logging_config import configure_logging
from diaria.repositories.draw_repository import DrawRepository
from diaria.repositories.stat_repository import StatRepository
from diaria.services.api_scraper import ApiScraper
from diaria.services.fetcher import Fetcher, build_http_session
from diaria.services.html_scraper import HtmlScraper
from diaria.services.notifier import Notifier
from diaria.services.pipeline import Pipeline
from diaria.services.run_context import RunContext
from diaria.utils.clock import local_today

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_DAYS = 180


def _load_env() -> None:
    load_dotenv()
    p = pathlib.Path(".env.local")
    if p.exists():
        load_dotenv(dotenv_path=p, override=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="diaria",
        description="La Diaria results ingestion and statistics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("Usage:", 1)[1] if __doc__ else None,
    )
    parser.add_argument("command", nargs="?", default="help", help="scrape | stats | status | sample")
    parser.add_argument("days", nargs="?", default=None, help="days of history for `sample` (default 180)")
    parser.add_argument(
        "--database-url",
        dest="database_url",
        type=str,
        default=None,
        help="Override DB connection string (e.g. sqlite:///./diaria.db)",
    )
    return parser


def sample_days(raw: str | None) -> int:
    """Days of synthetic history; anything that is not a positive integer means the default."""

    try:
        days = int(raw) if raw is not None else DEFAULT_SAMPLE_DAYS
    except ValueError:
        return DEFAULT_SAMPLE_DAYS
    return days if days > 0 else DEFAULT_SAMPLE_DAYS


def build_pipeline(config: BaseConfig, session_factory: sessionmaker[Session]) -> Pipeline:
    http = build_http_session(retries=config.HTTP_RETRIES)
    fetcher = Fetcher(
        http,
        timeout_seconds=config.FETCH_TIMEOUT_SECONDS,
        max_redirects=config.FETCH_MAX_REDIRECTS,
    )
    return Pipeline(
        session_factory,
        html_scraper=HtmlScraper(fetcher, config.HTML_SOURCE_URL, today=lambda: local_today(config.TIMEZONE)),
        api_scraper=ApiScraper(fetcher, config.RESULTS_API_BASE, SITE_GAMES),
        notifier=Notifier(config.NOTIFY_URL, config.INTERNAL_API_KEY, http),
        periods=config.STAT_PERIODS,
    )


def show_status(session_factory: sessionmaker[Session], echo: Callable[[str], None] = print) -> None:
    draws = DrawRepository()
    stats = StatRepository()

    with session_factory() as session:
        echo(f"Total records: {draws.count(session)}")
        echo("")
        echo("Latest results:")
        for d in draws.latest(session, limit=5):
            echo(f"  {d.draw_date.isoformat()} {d.draw_time}: {int(d.main_number):02d}")

        hot = stats.hot_numbers(session, period_days=30, draw_time=None, limit=10)
        if hot:
            echo("")
            echo("Hot numbers (30 days):")
            echo("  " + ", ".join(f"{int(s.number):02d}({s.frequency})" for s in hot))


def main(argv: Sequence[str] | None = None, *, config: BaseConfig | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if config is None:
        _load_env()
        config = get_config()()

    configure_logging(config.LOG_LEVEL)

    command = str(args.command).lower()
    if command not in ("scrape", "stats", "status", "sample"):
        parser.print_help()
        return 0

    try:
        engine = create_app_engine(str(args.database_url or config.DATABASE_URL))
        with engine.connect():
            pass
        session_factory = create_session_factory(engine)

        if command == "status":
            show_status(session_factory)
            return 0

        pipeline = build_pipeline(config, session_factory)
        run = RunContext(today=local_today(config.TIMEZONE))

        if command == "scrape":
            report = pipeline.scrape(run)
            logger.info(
                "Scrape done: html=%s api=%s stored=%s notified=%s",
                report.html_records,
                report.api_records,
                report.stored,
                report.notified,
            )
        elif command == "stats":
            pipeline.recompute(run)
        else:
            inserted, _ = pipeline.sample(run, sample_days(args.days))
            logger.info("Sample data generation complete: %s draws", inserted)
    except Exception:
        logger.exception("Run failed")
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
