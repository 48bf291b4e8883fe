"""Scraper for the structured results API (one game document per time slot)."""

from __future__ import annotations

import datetime as dt
import logging
import re
from collections.abc import Iterable, Sequence
from typing import Any

from diaria.config import SiteGame
from diaria.errors import FetchError, ParseError
from diaria.repositories.draw_repository import DrawRecord
from diaria.services.fetcher import Fetcher
from diaria.services.parsing import Ok, ParseOutcome, Skipped, collect, leading_int, number_in_range

logger = logging.getLogger(__name__)

_LEADING_DIGITS = re.compile(r"^\d+\s*")


def build_option_labels(game: dict[str, Any]) -> dict[str, str]:
    """Map option id -> label from ``score_layout`` ("34 Música", "2 Perro", ...).

    Rows and options of any other shape are ignored.
    """

    layout = game.get("score_layout") or []
    if not isinstance(layout, list):
        raise ParseError(f"score_layout is a {type(layout).__name__}, expected a list")

    labels: dict[str, str] = {}
    for row in layout:
        items = row if isinstance(row, list) else [row]
        for item in items:
            if not isinstance(item, dict):
                continue
            options = item.get("options")
            if options is None and "id" in item:
                options = [item]
            if not isinstance(options, list):
                continue
            for opt in options:
                if isinstance(opt, dict) and opt.get("id") is not None:
                    labels[str(opt["id"])] = str(opt.get("text") or "")
    return labels


def _session_date(session: dict[str, Any]) -> dt.date:
    raw = session.get("date")
    if not raw:
        raise ParseError("Session without date")
    try:
        return dt.date.fromisoformat(str(raw)[:10])
    except ValueError as exc:
        raise ParseError(f"Invalid session date {raw!r}") from exc


def _companion(labels: dict[str, str], score_row: Sequence[Any]) -> int:
    if len(score_row) < 3:
        return 0
    try:
        value = leading_int(labels.get(str(score_row[2])))
    except ParseError:
        return 0
    return number_in_range(value, 0, 9, "companion number")


def parse_session(session: dict[str, Any], labels: dict[str, str], draw_time: str) -> ParseOutcome:
    try:
        draw_date = _session_date(session)

        score = session.get("score") or []
        if not isinstance(score, (list, tuple)):
            raise ParseError(f"score is a {type(score).__name__}, expected a list")
        score_row = score[0] if score else None
        if not score_row:
            raise ParseError("Session without score")
        if not isinstance(score_row, (list, tuple)):
            raise ParseError(f"score row {score_row!r} is not a list of option ids")

        main_label = labels.get(str(score_row[0]), "")
        main = number_in_range(leading_int(main_label), 0, 99, "main number")
        companion = _companion(labels, score_row)
    except ParseError as exc:
        return Skipped(f"{draw_time} session {session.get('date')!r}: {exc}")

    animal = _LEADING_DIGITS.sub("", main_label).strip() or None
    return Ok(
        DrawRecord(
            draw_date=draw_date,
            draw_time=draw_time,
            main_number=main,
            companion_number=companion,
            animal_name=animal,
            scraped_from="api",
        )
    )


def parse_site_game(payload: dict[str, Any], draw_time: str) -> list[ParseOutcome]:
    """Parse one slot's game document (either wrapped in ``game`` or top-level).

    Raises:
        ParseError: the document itself has the wrong shape.
    """

    game = payload.get("game") or payload
    if not isinstance(game, dict):
        raise ParseError(f"game is a {type(game).__name__}, expected an object")

    sessions = game.get("sessions") or []
    if not isinstance(sessions, list):
        raise ParseError(f"sessions is a {type(sessions).__name__}, expected a list")

    labels = build_option_labels(game)
    return [parse_session(session, labels, draw_time) for session in sessions if isinstance(session, dict)]


class ApiScraper:
    """Fetch every slot's game document; a failing slot does not stop the others."""

    def __init__(self, fetcher: Fetcher, api_base: str, games: Iterable[SiteGame]) -> None:
        self._fetcher = fetcher
        self._api_base = api_base.rstrip("/")
        self._games = tuple(games)

    def game_url(self, game: SiteGame) -> str:
        return f"{self._api_base}/site-games/{game.site_game_id}"

    def scrape(self) -> list[DrawRecord]:
        records: list[DrawRecord] = []

        for game in self._games:
            try:
                payload = self._fetcher.fetch_json(self.game_url(game))
                if not isinstance(payload, dict):
                    raise ParseError(f"Unexpected payload type {type(payload).__name__}")
                outcomes = parse_site_game(payload, game.draw_time)
            except FetchError as exc:
                logger.error("Error fetching %s: %s", game.draw_time, exc)
                continue
            except (ValueError, TypeError, KeyError, AttributeError) as exc:
                # ParseError and JSON decoding errors are ValueErrors.
                logger.error("Unreadable game document for %s: %s", game.draw_time, exc)
                continue

            slot_records = collect(outcomes, logger, f"api {game.draw_time}")
            logger.info("Fetched %s sessions for %s", len(slot_records), game.draw_time)
            records.extend(slot_records)

        return records
