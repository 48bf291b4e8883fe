"""Scraper for the human-oriented results page.

The page lists one header per date followed by that day's numbers:

    <div class="rrm-date">Lunes, 5 Enero 2025</div>
    <span nm>12</span> <span ne>3</span> ...

The document is flattened into a token stream (date / main / companion) and
folded into per-date sections. Each section is then parsed on its own, so a
malformed section only skips itself.
"""

from __future__ import annotations

import datetime as dt
import logging
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

from bs4 import BeautifulSoup

from diaria.errors import FetchError, ParseError
from diaria.repositories.draw_repository import DrawRecord
from diaria.services.fetcher import Fetcher
from diaria.services.parsing import Ok, ParseOutcome, Skipped, collect, leading_int, number_in_range

logger = logging.getLogger(__name__)

DATE_HEADER_CLASS = "rrm-date"

MONTHS = {
    "enero": 1,
    "febrero": 2,
    "marzo": 3,
    "abril": 4,
    "mayo": 5,
    "junio": 6,
    "julio": 7,
    "agosto": 8,
    "septiembre": 9,
    "setiembre": 9,
    "octubre": 10,
    "noviembre": 11,
    "diciembre": 12,
}

# n-th number of a section -> slot. The page lists the earliest draw first.
PAGE_SLOT_ORDER = ("11am", "3pm", "9pm")

# Parsed dates further ahead than this are assumed to carry a misread year.
MAX_FUTURE_DAYS = 7

_DATE_TEXT = re.compile(r"(\d{1,2})\s+([^\W\d_]+)\s+(\d{4})")


@dataclass
class DateSection:
    header: str
    mains: list[str] = field(default_factory=list)
    companions: list[str] = field(default_factory=list)


def _tokens(html: str) -> Iterator[tuple[str, str]]:
    soup = BeautifulSoup(html, "html.parser")
    for el in soup.find_all(True):
        if DATE_HEADER_CLASS in (el.get("class") or []):
            yield "date", el.get_text(" ", strip=True)
        elif el.name == "span" and el.has_attr("nm"):
            yield "main", el.get_text(strip=True)
        elif el.name == "span" and el.has_attr("ne"):
            yield "companion", el.get_text(strip=True)


def split_sections(html: str) -> list[DateSection]:
    """Fold the token stream into date sections; tokens before the first header are dropped."""

    sections: list[DateSection] = []
    current: DateSection | None = None

    for kind, text in _tokens(html):
        if kind == "date":
            current = DateSection(header=text)
            sections.append(current)
        elif current is None:
            continue
        elif kind == "main":
            current.mains.append(text)
        else:
            current.companions.append(text)

    return sections


def correct_future_year(parsed: dt.date, today: dt.date) -> dt.date:
    """Repair dates whose year was misread into the future.

    Heuristic: use the current year, or the previous one when the month has
    not happened yet this year. It can misfire around New Year.
    """

    if (parsed - today).days <= MAX_FUTURE_DAYS:
        return parsed

    year = today.year - 1 if parsed.month > today.month else today.year
    try:
        corrected = parsed.replace(year=year)
    except ValueError as exc:
        raise ParseError(f"Cannot move {parsed} to {year}") from exc

    logger.info("Corrected future date %s -> %s", parsed, corrected)
    return corrected


def parse_header_date(header: str, today: dt.date) -> dt.date:
    match = _DATE_TEXT.search(header)
    if not match:
        raise ParseError(f"No date in header {header!r}")

    day_raw, month_name, year_raw = match.groups()
    month = MONTHS.get(month_name.lower())
    if month is None:
        raise ParseError(f"Unknown month {month_name!r}")

    try:
        parsed = dt.date(int(year_raw), month, int(day_raw))
    except ValueError as exc:
        raise ParseError(f"Invalid date in header {header!r}") from exc

    return correct_future_year(parsed, today)


def _companion_at(companions: list[str], position: int) -> int:
    if position >= len(companions):
        return 0
    try:
        value = leading_int(companions[position])
    except ParseError:
        return 0
    return number_in_range(value, 0, 9, "companion number")


def parse_section(section: DateSection, today: dt.date) -> list[ParseOutcome]:
    try:
        draw_date = parse_header_date(section.header, today)
    except ParseError as exc:
        return [Skipped(str(exc))]

    if not section.mains:
        return [Skipped(f"{draw_date}: no numbers in section")]

    outcomes: list[ParseOutcome] = []
    for position, (slot, raw_main) in enumerate(zip(PAGE_SLOT_ORDER, section.mains)):
        try:
            main = number_in_range(leading_int(raw_main), 0, 99, "main number")
            companion = _companion_at(section.companions, position)
        except ParseError as exc:
            outcomes.append(Skipped(f"{draw_date} {slot}: {exc}"))
            continue

        outcomes.append(
            Ok(
                DrawRecord(
                    draw_date=draw_date,
                    draw_time=slot,
                    main_number=main,
                    companion_number=companion,
                    scraped_from="html",
                )
            )
        )

    return outcomes


def parse_results_page(html: str, *, today: dt.date) -> list[ParseOutcome]:
    outcomes: list[ParseOutcome] = []
    for section in split_sections(html):
        outcomes.extend(parse_section(section, today))
    return outcomes


class HtmlScraper:
    """Best-effort scrape of the results page."""

    def __init__(self, fetcher: Fetcher, url: str, *, today: Callable[[], dt.date]) -> None:
        self._fetcher = fetcher
        self._url = url
        self._today = today

    def scrape(self) -> list[DrawRecord]:
        try:
            html = self._fetcher.fetch(self._url)
        except FetchError as exc:
            logger.error("Results page unavailable (%s): %s", self._url, exc)
            return []

        records = collect(parse_results_page(html, today=self._today()), logger, "html")
        logger.info("Parsed %s draws from %s", len(records), self._url)
        return records
