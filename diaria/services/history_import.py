"""Convert exported historical results into draw records."""

from __future__ import annotations

import datetime as dt
import logging
from collections.abc import Iterable
from typing import Any

from diaria.errors import ParseError
from diaria.repositories.draw_repository import DrawRecord
from diaria.schemas.draw import DRAW_TIMES
from diaria.services.parsing import Ok, ParseOutcome, Skipped, leading_int, number_in_range
from diaria.signs import sign_for

logger = logging.getLogger(__name__)


def parse_history_item(item: dict[str, Any]) -> ParseOutcome:
    """``{"date": "2024-03-01", "time": "3pm", "number": "07"}`` -> record."""

    try:
        try:
            draw_date = dt.date.fromisoformat(str(item.get("date") or "")[:10])
        except ValueError as exc:
            raise ParseError(f"Invalid date {item.get('date')!r}") from exc

        draw_time = str(item.get("time") or "").strip().lower()
        if draw_time not in DRAW_TIMES:
            raise ParseError(f"Unknown draw time {item.get('time')!r}")

        raw_number = item.get("number")
        number = number_in_range(leading_int(None if raw_number is None else str(raw_number)), 0, 99, "number")
    except ParseError as exc:
        return Skipped(str(exc))

    return Ok(
        DrawRecord(
            draw_date=draw_date,
            draw_time=draw_time,
            main_number=number,
            animal_name=sign_for(number),
            scraped_from="import",
        )
    )


def parse_history(items: Iterable[Any]) -> list[ParseOutcome]:
    return [
        parse_history_item(item) if isinstance(item, dict) else Skipped(f"Not an object: {item!r}")
        for item in items
    ]
