"""Tagged parse outcomes shared by both scrapers."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Union

from diaria.errors import ParseError
from diaria.repositories.draw_repository import DrawRecord

_LEADING_INT = re.compile(r"^\s*(\d+)")


@dataclass(frozen=True)
class Ok:
    record: DrawRecord


@dataclass(frozen=True)
class Skipped:
    reason: str


ParseOutcome = Union[Ok, Skipped]


def leading_int(text: str | None) -> int:
    """Parse the integer at the start of ``text`` ("34 Música" -> 34)."""

    match = _LEADING_INT.match(text or "")
    if not match:
        raise ParseError(f"No leading number in {text!r}")
    return int(match.group(1))


def number_in_range(value: int, low: int, high: int, label: str) -> int:
    if not low <= value <= high:
        raise ParseError(f"{label} {value} outside {low}..{high}")
    return value


def collect(outcomes: Iterable[ParseOutcome], logger: logging.Logger, source: str) -> list[DrawRecord]:
    """Keep the parsed records, log every skip."""

    records: list[DrawRecord] = []
    skipped = 0
    for outcome in outcomes:
        if isinstance(outcome, Ok):
            records.append(outcome.record)
        else:
            skipped += 1
            logger.info("%s: skipped (%s)", source, outcome.reason)

    if skipped:
        logger.warning("%s: parsed %s records, skipped %s", source, len(records), skipped)
    return records
