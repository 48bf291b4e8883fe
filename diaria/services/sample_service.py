"""Synthetic draw history for local testing. Not part of the production data path."""

from __future__ import annotations

import datetime as dt
import random

from tqdm import tqdm

from diaria.repositories.draw_repository import DrawRecord
from diaria.schemas.draw import DRAW_TIMES
from diaria.signs import sign_for

# Skewed pools so the generated history has visible hot and cold numbers.
HOT_NUMBERS = (7, 13, 21, 33, 45, 67, 77, 88)
COLD_NUMBERS = (3, 11, 19, 41, 52, 63, 91, 99)


def _pick_number(rng: random.Random) -> int:
    roll = rng.random()
    if roll < 0.40:
        return rng.choice(HOT_NUMBERS)
    if roll < 0.55:
        return rng.choice(COLD_NUMBERS)
    return rng.randrange(100)


def generate_sample_records(
    days: int,
    *,
    today: dt.date,
    rng: random.Random | None = None,
    progress: bool = False,
) -> list[DrawRecord]:
    """One record per slot for each of the last ``days`` days (today included)."""

    rng = rng or random.Random()
    records: list[DrawRecord] = []

    for offset in tqdm(range(int(days)), desc="Generating", disable=not progress):
        draw_date = today - dt.timedelta(days=offset)
        for draw_time in DRAW_TIMES:
            number = _pick_number(rng)
            records.append(
                DrawRecord(
                    draw_date=draw_date,
                    draw_time=draw_time,
                    main_number=number,
                    companion_number=rng.randrange(10),
                    animal_name=sign_for(number),
                    scraped_from="sample",
                )
            )

    return records
