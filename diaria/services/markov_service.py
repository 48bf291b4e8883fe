"""First-order transition matrix between consecutive draws."""

from __future__ import annotations

import logging
from collections import Counter, defaultdict
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from diaria.models.markov_edge import MarkovEdge
from diaria.repositories.draw_repository import DrawRepository
from diaria.repositories.markov_repository import MarkovRepository

logger = logging.getLogger(__name__)

_FOUR_PLACES = Decimal("0.0001")
_UNITS = 10_000  # probability resolution: 4 decimal places


def _probability(count: int, total: int) -> float:
    return float((Decimal(count) / Decimal(total)).quantize(_FOUR_PLACES, rounding=ROUND_HALF_UP))


def _apportion(counts: dict[int, int]) -> dict[int, float]:
    """Round count/total to 4 places so the row still sums to exactly 1.

    Largest remainder: every value is floored to 0.0001 units and the missing
    units go to the largest remainders (ties to the lower ``to`` number).

    Each value is within 0.0001 of count/total but is not always the
    half-up rounding of it: seven equal successors store 0.1429 for four
    of them and 0.1428 for the other three.
    """

    total = sum(counts.values())
    if len(counts) == 1:
        return {to: 1.0 for to in counts}

    units = {to: n * _UNITS // total for to, n in counts.items()}
    missing = _UNITS - sum(units.values())
    by_remainder = sorted(counts, key=lambda to: (-(counts[to] * _UNITS % total), to))
    for to in by_remainder[:missing]:
        units[to] += 1

    return {to: _probability(u, _UNITS) for to, u in units.items()}


def transition_edges(sequence: Sequence[int], draw_time: str | None) -> list[MarkovEdge]:
    """Count adjacent (from, to) pairs in ``sequence`` and normalize per ``from``."""

    counts: Counter[tuple[int, int]] = Counter(zip(sequence, sequence[1:]))
    outgoing: dict[int, dict[int, int]] = defaultdict(dict)
    for (from_number, to_number), n in counts.items():
        outgoing[from_number][to_number] = n

    probabilities = {from_number: _apportion(row) for from_number, row in outgoing.items()}

    return [
        MarkovEdge(
            from_number=from_number,
            to_number=to_number,
            draw_time=draw_time,
            transitions=n,
            probability=probabilities[from_number][to_number],
        )
        for (from_number, to_number), n in sorted(counts.items())
    ]


class MarkovService:
    def __init__(self, draws: DrawRepository | None = None, edges: MarkovRepository | None = None) -> None:
        self._draws = draws or DrawRepository()
        self._edges = edges or MarkovRepository()

    def _replace(self, session: Session, edges: list[MarkovEdge], *, time_specific: bool) -> int:
        try:
            written = self._edges.replace_scope(session, edges, time_specific=time_specific)
            session.commit()
        except SQLAlchemyError:
            session.rollback()
            raise
        return written

    def recompute(self, session: Session) -> tuple[int, int]:
        """Rebuild per-slot edges, then combined edges.

        Returns (per-slot edge count, combined edge count).
        """

        draws = self._draws.list_since(session)  # chronological: date, then slot

        by_slot: dict[str, list[int]] = defaultdict(list)
        for d in draws:
            by_slot[d.draw_time].append(int(d.main_number))

        slot_edges: list[MarkovEdge] = []
        for draw_time, sequence in sorted(by_slot.items()):
            slot_edges.extend(transition_edges(sequence, draw_time))
        per_slot = self._replace(session, slot_edges, time_specific=True)

        combined_edges = transition_edges([int(d.main_number) for d in draws], None)
        combined = self._replace(session, combined_edges, time_specific=False)

        logger.info("Markov matrix updated: %s per-slot edges, %s combined edges", per_slot, combined)
        return per_slot, combined
