"""Read-only lottery routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, request

from diaria.db import get_session
from diaria.errors import ValidationError
from diaria.repositories.draw_repository import DrawRepository
from diaria.repositories.markov_repository import MarkovRepository
from diaria.repositories.stat_repository import StatRepository
from diaria.schemas.analysis import (
    MarkovEdgeSchema,
    MarkovQuerySchema,
    NumberStatSchema,
    ResultsQuerySchema,
    StatsQuerySchema,
)
from diaria.schemas.draw import DrawResultSchema
from diaria.signs import sign_for
from diaria.utils.responses import ok

lottery_bp = Blueprint("lottery", __name__)

_draws = DrawRepository()
_stats = StatRepository()
_markov = MarkovRepository()

_results_query = ResultsQuerySchema()
_stats_query = StatsQuerySchema()
_markov_query = MarkovQuerySchema()
_results_schema = DrawResultSchema(many=True)
_stat_schema = NumberStatSchema(many=True)
_edge_schema = MarkovEdgeSchema(many=True)


@lottery_bp.get("/results")
def list_results():
    """Latest draws, newest first. Query: ``limit`` (1..100, default 10)."""

    args = _results_query.load(request.args)
    draws = _draws.latest(get_session(), limit=args["limit"])
    return ok({"results": _results_schema.dump(draws)})


@lottery_bp.get("/stats")
def list_stats():
    """Per-number statistics for one scope.

    Query params:
    - period: lookback window in days (default 30)
    - draw_time: 11am | 3pm | 9pm (omit for all slots combined)
    """

    args = _stats_query.load(request.args)
    rows = _stats.list_scope(get_session(), args["period"], args["draw_time"])
    return ok(
        {
            "period_days": args["period"],
            "draw_time": args["draw_time"],
            "stats": _stat_schema.dump(rows),
            "hot_numbers": [s.number for s in rows if s.is_hot],
            "cold_numbers": [s.number for s in rows if s.is_cold],
        }
    )


@lottery_bp.get("/markov/<int:from_number>")
def get_transitions(from_number: int):
    if not 0 <= from_number <= 99:
        raise ValidationError("from_number must be within 0..99")

    args = _markov_query.load(request.args)
    edges = _markov.outgoing(get_session(), from_number, args["draw_time"])
    return ok(
        {
            "from_number": from_number,
            "sign": sign_for(from_number),
            "draw_time": args["draw_time"],
            "transitions": _edge_schema.dump(edges),
        }
    )
