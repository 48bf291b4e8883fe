"""Schemas for the statistics and transition endpoints."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

from diaria.schemas.draw import DRAW_TIMES


class _QuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE


class ResultsQuerySchema(_QuerySchema):
    limit = fields.Integer(load_default=10, validate=validate.Range(min=1, max=100))


class StatsQuerySchema(_QuerySchema):
    period = fields.Integer(load_default=30, validate=validate.Range(min=1))
    draw_time = fields.String(load_default=None, allow_none=True, validate=validate.OneOf(DRAW_TIMES))


class MarkovQuerySchema(_QuerySchema):
    draw_time = fields.String(load_default=None, allow_none=True, validate=validate.OneOf(DRAW_TIMES))


class NumberStatSchema(Schema):
    number = fields.Integer()
    draw_time = fields.String(allow_none=True)
    period_days = fields.Integer()
    frequency = fields.Integer()
    last_appearance = fields.Date()
    gap_days = fields.Integer()
    is_hot = fields.Boolean()
    is_cold = fields.Boolean()


class MarkovEdgeSchema(Schema):
    from_number = fields.Integer()
    to_number = fields.Integer()
    draw_time = fields.String(allow_none=True)
    transitions = fields.Integer()
    probability = fields.Float()
