"""Schemas for draw records (ingestion validation + API output)."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

DRAW_TIMES = ("11am", "3pm", "9pm")


class DrawRecordSchema(Schema):
    """Validate one normalized draw before it reaches the store."""

    draw_date = fields.Date(required=True)
    draw_time = fields.String(required=True, validate=validate.OneOf(DRAW_TIMES))
    lottery_type = fields.String(required=True, validate=validate.Length(min=1, max=32))
    main_number = fields.Integer(required=True, strict=True, validate=validate.Range(min=0, max=99))
    companion_number = fields.Integer(
        required=False,
        strict=True,
        load_default=0,
        validate=validate.Range(min=0, max=9),
    )
    animal_name = fields.String(required=False, allow_none=True, load_default=None)
    scraped_from = fields.String(required=False, allow_none=True, load_default=None)


class DrawResultSchema(Schema):
    """Public shape of a stored draw."""

    date = fields.Date(attribute="draw_date")
    time = fields.String(attribute="draw_time")
    main_number = fields.Function(lambda d: f"{int(d.main_number):02d}")
    companion_number = fields.Integer()
    animal = fields.String(attribute="animal_name", allow_none=True)
