"""Marshmallow schemas for DrawNumber."""

from __future__ import annotations

from datetime import timezone

from marshmallow import Schema, fields, validate


class DrawNumberSchema(Schema):
    id = fields.Int()
    invoice_id = fields.Int()
    game_opportunity_id = fields.Int(allow_none=True)
    number = fields.Str()
    active = fields.Bool()
    winner_at = fields.DateTime(allow_none=True)
    email_sended_at = fields.DateTime(allow_none=True)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()


class DrawNumberCreateSchema(Schema):
    invoice_id = fields.Int(required=True, validate=validate.Range(min=1))
    game_opportunity_id = fields.Int(load_default=None, allow_none=True, validate=validate.Range(min=1))
    number = fields.Int(required=True, validate=validate.Range(min=1, max=9_999_999))
    active = fields.Bool(load_default=True)
    winner_at = fields.NaiveDateTime(timezone=timezone.utc, load_default=None, allow_none=True)
    email_sended_at = fields.NaiveDateTime(timezone=timezone.utc, load_default=None, allow_none=True)


class DrawNumberUpdateSchema(Schema):
    invoice_id = fields.Int(validate=validate.Range(min=1))
    game_opportunity_id = fields.Int(allow_none=True, validate=validate.Range(min=1))
    number = fields.Int(validate=validate.Range(min=1, max=9_999_999))
    active = fields.Bool()
    winner_at = fields.NaiveDateTime(timezone=timezone.utc, allow_none=True)
    email_sended_at = fields.NaiveDateTime(timezone=timezone.utc, allow_none=True)


def dump_joined(row) -> dict:  # type: ignore[no-untyped-def]
    """(DrawNumber, fiscal_code, client_name) -> dict."""

    draw_number, fiscal_code, client_name = row
    data = DrawNumberSchema().dump(draw_number)
    data["fiscal_code"] = fiscal_code
    data["client_name"] = client_name
    return data
