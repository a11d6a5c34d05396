"""Marshmallow schemas for Voucher."""

from __future__ import annotations

from datetime import timezone

from marshmallow import Schema, fields, validate


class VoucherSchema(Schema):
    id = fields.Int()
    coupom = fields.Str()
    draw_date = fields.DateTime()
    voucher_value = fields.Int(allow_none=True)
    game_opportunity_id = fields.Int(allow_none=True)
    email_sended_at = fields.DateTime(allow_none=True)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()


class VoucherCreateSchema(Schema):
    coupom = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    draw_date = fields.NaiveDateTime(timezone=timezone.utc, required=True)
    voucher_value = fields.Int(load_default=None, allow_none=True)
    game_opportunity_id = fields.Int(load_default=None, allow_none=True, validate=validate.Range(min=1))
    email_sended_at = fields.NaiveDateTime(timezone=timezone.utc, load_default=None, allow_none=True)


class VoucherUpdateSchema(Schema):
    coupom = fields.Str(validate=validate.Length(min=1, max=255))
    draw_date = fields.NaiveDateTime(timezone=timezone.utc)
    voucher_value = fields.Int(allow_none=True)
    game_opportunity_id = fields.Int(allow_none=True, validate=validate.Range(min=1))
    email_sended_at = fields.NaiveDateTime(timezone=timezone.utc, allow_none=True)


class DrawnVoucherSchema(Schema):
    """Public, already-masked winner row."""

    draw_date = fields.DateTime()
    name = fields.Str(allow_none=True)
    cpf = fields.Str(allow_none=True)
