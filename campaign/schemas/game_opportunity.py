"""Marshmallow schemas for GameOpportunity."""

from __future__ import annotations

from datetime import timezone

from marshmallow import Schema, fields, validate


def _client_name(opportunity):  # type: ignore[no-untyped-def]
    invoice = opportunity.invoice
    return invoice.client.name if invoice is not None and invoice.client is not None else None


class GameOpportunitySchema(Schema):
    id = fields.Int()
    invoice_id = fields.Int(allow_none=True)
    fiscal_code = fields.Function(lambda o: o.invoice.fiscal_code if o.invoice is not None else None)
    client_name = fields.Function(_client_name)
    gift = fields.Str(allow_none=True)
    active = fields.Bool()
    used_at = fields.DateTime(allow_none=True)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()


class GameOpportunityWriteSchema(Schema):
    invoice_id = fields.Int(allow_none=True, validate=validate.Range(min=1))
    gift = fields.Str(allow_none=True, validate=validate.Length(max=255))
    active = fields.Bool()
    used_at = fields.NaiveDateTime(timezone=timezone.utc, allow_none=True)
