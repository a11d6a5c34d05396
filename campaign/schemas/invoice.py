"""Marshmallow schemas for Invoice and its allocations."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from campaign.services.invoice_service import INVOICE_STATUSES


class InvoiceOpportunitySchema(Schema):
    id = fields.Int()
    gift = fields.Str(allow_none=True)
    active = fields.Bool()
    used_at = fields.DateTime(allow_none=True)


class InvoiceDrawNumberSchema(Schema):
    id = fields.Int()
    number = fields.Str()
    game_opportunity_id = fields.Int(allow_none=True)


class InvoiceSchema(Schema):
    id = fields.Int()
    fiscal_code = fields.Str()
    client_id = fields.Int()
    client_name = fields.Function(lambda invoice: invoice.client.name if invoice.client else None)
    invoice_value = fields.Float()
    has_item = fields.Bool()
    has_creditcard = fields.Bool()
    has_partner_code = fields.Bool()
    pdv = fields.Int(allow_none=True)
    store = fields.Int(allow_none=True)
    num_coupon = fields.Int(allow_none=True)
    cnpj = fields.Str(allow_none=True)
    creditcard = fields.Str(allow_none=True)
    chances = fields.Int()
    status = fields.Str()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()


class InvoiceDetailSchema(InvoiceSchema):
    game_opportunities = fields.List(fields.Nested(InvoiceOpportunitySchema))
    draw_numbers = fields.List(fields.Nested(InvoiceDrawNumberSchema))


class InvoiceCreateSchema(Schema):
    """Admin registration on behalf of a client."""

    client_id = fields.Int(required=True, validate=validate.Range(min=1))
    fiscal_code = fields.Str(required=True, validate=validate.Length(min=1, max=60))


class InvoiceAddSchema(Schema):
    """Registration by the authenticated web client."""

    fiscal_code = fields.Str(required=True, validate=validate.Length(min=1, max=60))


class InvoiceUpdateSchema(Schema):
    fiscal_code = fields.Str(validate=validate.Length(min=1, max=60))
    status = fields.Str(validate=validate.OneOf(INVOICE_STATUSES))


class LuckResultSchema(Schema):
    win = fields.Bool()
    message = fields.Str()
    opportunity_id = fields.Int()
    coupom = fields.Function(lambda result: result.voucher.coupom if result.voucher else None)
    voucher_value = fields.Function(lambda result: result.voucher.voucher_value if result.voucher else None)
