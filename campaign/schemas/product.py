"""Marshmallow schemas for Product."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class ProductSchema(Schema):
    id = fields.Int()
    ean = fields.Str(allow_none=True)
    description = fields.Str(allow_none=True)
    brand = fields.Str(allow_none=True)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()


class ProductWriteSchema(Schema):
    ean = fields.Str(allow_none=True, validate=validate.Regexp(r"^\d{1,20}$", error="O EAN deve ser numérico."))
    description = fields.Str(allow_none=True)
    brand = fields.Str(allow_none=True, validate=validate.Length(max=255))
