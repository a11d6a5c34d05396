"""Marshmallow schemas for PageContent."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class PageContentSchema(Schema):
    id = fields.Int()
    title = fields.Str()
    slug = fields.Str()
    content = fields.Str(allow_none=True)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()


class PageContentCreateSchema(Schema):
    title = fields.Str(required=True, validate=validate.Length(min=1, max=45))
    content = fields.Str(load_default=None, allow_none=True)


class PageContentUpdateSchema(Schema):
    title = fields.Str(validate=validate.Length(min=1, max=45))
    slug = fields.Str()
    content = fields.Str(allow_none=True)
