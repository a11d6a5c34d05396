"""Marshmallow schemas for back-office users."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from campaign.models.user import ROLES


class UserSchema(Schema):
    id = fields.Int()
    username = fields.Str()
    email = fields.Str(allow_none=True)
    roles = fields.List(fields.Str(), attribute="role_names")
    created_at = fields.DateTime()


class UserCreateSchema(Schema):
    username = fields.Str(required=True, validate=validate.Length(min=3, max=100))
    email = fields.Email(required=True)
    password = fields.Str(required=True, load_only=True, validate=validate.Length(min=6))
    role = fields.Str(load_default="user", validate=validate.OneOf(ROLES))
