"""Marshmallow schemas for Client."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from campaign.schemas.validators import CEL_PATTERN, validate_cpf, validate_legal_age


class ClientSchema(Schema):
    """Serialize Client for the back-office."""

    id = fields.Int()
    is_pre_register = fields.Bool()
    name = fields.Str(allow_none=True)
    cpf = fields.Str()
    birthday = fields.Date(allow_none=True)
    cel = fields.Str(allow_none=True)
    email = fields.Str(allow_none=True)
    token = fields.Str()
    is_mega_winner = fields.Bool()
    welcome_email_sended_at = fields.DateTime(allow_none=True)
    email_sended_at = fields.DateTime(allow_none=True)
    security_token_email_sended_at = fields.DateTime(allow_none=True)
    updated_security_token_at = fields.DateTime(allow_none=True)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()


class ClientCreateSchema(Schema):
    is_pre_register = fields.Bool(required=True)
    cpf = fields.Str(required=True, validate=validate_cpf)
    name = fields.Str(load_default=None, allow_none=True, validate=validate.Length(min=3, max=255))
    birthday = fields.Date(required=True, validate=validate_legal_age)
    email = fields.Email(load_default=None, allow_none=True)
    cel = fields.Str(load_default=None, allow_none=True, validate=validate.Regexp(CEL_PATTERN))


class ClientUpdateSchema(Schema):
    is_pre_register = fields.Bool()
    cpf = fields.Str(validate=validate_cpf)
    name = fields.Str(allow_none=True, validate=validate.Length(min=3, max=255))
    birthday = fields.Date(required=True, validate=validate_legal_age)
    email = fields.Email(allow_none=True)
    cel = fields.Str(allow_none=True, validate=validate.Regexp(CEL_PATTERN))


class ClientWebUpdateSchema(Schema):
    """Profile completion by the web client itself."""

    name = fields.Str(required=True, validate=validate.Length(min=3, max=255))
    birthday = fields.Date(required=True, validate=validate_legal_age)
    email = fields.Email(load_default=None, allow_none=True)
    cel = fields.Str(load_default=None, allow_none=True, validate=validate.Regexp(CEL_PATTERN))


class ClientSummarySchema(Schema):
    opportunities_total = fields.Int()
    opportunities_not_used = fields.Int()
    draw_numbers_total = fields.Int()
    invoices_total = fields.Int()
