"""Schemas for authentication payloads."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from campaign.schemas.validators import validate_cpf


class RegisterSchema(Schema):
    username = fields.Str(required=True, validate=validate.Length(min=3, max=100))
    email = fields.Email(required=True)
    password = fields.Str(required=True, load_only=True, validate=validate.Length(min=6))


class LoginSchema(Schema):
    email = fields.Email(required=True)
    password = fields.Str(required=True, load_only=True)


class WebLoginSchema(Schema):
    cpf = fields.Str(required=True, validate=validate_cpf)
    security_token = fields.Str(required=True, validate=validate.Length(min=1, max=255))


class UpdateSecurityTokenSchema(Schema):
    token = fields.Str(required=True, validate=validate.Length(min=1))
