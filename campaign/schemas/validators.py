"""Field validators shared by the schemas."""

from __future__ import annotations

from datetime import date

from marshmallow import ValidationError

from campaign.utils.dates import subtract_years
from campaign.utils.strings import is_valid_cpf

LEGAL_AGE = 18

# (83) 98888-7777, 83988887777, +55 83 98888-7777 ...
CEL_PATTERN = r"^(?:(?:\+|00)?(55)\s?)?(?:\(?([1-9][0-9])\)?\s?)?(?:((?:9\d|[2-9])\d{3})-?(\d{4}))$"


def validate_cpf(value: str) -> None:
    if not is_valid_cpf(value):
        raise ValidationError("O CPF fornecido é inválido.")


def validate_legal_age(value: date) -> None:
    if value > subtract_years(date.today(), LEGAL_AGE):
        raise ValidationError("O cliente deve ter no mínimo 18 anos.")
