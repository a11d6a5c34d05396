"""Masking of personal data shown to web clients and on public listings."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any

_CPF_RE = re.compile(r"(\d{3})\.(\d{3})\.(\d{3})-(\d{2})")
_CPF_DIGITS_RE = re.compile(r"^(\d{3})(\d{3})(\d{3})(\d{2})$")
_EMAIL_RE = re.compile(r"^(.{2})(.*)(@.*)$")
_CEL_RE = re.compile(r"(\(\d{2}\)\s\d)(\d{4})(-)(\d{4})")


def mask_cpf(cpf: str | None) -> str | None:
    if not cpf:
        return cpf
    if _CPF_RE.search(cpf):
        return _CPF_RE.sub(r"\1.###.###-\4", cpf)
    return _CPF_DIGITS_RE.sub(r"\1.###.###-\4", cpf)


def mask_email(email: str | None) -> str | None:
    if not email:
        return email
    return _EMAIL_RE.sub(lambda m: m.group(1) + "#" * len(m.group(2)) + m.group(3), email)


def mask_cel(cel: str | None) -> str | None:
    if not cel:
        return cel
    return _CEL_RE.sub(r"\1####\3\4", cel)


def mask_birthday(birthday: date | datetime | str | None) -> str | None:
    if not birthday:
        return None
    iso = birthday.isoformat()[:10] if isinstance(birthday, (date, datetime)) else str(birthday)[:10]
    return re.sub(r"^\d{4}", "####", iso)


def mask_name(name: str | None) -> str | None:
    """Keep the first name, abbreviate the others: "Maria Souza Lima" -> "Maria S. L."."""

    if not name:
        return name
    parts = name.split()
    if len(parts) > 1:
        return parts[0] + " " + " ".join(p[0] + "." for p in parts[1:])
    return parts[0][0] + "."


def client_mask_info(client: dict[str, Any] | None) -> dict[str, Any] | None:
    if client is None:
        return None

    masked = dict(client)
    for key in ("id", "token", "created_at", "security_token"):
        masked.pop(key, None)

    masked["cpf"] = mask_cpf(masked.get("cpf"))
    masked["email"] = mask_email(masked.get("email"))
    masked["cel"] = mask_cel(masked.get("cel"))
    masked["birthday"] = mask_birthday(masked.get("birthday"))
    return masked


def voucher_mask_info(row: dict[str, Any] | None) -> dict[str, Any] | None:
    if row is None:
        return None

    masked = dict(row)
    masked["name"] = mask_name(masked.get("name"))
    masked["cpf"] = mask_cpf(masked.get("cpf"))
    return masked
