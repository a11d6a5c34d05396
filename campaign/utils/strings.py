"""String helpers: slugs, CPF checksum and link-token encoding."""

from __future__ import annotations

import base64
import json
import re
import unicodedata
from typing import Any

_SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def slugify(text: str) -> str:
    if not isinstance(text, str):
        return ""

    normalized = unicodedata.normalize("NFD", text.lower())
    without_accents = "".join(ch for ch in normalized if not unicodedata.combining(ch))
    slug = re.sub(r"\s+", "-", without_accents)
    slug = re.sub(r"[^\w\-]+", "", slug)
    slug = re.sub(r"-{2,}", "-", slug)
    return slug.strip("-")


def is_slug_format_valid(slug: str | None, max_length: int = 45) -> bool:
    if not slug or not isinstance(slug, str):
        return False
    if len(slug) > max_length:
        return False
    return bool(_SLUG_RE.match(slug))


def only_digits(value: str) -> str:
    return re.sub(r"\D", "", value or "")


def is_valid_cpf(cpf: str | None) -> bool:
    """Validate the two CPF check digits."""

    if not isinstance(cpf, str):
        return False
    digits = only_digits(cpf)
    if len(digits) != 11 or digits == digits[0] * 11:
        return False

    numbers = [int(d) for d in digits]

    def _check_digit(count: int) -> int:
        total = sum(n * (count + 1 - idx) for idx, n in enumerate(numbers[:count]))
        return (total * 10 % 11) % 10

    return _check_digit(9) == numbers[9] and _check_digit(10) == numbers[10]


def encode_array_to_base64(values: list[Any]) -> str:
    """Pack a list into a URL-safe base64 string (used in e-mailed links)."""

    raw = json.dumps(values, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii")


def decode_base64_to_array(token: str) -> list[Any]:
    """Inverse of ``encode_array_to_base64``; returns [] on garbage input."""

    try:
        padded = token + "=" * (-len(token) % 4)
        decoded = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8"))
    except (ValueError, UnicodeError):
        return []
    return decoded if isinstance(decoded, list) else []
