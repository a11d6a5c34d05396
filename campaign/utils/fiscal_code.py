"""Fiscal code (NFC-e / NF-e access key) validation.

An access key has 44 digits; the last one is a modulo-11 check digit over
the first 43, weighted 2..9 from right to left.
"""

from __future__ import annotations

from campaign.utils.strings import only_digits

ACCESS_KEY_LENGTH = 44


def normalize_fiscal_code(value: str) -> str:
    return only_digits(value)


def compute_check_digit(body: str) -> int:
    total = 0
    weight = 2
    for ch in reversed(body):
        total += int(ch) * weight
        weight = 2 if weight == 9 else weight + 1
    remainder = total % 11
    return 0 if remainder < 2 else 11 - remainder


def is_valid_fiscal_code(value: str | None) -> bool:
    if not value:
        return False
    digits = normalize_fiscal_code(value)
    if len(digits) != ACCESS_KEY_LENGTH:
        return False
    return compute_check_digit(digits[:-1]) == int(digits[-1])
