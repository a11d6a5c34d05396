"""Numeric formatting helpers."""

from __future__ import annotations


def format_number_with_zeros(number: int, length: int = 4) -> str:
    if isinstance(number, bool) or not isinstance(number, (int, float)):
        raise ValueError("number must be numeric")
    return str(int(number)).zfill(length)
