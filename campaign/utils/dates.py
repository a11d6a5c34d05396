"""Date/time helpers."""

from __future__ import annotations

import re
import time
from datetime import date, datetime, timedelta

_DURATION_RE = re.compile(r"^(\d+)([mhd])$")
_MULTIPLIERS = {"m": 60, "h": 60 * 60, "d": 24 * 60 * 60}


def parse_duration(value: str) -> timedelta:
    """Parse "15m", "1h" or "7d" into a timedelta."""

    match = _DURATION_RE.match(str(value).strip())
    if not match:
        raise ValueError('Invalid duration format. Use "15m", "1h", "7d", etc.')
    return timedelta(seconds=int(match.group(1)) * _MULTIPLIERS[match.group(2)])


def expiration_timestamp(duration: str, now: float | None = None) -> int:
    """UNIX timestamp (seconds) ``duration`` from now."""

    base = time.time() if now is None else now
    return int(base + parse_duration(duration).total_seconds())


def subtract_years(day: date, years: int) -> date:
    try:
        return day.replace(year=day.year - years)
    except ValueError:
        # Feb 29 on a non-leap target year.
        return day.replace(year=day.year - years, day=28)


def format_br_datetime(value: datetime | date | None) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.strftime("%d/%m/%Y %H:%M:%S")
    return value.strftime("%d/%m/%Y")


def format_br_date(value: datetime | date | None) -> str:
    if value is None:
        return "-"
    return value.strftime("%d/%m/%Y")
