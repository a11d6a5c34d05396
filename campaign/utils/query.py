"""Parsing of list/export query-string filters.

Accepted parameters: ``page``, ``limit``, ``search`` (JSON object of
field -> substring), ``startDate``, ``endDate``, ``orderBy`` and
``orderDirection``.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
MAX_LIMIT = 500


def to_snake_case(value: str) -> str:
    return re.sub(r"[A-Z]", lambda m: "_" + m.group(0).lower(), value)


@dataclass(frozen=True)
class ListFilters:
    search: dict[str, Any] = field(default_factory=dict)
    page: int = 1
    limit: int = DEFAULT_LIMIT
    start_date: datetime | None = None
    end_date: datetime | None = None
    order_by: str | None = None
    order_direction: str | None = None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def describe(self) -> dict[str, Any]:
        """Active filters, as shown in export reports and audit rows."""

        out: dict[str, Any] = {"search": {k: v for k, v in self.search.items() if v not in (None, "")}}
        if self.start_date is not None:
            out["startDate"] = self.start_date.isoformat()
        if self.end_date is not None:
            out["endDate"] = self.end_date.isoformat()
        return out


def _parse_int(raw: Any, default: int, *, minimum: int = 1, maximum: int | None = None) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    if value < minimum:
        return default
    if maximum is not None:
        value = min(value, maximum)
    return value


def _parse_date(raw: str | None) -> date | None:
    if not raw:
        return None
    try:
        return date.fromisoformat(str(raw)[:10])
    except ValueError:
        logger.warning("Ignoring invalid date filter: %r", raw)
        return None


def parse_search(raw: str | None) -> dict[str, Any]:
    if not raw:
        return {}
    try:
        parsed = json.loads(raw)
    except ValueError:
        logger.warning("Ignoring invalid search JSON: %r", raw)
        return {}
    if not isinstance(parsed, dict):
        return {}
    return {to_snake_case(str(k)): v for k, v in parsed.items()}


def parse_list_filters(args: Mapping[str, Any]) -> ListFilters:
    start = _parse_date(args.get("startDate"))
    end = _parse_date(args.get("endDate"))

    direction = str(args.get("orderDirection") or "").strip().lower() or None
    if direction not in (None, "asc", "desc"):
        direction = None

    order_by = args.get("orderBy")
    return ListFilters(
        search=parse_search(args.get("search")),
        page=_parse_int(args.get("page"), 1),
        limit=_parse_int(args.get("limit"), DEFAULT_LIMIT, maximum=MAX_LIMIT),
        start_date=datetime.combine(start, time.min) if start else None,
        # End date is inclusive: up to the last microsecond of that day.
        end_date=datetime.combine(end, time.max) if end else None,
        order_by=to_snake_case(str(order_by)) if order_by else None,
        order_direction=direction,
    )
