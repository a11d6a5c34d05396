"""Repository layer for DrawNumber persistence."""

from __future__ import annotations

from typing import Any

from sqlalchemy import String, cast, func, select
from sqlalchemy.orm import Session

from campaign.models.client import Client
from campaign.models.draw_number import DrawNumber
from campaign.models.invoice import Invoice
from campaign.repositories.crud_repository import CrudRepository, Page
from campaign.utils.query import ListFilters

# Search keys accepted by the admin listing, mapped to joined columns.
_SEARCH_COLUMNS = {
    "number": DrawNumber.number,
    "fiscal_code": Invoice.fiscal_code,
    "client_name": Client.name,
}


class DrawNumberRepository(CrudRepository[DrawNumber]):
    def __init__(self) -> None:
        super().__init__(DrawNumber, searchable_fields=("number",), default_order_by="created_at")

    def number_exists(self, session: Session, number: str, exclude_id: int | None = None) -> bool:
        return self.exists(session, exclude_id=exclude_id, number=number)

    def _joined(self):
        return (
            select(DrawNumber, Invoice.fiscal_code, Client.name)
            .join(Invoice, Invoice.id == DrawNumber.invoice_id)
            .join(Client, Client.id == Invoice.client_id)
        )

    def list_joined_page(self, session: Session, filters: ListFilters) -> Page[Any]:
        stmt = self._joined()
        for key, value in filters.search.items():
            column = _SEARCH_COLUMNS.get(key)
            if column is None or value in (None, ""):
                continue
            stmt = stmt.where(cast(column, String).ilike(f"%{value}%"))

        total = int(session.scalar(select(func.count()).select_from(stmt.subquery())) or 0)
        rows = session.execute(
            stmt.order_by(DrawNumber.created_at.desc(), DrawNumber.id.desc())
            .limit(filters.limit)
            .offset(filters.offset)
        ).all()
        return Page(items=[tuple(r) for r in rows], total=total, page=filters.page, limit=filters.limit)

    def get_joined(self, session: Session, draw_number_id: int) -> tuple[Any, ...] | None:
        row = session.execute(self._joined().where(DrawNumber.id == draw_number_id)).first()
        return tuple(row) if row is not None else None
