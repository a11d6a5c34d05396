"""Repository layer for Invoice persistence."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from campaign.models.invoice import Invoice
from campaign.repositories.crud_repository import CrudRepository


class InvoiceRepository(CrudRepository[Invoice]):
    def __init__(self) -> None:
        super().__init__(
            Invoice,
            searchable_fields=("fiscal_code", "status"),
            default_order_by="created_at",
            default_order_direction="desc",
        )

    def fiscal_code_exists(self, session: Session, fiscal_code: str, exclude_id: int | None = None) -> bool:
        return self.exists(session, exclude_id=exclude_id, fiscal_code=fiscal_code)

    def list_for_client(self, session: Session, client_id: int) -> list[Invoice]:
        stmt = (
            select(Invoice)
            .where(Invoice.client_id == client_id)
            .options(selectinload(Invoice.draw_numbers), selectinload(Invoice.game_opportunities))
            .order_by(Invoice.created_at.desc(), Invoice.id.desc())
        )
        return list(session.scalars(stmt).all())
