"""Repository layer for GameOpportunity persistence."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from campaign.models.game_opportunity import GameOpportunity
from campaign.models.invoice import Invoice
from campaign.models.voucher import Voucher
from campaign.repositories.crud_repository import CrudRepository


class GameOpportunityRepository(CrudRepository[GameOpportunity]):
    def __init__(self) -> None:
        super().__init__(GameOpportunity, default_order_by="created_at", default_order_direction="desc")

    def oldest_available_for_client(self, session: Session, client_id: int) -> GameOpportunity | None:
        """Oldest active, unused opportunity of the client, locked for update."""

        stmt = (
            select(GameOpportunity)
            .join(Invoice, Invoice.id == GameOpportunity.invoice_id)
            .where(
                Invoice.client_id == client_id,
                GameOpportunity.active.is_(True),
                GameOpportunity.used_at.is_(None),
            )
            .order_by(GameOpportunity.created_at.asc(), GameOpportunity.id.asc())
            .limit(1)
            .with_for_update(of=GameOpportunity)
        )
        return session.scalars(stmt).first()

    def consume(self, session: Session, opportunity_id: int, now: datetime) -> bool:
        """Mark the opportunity used unless another draw already did."""

        result = session.execute(
            update(GameOpportunity)
            .where(GameOpportunity.id == opportunity_id, GameOpportunity.used_at.is_(None))
            .values(used_at=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def client_has_won(self, session: Session, client_id: int) -> bool:
        stmt = (
            select(Voucher.id)
            .join(GameOpportunity, GameOpportunity.id == Voucher.game_opportunity_id)
            .join(Invoice, Invoice.id == GameOpportunity.invoice_id)
            .where(Invoice.client_id == client_id)
            .limit(1)
        )
        return session.scalar(stmt) is not None
