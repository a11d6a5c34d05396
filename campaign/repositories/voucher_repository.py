"""Repository layer for Voucher persistence, including the claim under lock."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from campaign.models.client import Client
from campaign.models.game_opportunity import GameOpportunity
from campaign.models.invoice import Invoice
from campaign.models.voucher import Voucher
from campaign.repositories.crud_repository import CrudRepository


def claimable_voucher_stmt(now: datetime):
    """Oldest released, unclaimed voucher; concurrent claimants skip locked rows."""

    return (
        select(Voucher)
        .where(Voucher.draw_date <= now, Voucher.game_opportunity_id.is_(None))
        .order_by(Voucher.draw_date.asc(), Voucher.id.asc())
        .limit(1)
        .with_for_update(skip_locked=True)
    )


class VoucherRepository(CrudRepository[Voucher]):
    def __init__(self) -> None:
        super().__init__(
            Voucher,
            searchable_fields=("coupom", "draw_date"),
            default_order_by="draw_date",
        )

    def lock_next_claimable(self, session: Session, now: datetime) -> Voucher | None:
        return session.scalars(claimable_voucher_stmt(now)).first()

    def claim(self, session: Session, voucher_id: int, opportunity_id: int, now: datetime) -> bool:
        """Link the voucher to the opportunity unless someone already did.

        Returns False when the voucher was claimed in the meantime.
        """

        result = session.execute(
            update(Voucher)
            .where(Voucher.id == voucher_id, Voucher.game_opportunity_id.is_(None))
            .values(game_opportunity_id=opportunity_id, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def opportunity_has_voucher(self, session: Session, opportunity_id: int, exclude_id: int | None = None) -> bool:
        return self.exists(session, exclude_id=exclude_id, game_opportunity_id=opportunity_id)

    def list_drawn(self, session: Session) -> list[dict[str, Any]]:
        stmt = (
            select(Voucher.draw_date, Client.name, Client.cpf)
            .join(GameOpportunity, GameOpportunity.id == Voucher.game_opportunity_id)
            .join(Invoice, Invoice.id == GameOpportunity.invoice_id)
            .join(Client, Client.id == Invoice.client_id)
            .where(Voucher.game_opportunity_id.is_not(None))
            .order_by(Voucher.draw_date.desc())
        )
        return [dict(row._mapping) for row in session.execute(stmt).all()]
