"""Repository layer for Client persistence."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from campaign.models.client import Client
from campaign.models.draw_number import DrawNumber
from campaign.models.game_opportunity import GameOpportunity
from campaign.models.invoice import Invoice
from campaign.repositories.crud_repository import CrudRepository


class ClientRepository(CrudRepository[Client]):
    def __init__(self) -> None:
        super().__init__(
            Client,
            searchable_fields=("name", "cpf", "cel", "email"),
            default_order_by="name",
        )

    def get_by_token(self, session: Session, token: str) -> Client | None:
        return session.scalars(select(Client).where(Client.token == token)).first()

    def lock_for_draw(self, session: Session, client_id: int) -> None:
        """Row lock held until commit; draws of one client run one at a time."""

        session.scalar(select(Client.id).where(Client.id == client_id).with_for_update())

    def get_by_cpf(self, session: Session, cpf: str) -> Client | None:
        return session.scalars(select(Client).where(Client.cpf == cpf)).first()

    def count_opportunities(self, session: Session, client_id: int) -> tuple[int, int]:
        """(total, not used) game opportunities of a client."""

        stmt = (
            select(
                func.count(GameOpportunity.id),
                func.count(GameOpportunity.id).filter(GameOpportunity.used_at.is_(None)),
            )
            .join(Invoice, Invoice.id == GameOpportunity.invoice_id)
            .where(Invoice.client_id == client_id)
        )
        total, not_used = session.execute(stmt).one()
        return int(total or 0), int(not_used or 0)

    def count_draw_numbers(self, session: Session, client_id: int) -> int:
        stmt = (
            select(func.count(DrawNumber.id))
            .join(Invoice, Invoice.id == DrawNumber.invoice_id)
            .where(Invoice.client_id == client_id)
        )
        return int(session.scalar(stmt) or 0)

    def count_invoices(self, session: Session, client_id: int) -> int:
        return int(session.scalar(select(func.count(Invoice.id)).where(Invoice.client_id == client_id)) or 0)
