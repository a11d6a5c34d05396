"""Admin use-cases for game opportunities."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from campaign.errors import ConflictError, ValidationError
from campaign.models.game_opportunity import GameOpportunity
from campaign.repositories.game_opportunity_repository import GameOpportunityRepository
from campaign.repositories.invoice_repository import InvoiceRepository
from campaign.services.crud_service import CrudService


class GameOpportunityService(CrudService[GameOpportunity]):
    entity_type = "game_opportunities"
    label = "Oportunidade de jogo"

    def __init__(self, repository: GameOpportunityRepository | None = None) -> None:
        super().__init__(repository or GameOpportunityRepository())
        self._invoices = InvoiceRepository()

    def _check_invoice(self, session: Session, data: dict[str, Any]) -> None:
        invoice_id = data.get("invoice_id")
        if invoice_id is not None and self._invoices.get_by_id(session, invoice_id) is None:
            raise ValidationError("A invoice com o ID fornecido não existe.")

    def prepare_create(self, session: Session, data: dict[str, Any]) -> dict[str, Any]:
        self._check_invoice(session, data)
        return data

    def prepare_update(self, session: Session, entity: GameOpportunity, data: dict[str, Any]) -> dict[str, Any]:
        self._check_invoice(session, data)
        if entity.voucher is not None and "invoice_id" in data and data["invoice_id"] != entity.invoice_id:
            raise ConflictError("Oportunidade premiada com voucher não pode mudar de nota fiscal.")
        return data

    def before_delete(self, session: Session, entity: GameOpportunity) -> None:
        if entity.voucher is not None:
            raise ConflictError("Oportunidade premiada com voucher não pode ser removida.")
