"""Admin use-cases for draw numbers."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from campaign.errors import ConflictError, NotFoundError, ValidationError
from campaign.models.draw_number import DrawNumber
from campaign.repositories.crud_repository import Page
from campaign.repositories.draw_number_repository import DrawNumberRepository
from campaign.repositories.game_opportunity_repository import GameOpportunityRepository
from campaign.repositories.invoice_repository import InvoiceRepository
from campaign.services.crud_service import CrudService
from campaign.services.invoice_service import DRAW_NUMBER_WIDTH
from campaign.utils.numbers import format_number_with_zeros
from campaign.utils.query import ListFilters


class DrawNumberService(CrudService[DrawNumber]):
    entity_type = "draw_numbers"
    label = "Número da sorte"

    def __init__(self, repository: DrawNumberRepository | None = None) -> None:
        self._numbers = repository or DrawNumberRepository()
        super().__init__(self._numbers)
        self._invoices = InvoiceRepository()
        self._opportunities = GameOpportunityRepository()

    def _validate(self, session: Session, data: dict[str, Any], exclude_id: int | None = None) -> dict[str, Any]:
        if data.get("invoice_id") is not None and self._invoices.get_by_id(session, data["invoice_id"]) is None:
            raise ValidationError("A invoice com o ID fornecido não existe.")

        opportunity_id = data.get("game_opportunity_id")
        if opportunity_id is not None and self._opportunities.get_by_id(session, opportunity_id) is None:
            raise ValidationError("A oportunidade de jogo informada não existe.")

        if data.get("number") is not None:
            number = format_number_with_zeros(int(data["number"]), DRAW_NUMBER_WIDTH)
            if self._numbers.number_exists(session, number, exclude_id=exclude_id):
                raise ConflictError("Este número da sorte já existe.")
            data["number"] = number
        return data

    def prepare_create(self, session: Session, data: dict[str, Any]) -> dict[str, Any]:
        return self._validate(session, data)

    def prepare_update(self, session: Session, entity: DrawNumber, data: dict[str, Any]) -> dict[str, Any]:
        return self._validate(session, data, exclude_id=entity.id)

    def list_joined(self, session: Session, filters: ListFilters) -> Page[Any]:
        return self._numbers.list_joined_page(session, filters)

    def get_joined(self, session: Session, draw_number_id: int) -> tuple[Any, ...]:
        row = self._numbers.get_joined(session, draw_number_id)
        if row is None:
            raise NotFoundError(message=f"{self.label} não encontrado.")
        return row
