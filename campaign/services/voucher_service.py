"""Voucher use-cases: admin CRUD and the public list of drawn vouchers."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from campaign.errors import ConflictError, ValidationError
from campaign.models.voucher import Voucher
from campaign.repositories.game_opportunity_repository import GameOpportunityRepository
from campaign.repositories.voucher_repository import VoucherRepository
from campaign.services.crud_service import CrudService
from campaign.utils.masking import voucher_mask_info


class VoucherService(CrudService[Voucher]):
    entity_type = "vouchers"
    label = "Voucher"

    def __init__(self, repository: VoucherRepository | None = None) -> None:
        self._vouchers = repository or VoucherRepository()
        super().__init__(self._vouchers)
        self._opportunities = GameOpportunityRepository()

    def _check_coupom(self, session: Session, data: dict[str, Any], exclude_id: int | None = None) -> None:
        coupom = data.get("coupom")
        if coupom and self._vouchers.exists(session, exclude_id=exclude_id, coupom=coupom):
            raise ConflictError("Este código de cupom já está em uso.")

    def _check_link(self, session: Session, opportunity_id: int | None, exclude_id: int | None = None) -> None:
        if opportunity_id is None:
            return
        opportunity = self._opportunities.get_by_id(session, opportunity_id)
        if opportunity is None:
            raise ValidationError("A oportunidade de jogo informada não existe.")
        if self._vouchers.opportunity_has_voucher(session, opportunity_id, exclude_id=exclude_id):
            raise ConflictError("Esta oportunidade de jogo já está associada a outro voucher.")
        invoice = opportunity.invoice
        if invoice is not None and self._opportunities.client_has_won(session, invoice.client_id):
            raise ConflictError("O cliente desta oportunidade de jogo já ganhou um voucher.")

    def prepare_create(self, session: Session, data: dict[str, Any]) -> dict[str, Any]:
        self._check_coupom(session, data)
        self._check_link(session, data.get("game_opportunity_id"))
        return data

    def prepare_update(self, session: Session, entity: Voucher, data: dict[str, Any]) -> dict[str, Any]:
        self._check_coupom(session, data, exclude_id=entity.id)
        if "game_opportunity_id" in data and data["game_opportunity_id"] != entity.game_opportunity_id:
            # A claimed voucher stays with its opportunity for good.
            if entity.game_opportunity_id is not None:
                raise ConflictError("Voucher já resgatado não pode ser transferido.")
            self._check_link(session, data["game_opportunity_id"], exclude_id=entity.id)
        return data

    def list_drawn(self, session: Session) -> list[dict[str, Any]]:
        return [voucher_mask_info(row) for row in self._vouchers.list_drawn(session)]
