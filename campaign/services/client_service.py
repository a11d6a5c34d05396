"""Client use-cases: admin CRUD plus the web client's own profile."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from campaign.errors import ConflictError, EmailDeliveryError, NotFoundError
from campaign.models.base import utcnow
from campaign.models.client import Client
from campaign.repositories.client_repository import ClientRepository
from campaign.repositories.game_opportunity_repository import GameOpportunityRepository
from campaign.services.auth_service import new_client_token
from campaign.services.crud_service import CrudService
from campaign.services.email_service import EmailService

logger = logging.getLogger(__name__)

_UNIQUE_FIELDS = {
    "cpf": "Este CPF já está em uso.",
    "email": "Este email já está em uso.",
    "cel": "Este celular já está em uso.",
}


class ClientService(CrudService[Client]):
    entity_type = "clients"
    label = "Cliente"

    def __init__(
        self,
        email_service: EmailService | None = None,
        repository: ClientRepository | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._clients = repository or ClientRepository()
        super().__init__(self._clients)
        self._email = email_service
        self._clock = clock
        self._opportunities = GameOpportunityRepository()

    def _check_unique(self, session: Session, data: Mapping[str, Any], exclude_id: int | None = None) -> None:
        for field_name, message in _UNIQUE_FIELDS.items():
            value = data.get(field_name)
            if value and self._clients.exists(session, exclude_id=exclude_id, **{field_name: value}):
                raise ConflictError(message, details={field_name: [message]})

    def prepare_create(self, session: Session, data: dict[str, Any]) -> dict[str, Any]:
        self._check_unique(session, data)
        data["token"] = new_client_token()
        return data

    def prepare_update(self, session: Session, entity: Client, data: dict[str, Any]) -> dict[str, Any]:
        self._check_unique(session, data, exclude_id=entity.id)
        return data

    def before_delete(self, session: Session, entity: Client) -> None:
        if self._opportunities.client_has_won(session, entity.id):
            raise ConflictError("Cliente premiado com voucher não pode ser removido.")

    # -- web client --------------------------------------------------------

    def get_by_token(self, session: Session, token: str) -> Client:
        client = self._clients.get_by_token(session, token)
        if client is None:
            raise NotFoundError("Cliente não encontrado.")
        return client

    def summary(self, session: Session, token: str) -> dict[str, int]:
        client = self.get_by_token(session, token)
        total, not_used = self._clients.count_opportunities(session, client.id)
        return {
            "opportunities_total": total,
            "opportunities_not_used": not_used,
            "draw_numbers_total": self._clients.count_draw_numbers(session, client.id),
            "invoices_total": self._clients.count_invoices(session, client.id),
        }

    def update_web_profile(self, session: Session, token: str, data: Mapping[str, Any]) -> Client:
        """Complete the pre-registration. The first known e-mail triggers a welcome message."""

        client = self.get_by_token(session, token)
        self._check_unique(session, data, exclude_id=client.id)

        client.is_pre_register = False
        client.name = data.get("name")
        client.birthday = data.get("birthday")
        client.cel = data.get("cel")
        if data.get("email"):
            client.email = data["email"]
        session.flush()

        if client.email and client.welcome_email_sended_at is None:
            self._send_welcome(client)
        return client

    def _send_welcome(self, client: Client) -> None:
        if self._email is None:
            return
        try:
            self._email.send_welcome_email(client.email or "", client.name or "")
        except EmailDeliveryError:
            logger.warning("Welcome e-mail to client %s failed", client.id)
            return
        client.welcome_email_sended_at = self._clock()
