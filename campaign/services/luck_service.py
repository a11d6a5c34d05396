"""The "try my luck" draw.

The client's row is locked so its draws run one at a time. Its oldest
unused opportunity is consumed, and when the client has never won, the
oldest released voucher is claimed for it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from campaign.db import atomic
from campaign.errors import EmailDeliveryError, NoOpportunityError, NotFoundError
from campaign.models.base import utcnow
from campaign.models.client import Client
from campaign.models.game_opportunity import GameOpportunity
from campaign.models.voucher import Voucher
from campaign.repositories.client_repository import ClientRepository
from campaign.repositories.game_opportunity_repository import GameOpportunityRepository
from campaign.repositories.voucher_repository import VoucherRepository
from campaign.services.email_service import EmailService

logger = logging.getLogger(__name__)

WIN_MESSAGE = "Parabéns! Você ganhou um voucher."
LOSS_MESSAGE = "Não foi desta vez"
OPPORTUNITY_ATTEMPTS = 3


@dataclass(frozen=True)
class LuckResult:
    win: bool
    message: str
    opportunity_id: int
    voucher: Voucher | None = None


class LuckService:
    def __init__(
        self,
        email_service: EmailService | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._email = email_service
        self._clock = clock
        self._clients = ClientRepository()
        self._opportunities = GameOpportunityRepository()
        self._vouchers = VoucherRepository()

    def try_my_luck(self, session: Session, client_token: str) -> LuckResult:
        client = self._clients.get_by_token(session, client_token)
        if client is None:
            raise NotFoundError("Cliente não encontrado.")

        with atomic(session):
            self._clients.lock_for_draw(session, client.id)
            now = self._clock()
            opportunity = self._take_opportunity(session, client.id, now)
            voucher: Voucher | None = None

            # Already-won and sold-out both end as the same loss.
            if not self._opportunities.client_has_won(session, client.id):
                candidate = self._vouchers.lock_next_claimable(session, now)
                if candidate is not None and self._vouchers.claim(session, candidate.id, opportunity.id, now):
                    session.refresh(candidate)
                    voucher = candidate

            opportunity.gift = WIN_MESSAGE if voucher is not None else LOSS_MESSAGE
            opportunity.used_at = now
            session.flush()

        result = LuckResult(
            win=voucher is not None,
            message=opportunity.gift,
            opportunity_id=opportunity.id,
            voucher=voucher,
        )

        if voucher is not None:
            logger.info("Client %s won voucher %s with opportunity %s", client.id, voucher.id, opportunity.id)
            self._notify_winner(session, client, voucher)
        return result

    def _notify_winner(self, session: Session, client: Client, voucher: Voucher) -> None:
        if self._email is None or not client.email:
            return
        try:
            self._email.send_voucher_winner_email(client.email, client.name or "", voucher.coupom, voucher)
        except EmailDeliveryError:
            logger.warning("Voucher %s won by client %s, but the e-mail failed", voucher.id, client.id)
            return
        with atomic(session):
            voucher.email_sended_at = self._clock()

    def _take_opportunity(self, session: Session, client_id: int, now: datetime) -> GameOpportunity:
        """Consume the oldest available opportunity of the client.

        Without row locks two draws can pick the same row; the one whose
        conditional update misses picks again.
        """

        for _ in range(OPPORTUNITY_ATTEMPTS):
            opportunity = self._opportunities.oldest_available_for_client(session, client_id)
            if opportunity is None:
                raise NoOpportunityError()
            if self._opportunities.consume(session, opportunity.id, now):
                return opportunity
        raise NoOpportunityError()
