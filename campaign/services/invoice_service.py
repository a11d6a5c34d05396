"""Invoice ingestion: sales lookup, eligibility, chance allocation.

An invoice with N chances gets N game opportunities and N draw numbers, all
written in the same transaction as the invoice itself.
"""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from campaign.db import atomic
from campaign.errors import ConflictError, DrawNumberExhaustedError, NotFoundError, ValidationError
from campaign.models.invoice import Invoice
from campaign.repositories.client_repository import ClientRepository
from campaign.repositories.crud_repository import Page
from campaign.repositories.draw_number_repository import DrawNumberRepository
from campaign.repositories.game_opportunity_repository import GameOpportunityRepository
from campaign.repositories.invoice_repository import InvoiceRepository
from campaign.repositories.product_repository import ProductRepository
from campaign.services.sales_api import SaleSummary, SalesApiClient
from campaign.utils.fiscal_code import is_valid_fiscal_code, normalize_fiscal_code
from campaign.utils.numbers import format_number_with_zeros
from campaign.utils.query import ListFilters

logger = logging.getLogger(__name__)

DRAW_NUMBER_WIDTH = 7
INVOICE_STATUSES = ("registered", "approved", "rejected")


def compute_chance_count(
    value: float,
    threshold: float,
    *,
    has_item: bool = False,
    has_creditcard: bool = False,
    has_partner_code: bool = False,
) -> int:
    """floor(value / threshold), doubled when any bonus flag holds."""

    if threshold <= 0:
        raise ValueError("threshold must be positive")

    chances = max(math.floor(value / threshold), 0)
    if has_item or has_creditcard or has_partner_code:
        chances *= 2
    return chances


@dataclass(frozen=True)
class ChanceRules:
    min_value: float = 200.0
    qualifying_payment_methods: tuple[str, ...] = ("03",)
    partner_codes: tuple[str, ...] = ()

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "ChanceRules":
        return cls(
            min_value=float(config.get("MIN_INVOICE_VALUE") or 200.0),
            qualifying_payment_methods=tuple(config.get("QUALIFYING_PAYMENT_METHODS") or ()),
            partner_codes=tuple(config.get("PARTNER_CODES") or ()),
        )

    def qualifies_payment(self, payment_types: Iterable[str]) -> bool:
        accepted = set(self.qualifying_payment_methods)
        return any(p in accepted for p in payment_types)

    def accepts_partner_code(self, partner_code: str | None) -> bool:
        if not partner_code:
            return False
        if self.partner_codes:
            return partner_code in self.partner_codes
        return True


class DrawNumberGenerator:
    """Uniform sampling with re-sampling on collision, bounded by ``max_attempts``."""

    def __init__(
        self,
        minimum: int = 1,
        maximum: int = 9_999_999,
        max_attempts: int = 1000,
        randint: Callable[[int, int], int] | None = None,
        repository: DrawNumberRepository | None = None,
    ) -> None:
        if minimum > maximum:
            raise ValueError("minimum must be <= maximum")
        self._min = minimum
        self._max = maximum
        self._max_attempts = max_attempts
        self._randint = randint or random.randint
        self._repo = repository or DrawNumberRepository()

    @classmethod
    def from_config(cls, config: Mapping[str, Any], **kwargs: Any) -> "DrawNumberGenerator":
        return cls(
            minimum=int(config.get("DRAW_NUMBER_MIN") or 1),
            maximum=int(config.get("DRAW_NUMBER_MAX") or 9_999_999),
            max_attempts=int(config.get("DRAW_NUMBER_MAX_ATTEMPTS") or 1000),
            **kwargs,
        )

    def generate(self, session: Session, reserved: set[str]) -> str:
        """Return a number absent from the table and from ``reserved``; reserve it."""

        for _ in range(self._max_attempts):
            candidate = format_number_with_zeros(self._randint(self._min, self._max), DRAW_NUMBER_WIDTH)
            if candidate in reserved:
                continue
            if self._repo.number_exists(session, candidate):
                continue
            reserved.add(candidate)
            return candidate

        logger.error("Draw number space exhausted after %s attempts", self._max_attempts)
        raise DrawNumberExhaustedError(self._max_attempts)


class InvoiceService:
    """Invoice use-cases."""

    def __init__(
        self,
        sales_api: SalesApiClient,
        rules: ChanceRules | None = None,
        generator: DrawNumberGenerator | None = None,
        repository: InvoiceRepository | None = None,
    ) -> None:
        self._sales_api = sales_api
        self._rules = rules or ChanceRules()
        self._generator = generator or DrawNumberGenerator()
        self._repo = repository or InvoiceRepository()
        self._clients = ClientRepository()
        self._products = ProductRepository()
        self._opportunities = GameOpportunityRepository()
        self._draw_numbers = DrawNumberRepository()

    def register_invoice(self, session: Session, *, fiscal_code: str, client_id: int) -> Invoice:
        code = normalize_fiscal_code(fiscal_code)
        if not is_valid_fiscal_code(code):
            raise ValidationError("Código fiscal inválido.", details={"fiscal_code": fiscal_code})

        if self._repo.fiscal_code_exists(session, code):
            raise ConflictError("Nota fiscal já cadastrada.")

        client = self._clients.get_by_id(session, client_id)
        if client is None:
            raise NotFoundError("Cliente não encontrado.")

        sale = self._sales_api.fetch_sale(code)
        has_item = self._products.any_tracked(session, sale.eans)
        has_creditcard = self._rules.qualifies_payment(sale.payment_types)
        has_partner_code = self._rules.accepts_partner_code(sale.partner_code)

        if sale.total_value < self._rules.min_value:
            raise ValidationError(
                f"O valor mínimo da nota fiscal para participar é R$ {self._rules.min_value:.2f}.",
                details={"invoice_value": sale.total_value, "min_value": self._rules.min_value},
            )

        chances = compute_chance_count(
            sale.total_value,
            self._rules.min_value,
            has_item=has_item,
            has_creditcard=has_creditcard,
            has_partner_code=has_partner_code,
        )

        with atomic(session):
            invoice = self._repo.create(
                session,
                fiscal_code=code,
                client_id=client.id,
                invoice_value=sale.total_value,
                has_item=has_item,
                has_creditcard=has_creditcard,
                has_partner_code=has_partner_code,
                **_sale_details(sale),
                chances=chances,
            )

            reserved: set[str] = set()
            for _ in range(chances):
                opportunity = self._opportunities.create(session, invoice_id=invoice.id, active=True)
                number = self._generator.generate(session, reserved)
                self._draw_numbers.create(
                    session,
                    invoice_id=invoice.id,
                    game_opportunity_id=opportunity.id,
                    number=number,
                )

        logger.info("Invoice %s registered for client %s with %s chances", invoice.id, client.id, chances)
        return invoice

    def list_invoices(self, session: Session, filters: ListFilters) -> Page[Invoice]:
        return self._repo.list_page(session, filters)

    def list_for_client(self, session: Session, client_id: int) -> list[Invoice]:
        return self._repo.list_for_client(session, client_id)

    def get_invoice(self, session: Session, invoice_id: int) -> Invoice:
        invoice = self._repo.get_by_id(session, invoice_id)
        if invoice is None:
            raise NotFoundError(message=f"Nota fiscal {invoice_id} não encontrada.")
        return invoice

    def update_invoice(self, session: Session, invoice_id: int, data: Mapping[str, Any]) -> Invoice:
        """Admin correction. Only ``fiscal_code`` and ``status`` may change."""

        invoice = self.get_invoice(session, invoice_id)
        values: dict[str, Any] = {}

        if data.get("fiscal_code") is not None:
            code = normalize_fiscal_code(str(data["fiscal_code"]))
            if not is_valid_fiscal_code(code):
                raise ValidationError("Código fiscal inválido.", details={"fiscal_code": data["fiscal_code"]})
            if self._repo.fiscal_code_exists(session, code, exclude_id=invoice.id):
                raise ConflictError("Nota fiscal já cadastrada.")
            values["fiscal_code"] = code

        if data.get("status") is not None:
            values["status"] = str(data["status"])

        if not values:
            raise ValidationError("Nenhum campo para atualizar.")

        return self._repo.update(session, invoice, **values)

    def delete_invoice(self, session: Session, invoice_id: int) -> None:
        invoice = self.get_invoice(session, invoice_id)
        if any(o.voucher is not None for o in invoice.game_opportunities):
            raise ConflictError("Nota fiscal possui oportunidade premiada e não pode ser removida.")
        self._repo.delete(session, invoice)


def _sale_details(sale: SaleSummary) -> dict[str, Any]:
    return {
        "pdv": sale.pdv,
        "store": sale.store,
        "num_coupon": sale.num_coupon,
        "cnpj": sale.cnpj,
        "creditcard": sale.creditcard,
    }
