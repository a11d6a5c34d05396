"""Invoice ORM model.

One row per registered fiscal code. The chance count is derived once, when
the invoice is created, and never recomputed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, Boolean, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from campaign.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from campaign.models.client import Client
    from campaign.models.draw_number import DrawNumber
    from campaign.models.game_opportunity import GameOpportunity


class Invoice(TimestampMixin, Base):
    __tablename__ = "invoices"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    fiscal_code: Mapped[str] = mapped_column(String(60), nullable=False, unique=True)
    client_id: Mapped[int] = mapped_column(Integer, ForeignKey("clients.id", ondelete="CASCADE"), index=True)
    invoice_value: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    has_item: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    has_creditcard: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    has_partner_code: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    pdv: Mapped[int | None] = mapped_column(Integer, nullable=True)
    store: Mapped[int | None] = mapped_column(Integer, nullable=True)
    num_coupon: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    cnpj: Mapped[str | None] = mapped_column(String(18), nullable=True)
    creditcard: Mapped[str | None] = mapped_column(String(45), nullable=True)

    chances: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="registered")

    client: Mapped["Client"] = relationship(back_populates="invoices")
    game_opportunities: Mapped[list["GameOpportunity"]] = relationship(
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="GameOpportunity.id",
    )
    draw_numbers: Mapped[list["DrawNumber"]] = relationship(
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="DrawNumber.id",
    )
