"""Game opportunity ORM model: one draw attempt granted by an invoice."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from campaign.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from campaign.models.draw_number import DrawNumber
    from campaign.models.invoice import Invoice
    from campaign.models.voucher import Voucher


class GameOpportunity(TimestampMixin, Base):
    __tablename__ = "game_opportunities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    invoice_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=True, index=True
    )
    gift: Mapped[str | None] = mapped_column(String(255), nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    used_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    invoice: Mapped[Optional["Invoice"]] = relationship(back_populates="game_opportunities")
    draw_number: Mapped[Optional["DrawNumber"]] = relationship(back_populates="game_opportunity")
    voucher: Mapped[Optional["Voucher"]] = relationship(back_populates="game_opportunity")
