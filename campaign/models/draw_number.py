"""Draw number ORM model."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from campaign.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from campaign.models.game_opportunity import GameOpportunity
    from campaign.models.invoice import Invoice


class DrawNumber(TimestampMixin, Base):
    """Lottery-style number, unique across the whole table."""

    __tablename__ = "draw_numbers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    invoice_id: Mapped[int] = mapped_column(Integer, ForeignKey("invoices.id", ondelete="CASCADE"), index=True)
    game_opportunity_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("game_opportunities.id", ondelete="SET NULL"), nullable=True, unique=True
    )
    number: Mapped[str] = mapped_column(String(10), nullable=False, unique=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    winner_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    email_sended_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    invoice: Mapped["Invoice"] = relationship(back_populates="draw_numbers")
    game_opportunity: Mapped[Optional["GameOpportunity"]] = relationship(back_populates="draw_number")
