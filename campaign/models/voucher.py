"""Voucher ORM model.

``game_opportunity_id`` is unique: a voucher is claimed by at most one
opportunity, and only once its ``draw_date`` has passed.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from campaign.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from campaign.models.game_opportunity import GameOpportunity


class Voucher(TimestampMixin, Base):
    __tablename__ = "vouchers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    coupom: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    draw_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    voucher_value: Mapped[int | None] = mapped_column(Integer, nullable=True)
    game_opportunity_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("game_opportunities.id", ondelete="SET NULL"), nullable=True, unique=True
    )
    email_sended_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    game_opportunity: Mapped[Optional["GameOpportunity"]] = relationship(back_populates="voucher")
