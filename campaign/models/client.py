"""Client ORM model."""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Date, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from campaign.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from campaign.models.invoice import Invoice


class Client(TimestampMixin, Base):
    """Campaign participant, identified by CPF and an opaque token."""

    __tablename__ = "clients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    is_pre_register: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    cpf: Mapped[str] = mapped_column(String(14), nullable=False, unique=True)
    birthday: Mapped[date | None] = mapped_column(Date, nullable=True)
    cel: Mapped[str | None] = mapped_column(String(20), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    token: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)

    # Device binding for the web login.
    security_token: Mapped[str | None] = mapped_column(String(255), nullable=True)
    security_token_email_sended_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    updated_security_token_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    welcome_email_sended_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    email_sended_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    is_mega_winner: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    invoices: Mapped[list["Invoice"]] = relationship(back_populates="client", cascade="all, delete-orphan")
