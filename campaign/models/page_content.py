"""Page content ORM model."""

from __future__ import annotations

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from campaign.models.base import Base, TimestampMixin


class PageContent(TimestampMixin, Base):
    __tablename__ = "page_contents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(45), nullable=False)
    slug: Mapped[str] = mapped_column(String(45), nullable=False, unique=True)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
