"""Repository layer for PageContent persistence."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from campaign.models.page_content import PageContent
from campaign.repositories.crud_repository import CrudRepository


class PageContentRepository(CrudRepository[PageContent]):
    def __init__(self) -> None:
        super().__init__(PageContent, default_order_by="title")

    def get_by_slug(self, session: Session, slug: str) -> PageContent | None:
        return session.scalars(select(PageContent).where(PageContent.slug == slug)).first()

    def slug_exists(self, session: Session, slug: str, exclude_id: int | None = None) -> bool:
        return self.exists(session, exclude_id=exclude_id, slug=slug)
