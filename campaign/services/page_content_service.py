"""Page content use-cases. Slugs are derived from the title and kept unique."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from campaign.errors import ConflictError, NotFoundError, ValidationError
from campaign.models.page_content import PageContent
from campaign.repositories.page_content_repository import PageContentRepository
from campaign.services.crud_service import CrudService
from campaign.utils.strings import is_slug_format_valid, slugify

SLUG_MAX_LENGTH = 45


class PageContentService(CrudService[PageContent]):
    entity_type = "page_contents"
    label = "Conteúdo"

    def __init__(self, repository: PageContentRepository | None = None) -> None:
        self._pages = repository or PageContentRepository()
        super().__init__(self._pages)

    def unique_slug(self, session: Session, title: str, exclude_id: int | None = None) -> str:
        base = slugify(title)[:SLUG_MAX_LENGTH].strip("-") or "pagina"
        slug = base
        counter = 1
        while self._pages.slug_exists(session, slug, exclude_id=exclude_id):
            suffix = f"-{counter}"
            slug = base[: SLUG_MAX_LENGTH - len(suffix)].rstrip("-") + suffix
            counter += 1
        return slug

    def prepare_create(self, session: Session, data: dict[str, Any]) -> dict[str, Any]:
        data["slug"] = self.unique_slug(session, data["title"])
        return data

    def prepare_update(self, session: Session, entity: PageContent, data: dict[str, Any]) -> dict[str, Any]:
        slug = data.get("slug")
        if slug is None:
            return data
        if not is_slug_format_valid(slug, SLUG_MAX_LENGTH):
            raise ValidationError(
                "Slug inválido. Use apenas letras minúsculas, números e hífens.",
                details={"slug": [slug]},
            )
        if self._pages.slug_exists(session, slug, exclude_id=entity.id):
            raise ConflictError("Este slug já está em uso.")
        return data

    def get_by_slug(self, session: Session, slug: str) -> PageContent:
        page = self._pages.get_by_slug(session, slug)
        if page is None:
            raise NotFoundError("Conteúdo não encontrado.")
        return page
