"""Repository layer for Product persistence."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from campaign.models.product import Product
from campaign.repositories.crud_repository import CrudRepository, Page


class ProductRepository(CrudRepository[Product]):
    def __init__(self) -> None:
        super().__init__(Product, searchable_fields=("ean", "description", "brand"), default_order_by="description")

    def any_tracked(self, session: Session, eans: Iterable[str]) -> bool:
        """True when at least one EAN belongs to a registered product."""

        wanted = {str(e).strip() for e in eans if e}
        if not wanted:
            return False
        stmt = select(Product.id).where(Product.ean.in_(wanted)).limit(1)
        return session.scalar(stmt) is not None

    def search_page(self, session: Session, term: str, page: int, limit: int) -> Page[Product]:
        stmt = select(Product)
        if term:
            like = f"%{term}%"
            stmt = stmt.where(or_(Product.description.ilike(like), Product.brand.ilike(like)))

        total = int(session.scalar(select(func.count()).select_from(stmt.subquery())) or 0)
        items = session.scalars(
            stmt.order_by(Product.description.asc(), Product.id.asc()).limit(limit).offset((page - 1) * limit)
        ).all()
        return Page(items=list(items), total=total, page=page, limit=limit)
