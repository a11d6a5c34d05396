"""Product use-cases."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from campaign.errors import ConflictError
from campaign.models.product import Product
from campaign.repositories.crud_repository import Page
from campaign.repositories.product_repository import ProductRepository
from campaign.services.crud_service import CrudService


class ProductService(CrudService[Product]):
    entity_type = "products"
    label = "Produto"

    def __init__(self, repository: ProductRepository | None = None) -> None:
        self._products = repository or ProductRepository()
        super().__init__(self._products)

    def _check_ean(self, session: Session, data: dict[str, Any], exclude_id: int | None = None) -> None:
        ean = data.get("ean")
        if ean and self._products.exists(session, exclude_id=exclude_id, ean=ean):
            raise ConflictError("Este EAN já está cadastrado.")

    def prepare_create(self, session: Session, data: dict[str, Any]) -> dict[str, Any]:
        self._check_ean(session, data)
        return data

    def prepare_update(self, session: Session, entity: Product, data: dict[str, Any]) -> dict[str, Any]:
        self._check_ean(session, data, exclude_id=entity.id)
        return data

    def search(self, session: Session, term: str, page: int, limit: int) -> Page[Product]:
        return self._products.search_page(session, term.strip(), page, limit)
