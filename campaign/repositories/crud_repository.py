"""Generic repository for table-backed CRUD with search, date range and paging."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from math import ceil
from typing import Any, Generic, TypeVar

from sqlalchemy import String, cast, func, select
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from campaign.models.base import Base
from campaign.utils.query import ListFilters

ModelT = TypeVar("ModelT", bound=Base)


@dataclass(frozen=True)
class Page(Generic[ModelT]):
    items: Sequence[Any]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return ceil(self.total / self.limit) if self.limit else 0

    def pagination(self) -> dict[str, int]:
        return {
            "totalEntities": self.total,
            "totalPages": self.total_pages,
            "currentPage": self.page,
            "limit": self.limit,
        }


class CrudRepository(Generic[ModelT]):
    """CRUD operations for one model class."""

    def __init__(
        self,
        model: type[ModelT],
        *,
        searchable_fields: Sequence[str] = (),
        default_order_by: str = "id",
        default_order_direction: str = "asc",
    ) -> None:
        self.model = model
        self.searchable_fields = tuple(searchable_fields)
        self.default_order_by = default_order_by
        self.default_order_direction = default_order_direction

    def _column(self, name: str):
        return self.model.__table__.columns.get(name)

    def apply_filters(self, stmt: Select, filters: ListFilters) -> Select:
        for field_name in self.searchable_fields:
            value = filters.search.get(field_name)
            if value is None or value == "":
                continue
            column = self._column(field_name)
            if column is None:
                continue
            stmt = stmt.where(cast(column, String).ilike(f"%{value}%"))

        created_at = self._column("created_at")
        if created_at is not None:
            if filters.start_date is not None:
                stmt = stmt.where(created_at >= filters.start_date)
            if filters.end_date is not None:
                stmt = stmt.where(created_at <= filters.end_date)
        return stmt

    def apply_order(self, stmt: Select, filters: ListFilters) -> Select:
        # Only real column names are accepted, anything else falls back to the default.
        column = self._column(filters.order_by or "") if filters.order_by else None
        if column is None:
            column = self._column(self.default_order_by)
        direction = filters.order_direction or self.default_order_direction
        ordered = column.desc() if direction == "desc" else column.asc()
        return stmt.order_by(ordered, self._column("id").asc())

    def list_page(self, session: Session, filters: ListFilters) -> Page[ModelT]:
        base = self.apply_filters(select(self.model), filters)
        total = int(session.scalar(select(func.count()).select_from(base.subquery())) or 0)

        stmt = self.apply_order(base, filters).limit(filters.limit).offset(filters.offset)
        items = list(session.scalars(stmt).all())
        return Page(items=items, total=total, page=filters.page, limit=filters.limit)

    def list_all(self, session: Session, filters: ListFilters | None = None) -> list[ModelT]:
        filters = filters or ListFilters()
        stmt = self.apply_filters(select(self.model), filters).order_by(self._column("id").asc())
        return list(session.scalars(stmt).all())

    def get_by_id(self, session: Session, entity_id: int) -> ModelT | None:
        return session.get(self.model, entity_id)

    def exists(self, session: Session, *, exclude_id: int | None = None, **criteria: Any) -> bool:
        stmt = select(self.model.id).filter_by(**criteria)
        if exclude_id is not None:
            stmt = stmt.where(self.model.id != exclude_id)
        return session.scalar(stmt.limit(1)) is not None

    def create(self, session: Session, **values: Any) -> ModelT:
        entity = self.model(**values)
        session.add(entity)
        session.flush()  # assign PK
        return entity

    def update(self, session: Session, entity: ModelT, **values: Any) -> ModelT:
        for key, value in values.items():
            setattr(entity, key, value)
        session.flush()
        return entity

    def delete(self, session: Session, entity: ModelT) -> None:
        session.delete(entity)
        session.flush()
