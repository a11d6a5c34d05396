"""Generic admin CRUD use-cases with audit rows.

Subclasses set ``entity_type``/``label`` and override the ``prepare_*``
hooks for entity-specific validation.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Generic

from sqlalchemy.orm import Session

from campaign.errors import NotFoundError
from campaign.repositories.crud_repository import CrudRepository, ModelT, Page
from campaign.services.audit_service import log_activity
from campaign.utils.query import ListFilters


def to_jsonable(data: Mapping[str, Any]) -> dict[str, Any]:
    """Dates and other scalars become strings so the row fits a JSON column."""

    return json.loads(json.dumps(dict(data), default=str))


class CrudService(Generic[ModelT]):
    entity_type = "records"
    label = "Registro"

    def __init__(self, repository: CrudRepository[ModelT]) -> None:
        self._repo = repository

    def prepare_create(self, session: Session, data: dict[str, Any]) -> dict[str, Any]:
        return data

    def prepare_update(self, session: Session, entity: ModelT, data: dict[str, Any]) -> dict[str, Any]:
        return data

    def before_delete(self, session: Session, entity: ModelT) -> None:
        return None

    def list(self, session: Session, filters: ListFilters) -> Page[ModelT]:
        return self._repo.list_page(session, filters)

    def list_all(self, session: Session, filters: ListFilters | None = None) -> list[ModelT]:
        return self._repo.list_all(session, filters)

    def get(self, session: Session, entity_id: int) -> ModelT:
        entity = self._repo.get_by_id(session, entity_id)
        if entity is None:
            raise NotFoundError(message=f"{self.label} não encontrado.")
        return entity

    def create(self, session: Session, data: Mapping[str, Any], *, user_id: int | None = None) -> ModelT:
        values = self.prepare_create(session, dict(data))
        entity = self._repo.create(session, **values)
        log_activity(
            session,
            user_id,
            f"CREATE_{self.entity_type.upper()}",
            self.entity_type,
            entity.id,
            {"request_body": to_jsonable(data)},
        )
        return entity

    def update(
        self, session: Session, entity_id: int, data: Mapping[str, Any], *, user_id: int | None = None
    ) -> ModelT:
        entity = self.get(session, entity_id)
        values = self.prepare_update(session, entity, dict(data))
        self._repo.update(session, entity, **values)
        log_activity(
            session,
            user_id,
            f"UPDATE_{self.entity_type.upper()}",
            self.entity_type,
            entity.id,
            {"request_body": to_jsonable(data)},
        )
        return entity

    def delete(self, session: Session, entity_id: int, *, user_id: int | None = None) -> None:
        entity = self.get(session, entity_id)
        self.before_delete(session, entity)
        self._repo.delete(session, entity)
        log_activity(session, user_id, f"DELETE_{self.entity_type.upper()}", self.entity_type, entity_id)
