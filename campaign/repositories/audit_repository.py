"""Repository layer for the audit trail."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from campaign.models.audit_log import AuditLog


class AuditRepository:
    def add(
        self,
        session: Session,
        *,
        user_id: int | None,
        action: str,
        entity_type: str | None,
        entity_id: Any | None,
        details: dict[str, Any] | None,
    ) -> AuditLog:
        entry = AuditLog(
            user_id=user_id,
            action=action,
            entity_type=entity_type,
            entity_id=str(entity_id) if entity_id is not None else None,
            details=details,
        )
        # Flushed together with the change it describes.
        session.add(entry)
        return entry
