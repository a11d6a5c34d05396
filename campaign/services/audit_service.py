"""Audit trail of administrative writes and exports."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from campaign.repositories.audit_repository import AuditRepository

logger = logging.getLogger(__name__)

_repo = AuditRepository()


def log_activity(
    session: Session,
    user_id: int | None,
    action: str,
    entity_type: str | None = None,
    entity_id: Any | None = None,
    details: dict[str, Any] | None = None,
) -> None:
    """Record an audit row in the caller's transaction."""

    _repo.add(
        session,
        user_id=user_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        details=details,
    )
    logger.info("Audit %s on %s %s by user %s", action, entity_type, entity_id, user_id)
