"""Back-office user administration."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from campaign.models.user import User
from campaign.repositories.user_repository import UserRepository
from campaign.services.audit_service import log_activity
from campaign.services.auth_service import AuthService
from campaign.services.crud_service import CrudService


class UserService(CrudService[User]):
    entity_type = "users"
    label = "Usuário"

    def __init__(self, auth_service: AuthService | None = None) -> None:
        super().__init__(UserRepository())
        self._auth = auth_service or AuthService()

    def create(self, session: Session, data: Any, *, user_id: int | None = None) -> User:
        user = self._auth.register_user(
            session,
            username=data["username"],
            email=data["email"],
            password=data["password"],
            role=data.get("role") or "user",
        )
        safe = {k: v for k, v in dict(data).items() if k != "password"}
        log_activity(session, user_id, "CREATE_USERS", self.entity_type, user.id, {"request_body": safe})
        return user
