"""Repository layer for back-office users."""

from __future__ import annotations

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from campaign.models.user import Role, User
from campaign.repositories.crud_repository import CrudRepository


class UserRepository(CrudRepository[User]):
    def __init__(self) -> None:
        super().__init__(User, default_order_by="created_at", default_order_direction="desc")

    def get_by_email(self, session: Session, email: str) -> User | None:
        return session.scalars(select(User).where(User.email == email)).first()

    def email_or_username_taken(self, session: Session, email: str | None, username: str) -> bool:
        conditions = [User.username == username]
        if email:
            conditions.append(User.email == email)
        return session.scalar(select(User.id).where(or_(*conditions)).limit(1)) is not None

    def get_role(self, session: Session, name: str) -> Role | None:
        return session.scalars(select(Role).where(Role.name == name)).first()

    def ensure_roles(self, session: Session, names: tuple[str, ...]) -> None:
        existing = set(session.scalars(select(Role.name)).all())
        for name in names:
            if name not in existing:
                session.add(Role(name=name))
        session.flush()
