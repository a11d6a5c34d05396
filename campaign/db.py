"""SQLAlchemy engine + session management.

Uses a session-per-request pattern. Multi-step writes run inside
``atomic(session)`` so a failure never leaves partial rows behind.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from flask import Flask, g
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from campaign.models.base import Base


def create_app_engine(database_url: str) -> Engine:
    url = make_url(database_url)

    if url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:"):
        # One shared connection, otherwise every checkout sees an empty database.
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            future=True,
        )

    return create_engine(database_url, pool_pre_ping=True, future=True)


def seed_roles(session_factory: sessionmaker) -> None:
    """Insert the fixed role rows that do not exist yet."""

    from campaign.models.user import ROLES
    from campaign.repositories.user_repository import UserRepository

    with session_factory() as session, atomic(session):
        UserRepository().ensure_roles(session, ROLES)


def init_db(app: Flask) -> None:
    """Initialize database engine and per-request sessions."""

    engine = create_app_engine(str(app.config["DATABASE_URL"]))
    session_factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

    # Import models so they register with Base.metadata.
    from campaign import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    seed_roles(session_factory)

    app.extensions["engine"] = engine
    app.extensions["session_factory"] = session_factory

    @app.before_request
    def _open_session() -> None:
        g.db = session_factory()  # type: ignore[attr-defined]

    @app.teardown_request
    def _close_session(exc: BaseException | None) -> None:
        session: Session | None = getattr(g, "db", None)
        if session is None:
            return

        try:
            if exc is None:
                session.commit()
            else:
                session.rollback()
        finally:
            session.close()


def get_session() -> Session:
    """Get the current request's SQLAlchemy session."""

    session: Session | None = getattr(g, "db", None)
    if session is None:
        raise RuntimeError("Database session not initialized")
    return session


def rollback_session() -> None:
    """Discard pending work of the current request, if any."""

    session: Session | None = getattr(g, "db", None)
    if session is not None:
        session.rollback()


@contextmanager
def atomic(session: Session) -> Iterator[Session]:
    """Commit on success, roll back everything on any exception."""

    try:
        yield session
        session.commit()
    except BaseException:
        session.rollback()
        raise
