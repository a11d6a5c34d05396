"""Create database tables and seed roles in the configured database.

Reads DATABASE_URL (or PG* variables) from .env / environment.

Usage:
  python scripts/create_tables.py
  python scripts/create_tables.py --admin-email admin@example.com --admin-password secret
"""

from __future__ import annotations

import argparse
import logging
import pathlib
import sys
from collections.abc import Sequence

from dotenv import load_dotenv
from sqlalchemy import text
from sqlalchemy.orm import sessionmaker

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from campaign import models  # noqa: E402,F401  (register models with Base.metadata)
from campaign.config import resolve_database_url  # noqa: E402
from campaign.db import atomic, create_app_engine, seed_roles  # noqa: E402
from campaign.errors import ConflictError  # noqa: E402
from campaign.models.base import Base  # noqa: E402
from campaign.services.auth_service import AuthService  # noqa: E402

logger = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    """Create all ORM tables, the role rows and optionally a first admin."""

    parser = argparse.ArgumentParser(description="Create tables and seed roles")
    parser.add_argument("--admin-username", default="admin")
    parser.add_argument("--admin-email", default=None)
    parser.add_argument("--admin-password", default=None)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")

    load_dotenv()
    env_local = PROJECT_ROOT / ".env.local"
    if env_local.exists():
        load_dotenv(dotenv_path=env_local, override=True)

    engine = create_app_engine(resolve_database_url())
    Base.metadata.create_all(bind=engine)

    # create_all() does not add indexes to existing tables.
    # For PostgreSQL, apply them idempotently.
    if engine.dialect.name == "postgresql":
        ddl = [
            "CREATE UNIQUE INDEX IF NOT EXISTS uq_draw_numbers_number ON draw_numbers (number)",
            "CREATE UNIQUE INDEX IF NOT EXISTS uq_vouchers_game_opportunity_id "
            "ON vouchers (game_opportunity_id) WHERE game_opportunity_id IS NOT NULL",
            "CREATE INDEX IF NOT EXISTS ix_vouchers_draw_date ON vouchers (draw_date)",
        ]
        with engine.begin() as conn:
            for stmt in ddl:
                conn.execute(text(stmt))

    session_factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    seed_roles(session_factory)

    if args.admin_email and args.admin_password:
        with session_factory() as session:
            try:
                with atomic(session):
                    AuthService().register_user(
                        session,
                        username=args.admin_username,
                        email=args.admin_email,
                        password=args.admin_password,
                        role="admin",
                    )
            except ConflictError:
                logger.info("Admin user already exists; skipping")

    logger.info("Tables created (or already exist).")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
