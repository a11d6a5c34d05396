"""Environment-based configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from sqlalchemy.engine import URL


def _env_list(name: str, default: str = "") -> tuple[str, ...]:
    raw = os.getenv(name, default)
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


def resolve_database_url() -> str:
    """Resolve DB connection string.

    Priority:
      1) DATABASE_URL (explicit)
      2) Build from PG* env vars (common Postgres convention)
      3) Fallback to local sqlite
    """

    explicit = os.getenv("DATABASE_URL")
    if explicit:
        # Render/Heroku style URLs use the deprecated "postgres" scheme.
        if explicit.startswith("postgres://"):
            return "postgresql+psycopg2://" + explicit[len("postgres://"):]
        return explicit

    host = os.getenv("PGHOST")
    user = os.getenv("PGUSER")
    database = os.getenv("PGDATABASE")

    if host and user and database:
        sslmode = os.getenv("PGSSLMODE", "prefer")
        url = URL.create(
            drivername="postgresql+psycopg2",
            username=user,
            password=os.getenv("PGPASSWORD"),
            host=host,
            port=_env_int("PGPORT", 5432),
            database=database,
            query={"sslmode": sslmode} if sslmode else {},
        )
        return url.render_as_string(hide_password=False)

    return "sqlite:///./campaign.db"


@dataclass(frozen=True)
class BaseConfig:
    """Base configuration shared by all environments."""

    APP_ENV: str = os.getenv("APP_ENV", "development")
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret")
    DATABASE_URL: str = resolve_database_url()
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    CORS_ALLOWED_ORIGINS: tuple[str, ...] = _env_list("CORS_ALLOWED_ORIGINS")

    # Auth
    JWT_SECRET: str = os.getenv("JWT_SECRET", "dev-jwt-secret")
    JWT_EXPIRES_IN: str = os.getenv("JWT_EXPIRES_IN", "1h")
    SECURITY_EMAIL_COOLDOWN: str = os.getenv("SECURITY_EMAIL_COOLDOWN", "15m")

    # Invoice eligibility
    MIN_INVOICE_VALUE: float = _env_float("MIN_INVOICE_VALUE", 200.0)
    QUALIFYING_PAYMENT_METHODS: tuple[str, ...] = _env_list("QUALIFYING_PAYMENT_METHODS", "03")
    PARTNER_CODES: tuple[str, ...] = _env_list("PARTNER_CODES")

    # Draw numbers
    DRAW_NUMBER_MIN: int = _env_int("DRAW_NUMBER_MIN", 1)
    DRAW_NUMBER_MAX: int = _env_int("DRAW_NUMBER_MAX", 9_999_999)
    DRAW_NUMBER_MAX_ATTEMPTS: int = _env_int("DRAW_NUMBER_MAX_ATTEMPTS", 1000)

    # External sales API
    SALES_API_URL: str = os.getenv("SALES_API_URL", "http://localhost:9000/sales")
    SALES_API_USER: str = os.getenv("SALES_API_USER", "")
    SALES_API_PASSWORD: str = os.getenv("SALES_API_PASSWORD", "")
    SALES_API_TIMEOUT: float = _env_float("SALES_API_TIMEOUT", 10.0)

    # Mail
    MAIL_HOST: str = os.getenv("EMAIL_HOST", "localhost")
    MAIL_PORT: int = _env_int("EMAIL_PORT", 587)
    MAIL_USE_SSL: bool = _env_bool("EMAIL_SECURE")
    MAIL_USERNAME: str = os.getenv("EMAIL_USER", "")
    MAIL_PASSWORD: str = os.getenv("EMAIL_PASS", "")
    MAIL_SUPPRESS_SEND: bool = _env_bool("MAIL_SUPPRESS_SEND")

    CAMPAIGN_NAME: str = os.getenv("CAMPAIGN_NAME", "Campanha")
    FRONTEND_BASE_URL: str = os.getenv("FRONTEND_BASE_URL", "http://localhost:3000")


@dataclass(frozen=True)
class DevelopmentConfig(BaseConfig):
    """Development configuration."""

    DEBUG: bool = True


@dataclass(frozen=True)
class ProductionConfig(BaseConfig):
    """Production configuration."""

    DEBUG: bool = False


@dataclass(frozen=True)
class TestingConfig(BaseConfig):
    """In-memory database, suppressed mail, fast hashing."""

    APP_ENV: str = "testing"
    TESTING: bool = True
    DATABASE_URL: str = "sqlite://"
    JWT_SECRET: str = "test-jwt-secret"
    MIN_INVOICE_VALUE: float = 200.0
    QUALIFYING_PAYMENT_METHODS: tuple[str, ...] = ("03",)
    PARTNER_CODES: tuple[str, ...] = ()
    DRAW_NUMBER_MAX_ATTEMPTS: int = 50
    MAIL_SUPPRESS_SEND: bool = True
    CAMPAIGN_NAME: str = "Campanha Teste"


def get_config() -> type[BaseConfig]:
    """Resolve configuration class based on APP_ENV."""

    env = os.getenv("APP_ENV", "development").lower().strip()
    if env == "production":
        return ProductionConfig
    if env == "testing":
        return TestingConfig
    return DevelopmentConfig
