from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv
from sqlalchemy import URL

load_dotenv()

_DEFAULT_DATABASE_URL = "sqlite:///./rowcycle.db"


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _as_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _as_float(value: str | None, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _normalize_database_url(value: str | None, fallback: str) -> str:
    raw = (value or fallback).strip() or fallback
    # Some dashboards accidentally store quoted values.
    if (raw.startswith('"') and raw.endswith('"')) or (raw.startswith("'") and raw.endswith("'")):
        raw = raw[1:-1].strip()

    if "://" not in raw:
        return raw

    scheme, suffix = raw.split("://", 1)
    scheme = scheme.lower()

    # Force the drivers declared in pyproject.
    if scheme in {"mysql", "mysql+mysqldb", "mysql+mysqlconnector", "mysql+pymysql"}:
        return f"mysql+pymysql://{suffix}"

    if scheme in {
        "postgres",
        "postgresql",
        "postgresql+psycopg",
        "postgresql+asyncpg",
        "postgresql+pg8000",
        "postgresql+psycopg2",
    }:
        return f"postgresql+psycopg2://{suffix}"

    return raw


def _mysql_url_from_parts(
    host: str | None,
    user: str | None,
    password: str | None,
    database: str | None,
    port: str | None,
) -> str | None:
    """Build a MySQL URL from the MYSQL* variables set by docker-compose."""
    if not host or not host.strip():
        return None

    url = URL.create(
        "mysql+pymysql",
        username=(user or "").strip() or None,
        password=password or None,
        host=host.strip(),
        port=_as_int(port, 3306),
        database=(database or "").strip() or None,
    )
    return url.render_as_string(hide_password=False)


def _resolve_database_url() -> str:
    explicit = os.getenv("DATABASE_URL")
    if explicit and explicit.strip():
        return _normalize_database_url(explicit, _DEFAULT_DATABASE_URL)

    from_parts = _mysql_url_from_parts(
        os.getenv("MYSQLHOST"),
        os.getenv("MYSQLUSER"),
        os.getenv("MYSQLPASSWORD"),
        os.getenv("MYSQLDATABASE"),
        os.getenv("MYSQLPORT"),
    )
    return from_parts or _DEFAULT_DATABASE_URL


@dataclass(frozen=True)
class Settings:
    host: str
    port: int
    database_url: str
    db_pool_size: int
    db_max_overflow: int
    db_pool_timeout: int
    db_pool_recycle: int
    cors_origins: list[str]
    log_level: str
    enable_prometheus_metrics: bool
    api_url: str
    client_timeout: float


settings = Settings(
    host=os.getenv("HOST", "0.0.0.0").strip(),
    port=_as_int(os.getenv("PORT"), 5000),
    database_url=_resolve_database_url(),
    db_pool_size=max(1, _as_int(os.getenv("DB_POOL_SIZE"), 5)),
    db_max_overflow=max(0, _as_int(os.getenv("DB_MAX_OVERFLOW"), 10)),
    db_pool_timeout=max(1, _as_int(os.getenv("DB_POOL_TIMEOUT"), 30)),
    db_pool_recycle=max(60, _as_int(os.getenv("DB_POOL_RECYCLE"), 1800)),
    cors_origins=[
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "*").split(",")
        if origin.strip()
    ],
    log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
    enable_prometheus_metrics=_as_bool(os.getenv("ENABLE_PROMETHEUS_METRICS"), True),
    api_url=os.getenv("ROWCYCLE_API_URL", "http://localhost:5000").strip().rstrip("/"),
    client_timeout=max(0.1, _as_float(os.getenv("CLIENT_TIMEOUT"), 5.0)),
)
