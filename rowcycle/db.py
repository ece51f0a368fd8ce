from __future__ import annotations

from contextlib import contextmanager
from typing import Iterable, Iterator

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.orm import Session, sessionmaker

from .config import Settings, settings as default_settings
from .models import RECORD_DATA_MAX_LENGTH, Record


def _build_engine(database_url: str, cfg: Settings) -> Engine:
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            pool_pre_ping=True,
            connect_args={"check_same_thread": False},
            future=True,
        )

    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=cfg.db_pool_size,
        max_overflow=cfg.db_max_overflow,
        pool_timeout=cfg.db_pool_timeout,
        pool_recycle=cfg.db_pool_recycle,
        future=True,
    )


class Database:
    """Pooled storage handle shared by the bootstrapper and the query service.

    Nothing connects until a session is opened, so constructing a ``Database``
    against an unreachable server succeeds; failures surface on first use.
    """

    def __init__(self, database_url: str | None = None, cfg: Settings | None = None) -> None:
        self._settings = cfg or default_settings
        self.url = database_url or self._settings.database_url
        self._engine = _build_engine(self.url, self._settings)
        self._sessions = sessionmaker(
            bind=self._engine,
            autoflush=False,
            autocommit=False,
            expire_on_commit=False,
            class_=Session,
            future=True,
        )

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def backend(self) -> str:
        return self._engine.dialect.name

    @contextmanager
    def session(self) -> Iterator[Session]:
        session = self._sessions()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def check_connection(self) -> None:
        with self._engine.connect() as connection:
            connection.execute(text("SELECT 1"))

    def dispose(self) -> None:
        self._engine.dispose()


def count_records(database: Database) -> int:
    with database.session() as session:
        return int(session.execute(text("SELECT COUNT(*) FROM tbl_test")).scalar_one())


def insert_records(database: Database, texts: Iterable[str | None]) -> int:
    """Insert one record per text out-of-band; ids are assigned by storage."""
    rows = [{"data": value} for value in texts]
    if not rows:
        return 0

    too_long = [row["data"] for row in rows if row["data"] is not None and len(row["data"]) > RECORD_DATA_MAX_LENGTH]
    if too_long:
        raise ValueError(f"Record data exceeds {RECORD_DATA_MAX_LENGTH} characters: {too_long[0][:40]!r}...")

    with database.session() as session:
        session.execute(Record.__table__.insert(), rows)

    return len(rows)
