from __future__ import annotations

import logging

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ..db import Database
from ..metrics import QUERY_FAILURES_TOTAL
from ..schemas import RecordItem

logger = logging.getLogger("rowcycle.records")


class StorageError(RuntimeError):
    """Base storage-layer error."""


class RecordQueryError(StorageError):
    """Raised when listing records fails in storage."""


class RecordQueryService:
    def __init__(self, database: Database) -> None:
        self._database = database

    def list_records(self) -> list[RecordItem]:
        try:
            with self._database.session() as session:
                rows = session.execute(text("SELECT id, data FROM tbl_test ORDER BY id")).mappings().all()
        except SQLAlchemyError as exc:
            QUERY_FAILURES_TOTAL.inc()
            logger.exception(
                "Error querying data",
                extra={"event": "query_failed", "reason": str(exc), "db_backend": self._database.backend},
            )
            raise RecordQueryError("Error querying data") from exc

        return [RecordItem(id=row["id"], data=row["data"]) for row in rows]
