from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.schema import CreateTable

from .db import Database
from .metrics import BOOTSTRAP_FAILURES_TOTAL
from .models import Record

logger = logging.getLogger("rowcycle.bootstrap")


def bootstrap_schema(database: Database) -> bool:
    """Create ``tbl_test`` if it is missing.

    Storage errors are logged and reported through the return value; they never
    propagate, so a database outage at boot leaves the server running.
    """
    statement = CreateTable(Record.__table__, if_not_exists=True)
    try:
        with database.engine.begin() as connection:
            connection.execute(statement)
    except SQLAlchemyError as exc:
        BOOTSTRAP_FAILURES_TOTAL.inc()
        logger.error(
            "Error creating table",
            exc_info=True,
            extra={"event": "bootstrap_failed", "reason": str(exc), "db_backend": database.backend},
        )
        return False

    logger.info(
        "Schema ready",
        extra={"event": "bootstrap_complete", "db_backend": database.backend},
    )
    return True


def check_storage(database: Database) -> bool:
    try:
        database.check_connection()
    except SQLAlchemyError as exc:
        logger.error(
            "Error connecting to storage",
            extra={"event": "storage_unreachable", "reason": str(exc), "db_backend": database.backend},
        )
        return False

    logger.info("Connected to storage", extra={"event": "storage_connected", "db_backend": database.backend})
    return True
