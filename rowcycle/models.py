from __future__ import annotations

from sqlalchemy import Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

RECORD_DATA_MAX_LENGTH = 255


class Base(DeclarativeBase):
    pass


class Record(Base):
    __tablename__ = "tbl_test"
    # SQLite would otherwise recycle the highest rowid after a delete.
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    data: Mapped[str | None] = mapped_column(String(RECORD_DATA_MAX_LENGTH), nullable=True)
