from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, StrictInt, TypeAdapter


class RecordItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: StrictInt
    data: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    ts: str


RECORD_LIST_ADAPTER: TypeAdapter[list[RecordItem]] = TypeAdapter(list[RecordItem])
