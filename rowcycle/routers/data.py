from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from ..schemas import RecordItem
from ..services.records import RecordQueryError, RecordQueryService

router = APIRouter(tags=["data"])
logger = logging.getLogger("rowcycle.data")


def get_record_service(request: Request) -> RecordQueryService:
    return RecordQueryService(request.app.state.database)


@router.get(
    "/data",
    response_model=list[RecordItem],
    summary="List every record in tbl_test",
    responses={
        200: {
            "description": "All stored records, ascending by id",
            "content": {
                "application/json": {
                    "example": [
                        {"id": 1, "data": "first row"},
                        {"id": 2, "data": "second row"},
                    ]
                }
            },
        },
        500: {"description": "Storage could not be queried"},
    },
)
def list_data(service: RecordQueryService = Depends(get_record_service)) -> list[RecordItem]:
    try:
        return service.list_records()
    except RecordQueryError as exc:
        raise HTTPException(status_code=500, detail="Error querying data") from exc
