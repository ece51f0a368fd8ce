from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging
from typing import AsyncIterator

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.responses import Response
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.cors import CORSMiddleware
import uvicorn

from .bootstrap import bootstrap_schema, check_storage
from .config import settings
from .db import Database
from .logging_utils import configure_logging
from .metrics import CONTENT_TYPE_LATEST, REQUESTS_TOTAL, generate_latest
from .routers.data import router as data_router
from .schemas import HealthResponse

configure_logging()
logger = logging.getLogger("rowcycle.app")


def _health(request: Request) -> HealthResponse:
    database: Database = request.app.state.database
    try:
        database.check_connection()
    except SQLAlchemyError as exc:
        logger.warning(
            "Health check failed",
            extra={"event": "health_failed", "reason": str(exc), "path": request.url.path},
        )
        raise HTTPException(status_code=503, detail="Storage unavailable") from exc
    return HealthResponse(status="ok", ts=datetime.now(timezone.utc).isoformat())


def create_app(database: Database | None = None) -> FastAPI:
    """Build the API around an injected storage handle.

    The schema bootstrap runs in the lifespan hook, so it completes before the
    first request is served.
    """
    db = database or Database()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        check_storage(db)
        bootstrapped = bootstrap_schema(db)
        logger.info(
            "Backend startup complete",
            extra={
                "event": "startup",
                "status": "ready" if bootstrapped else "degraded",
                "db_backend": db.backend,
                "port": settings.port,
            },
        )
        try:
            yield
        finally:
            db.dispose()

    app = FastAPI(title="rowcycle API", version="1.0.0", lifespan=lifespan)
    app.state.database = db

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def count_requests(request: Request, call_next):
        response = await call_next(request)
        REQUESTS_TOTAL.labels(
            method=request.method,
            path=request.url.path,
            status=str(response.status_code),
        ).inc()
        return response

    api_router = APIRouter(prefix="/api")

    @api_router.get("/health", response_model=HealthResponse)
    def api_healthcheck(request: Request) -> HealthResponse:
        return _health(request)

    @app.get("/health", response_model=HealthResponse)
    def healthcheck(request: Request) -> HealthResponse:
        return _health(request)

    @app.get("/metrics")
    async def metrics() -> Response:
        if not settings.enable_prometheus_metrics:
            raise HTTPException(status_code=404, detail="Metrics disabled")
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Served bare as well, for deployments where a proxy strips the /api prefix.
    api_router.include_router(data_router)
    app.include_router(data_router)
    app.include_router(api_router)

    return app


app = create_app()


def serve() -> None:
    logger.info("Server listening", extra={"event": "listen", "port": settings.port})
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    serve()
