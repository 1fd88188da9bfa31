# backend/chart_api/main.py
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from chart_api.core.config import settings
from chart_api.core.errors import DatabaseUnavailableError
from chart_api.core.instruments import INSTRUMENTS
from chart_api.db.mongo import MongoConnection
from chart_api.db.repositories import PriceRecordRepository
from chart_api.logger import get_logger
from chart_api.middleware.request_logger import RequestLoggerMiddleware
from chart_api.routers import chart, health

log = get_logger(__name__)

CHART_DATA_PATH = f"{settings.API_PREFIX}/chart-data"
HEALTH_PATH = f"{settings.API_PREFIX}/health"
AVAILABLE_ENDPOINTS = ["/", CHART_DATA_PATH, HEALTH_PATH]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect eagerly but keep serving if MongoDB is down; requests retry lazily."""
    log.info("Starting %s %s...", settings.APP_NAME, settings.APP_VERSION)
    mongo: MongoConnection = app.state.mongo

    try:
        db = await mongo.connect()
        repo = PriceRecordRepository(
            db, date_field=settings.DATE_FIELD, timeout_seconds=settings.QUERY_TIMEOUT_SECONDS
        )
        await repo.collection_counts(INSTRUMENTS)
    except DatabaseUnavailableError as e:
        log.error("MongoDB not reachable at startup, will retry on first request: %s", e)

    log.info("Application startup complete!")

    yield

    log.info("Shutting down...")
    await mongo.close()
    log.info("Application shutdown complete!")


def _register_handlers(app: FastAPI) -> None:
    @app.exception_handler(DatabaseUnavailableError)
    async def database_unavailable_handler(_: Request, exc: DatabaseUnavailableError):
        return JSONResponse(status_code=500, content={"success": False, "error": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return JSONResponse(
                status_code=404,
                content={"error": "Endpoint not found", "availableEndpoints": AVAILABLE_ENDPOINTS},
            )
        detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"success": False, "error": detail})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_: Request, exc: RequestValidationError):
        details = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', []))}: {err.get('msg', 'Invalid value')}"
            for err in exc.errors()
        )
        return JSONResponse(
            status_code=422,
            content={"success": False, "error": "Invalid request", "details": details},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(_: Request, exc: Exception):
        log.exception("Unhandled error: %s", exc)
        return JSONResponse(status_code=500, content={"error": "Internal server error", "message": str(exc)})


def create_app(mongo: Optional[MongoConnection] = None) -> FastAPI:
    app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, lifespan=lifespan)
    app.state.mongo = mongo or MongoConnection.from_settings(settings)

    app.add_middleware(RequestLoggerMiddleware)
    # Added last so it wraps everything; any origin, no credentials
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
    )

    app.include_router(chart.router, prefix=settings.API_PREFIX)
    app.include_router(health.router, prefix=settings.API_PREFIX)

    @app.get("/")
    async def root():
        """Service descriptor"""
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "status": "online",
            "endpoints": {"chartData": CHART_DATA_PATH, "health": HEALTH_PATH},
            "database": "MongoDB",
        }

    _register_handlers(app)
    return app


app = create_app()


def main():
    uvicorn.run(
        "chart_api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
