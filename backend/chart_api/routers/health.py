# backend/chart_api/routers/health.py
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from chart_api.api.deps import get_mongo
from chart_api.core.config import settings
from chart_api.db.mongo import MongoConnection
from chart_api.logger import get_logger
from chart_api.schemas.chart import DatabaseStatus, ErrorResponse, HealthResponse
from chart_api.services.payload import iso_timestamp

router = APIRouter(tags=["health"])
log = get_logger(__name__)


@router.get("/health")
async def health(mongo: MongoConnection = Depends(get_mongo)):
    """Reports the shared connection as-is; never triggers a connect."""
    try:
        status, collections = "disconnected", 0
        if mongo.is_connected:
            status = "connected"
            collections = len(await mongo.list_collection_names())

        body = HealthResponse(
            timestamp=iso_timestamp(datetime.now(timezone.utc)),
            server=f"{settings.APP_NAME} {settings.APP_VERSION}",
            database=DatabaseStatus(
                status=status,
                name=mongo.db_name,
                collection_count=collections,
                cluster=mongo.cluster,
            ),
            environment=settings.ENV,
        )
        return body.model_dump(by_alias=True)
    except Exception as e:
        log.exception("Health check failed: %s", e)
        err = ErrorResponse(error="Health check failed", message=str(e))
        return JSONResponse(status_code=500, content=err.model_dump())
