# backend/chart_api/api/deps.py
"""FastAPI dependencies: the shared MongoDB handle and the chart pipeline"""

from fastapi import Depends, Request

from chart_api.core.config import settings
from chart_api.db.mongo import MongoConnection
from chart_api.db.repositories import PriceRecordRepository
from chart_api.services.chart_data import ChartDataService


def get_mongo(request: Request) -> MongoConnection:
    """The app-owned connection created in main.create_app()"""
    return request.app.state.mongo


async def get_record_source(mongo: MongoConnection = Depends(get_mongo)) -> PriceRecordRepository:
    # Lazy connect: raises DatabaseUnavailableError (HTTP 500) when unreachable
    db = await mongo.connect()
    return PriceRecordRepository(
        db,
        date_field=settings.DATE_FIELD,
        timeout_seconds=settings.QUERY_TIMEOUT_SECONDS,
    )


def get_chart_service(source: PriceRecordRepository = Depends(get_record_source)) -> ChartDataService:
    return ChartDataService(
        source,
        date_field=settings.DATE_FIELD,
        price_field=settings.PRICE_FIELD,
        dayfirst=settings.DATE_DAYFIRST,
    )
