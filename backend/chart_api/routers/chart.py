# backend/chart_api/routers/chart.py
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, Request

from chart_api.api.deps import get_chart_service
from chart_api.core.config import settings
from chart_api.logger import get_logger
from chart_api.services.chart_data import ChartDataService
from chart_api.services.payload import get_format

router = APIRouter(tags=["chart"])
log = get_logger(__name__)


@router.get("/chart-data")
async def chart_data(
    request: Request,
    format: Optional[Literal["standard", "legacy", "chartjs"]] = Query(
        None, description="Payload shape; defaults to PAYLOAD_FORMAT"
    ),
    service: ChartDataService = Depends(get_chart_service),
):
    """
    Close-price series for every configured instrument.

    Instruments that have no usable data are left out of the series list and
    reported in `instruments` with status no_data, no_valid_points or error.
    """
    log.info("Chart request from %s", request.headers.get("origin") or "unknown origin")
    payload = await service.load()
    fmt = get_format(format or settings.PAYLOAD_FORMAT, source=settings.SOURCE_NAME)
    return fmt.render(payload)
