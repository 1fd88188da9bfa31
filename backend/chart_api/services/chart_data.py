# backend/chart_api/services/chart_data.py
from __future__ import annotations

from typing import List, Protocol, Sequence

from chart_api.core.instruments import INSTRUMENTS, Instrument
from chart_api.logger import get_logger
from chart_api.schemas.chart import ChartPayload, InstrumentStatus
from chart_api.services.payload import build_payload
from chart_api.services.series import SeriesResult, assemble_series

log = get_logger(__name__)


class RecordSource(Protocol):
    async def fetch_records(self, collection_name: str) -> List[dict]: ...


class ChartDataService:
    """Runs the normalization pipeline for every configured instrument, one after another."""

    def __init__(
        self,
        source: RecordSource,
        instruments: Sequence[Instrument] = INSTRUMENTS,
        *,
        date_field: str = "Date",
        price_field: str = "Close",
        dayfirst: bool = True,
    ):
        self.source = source
        self.instruments = tuple(instruments)
        self.date_field = date_field
        self.price_field = price_field
        self.dayfirst = dayfirst

    async def _load_one(self, inst: Instrument) -> SeriesResult:
        records = await self.source.fetch_records(inst.collection)
        result = assemble_series(
            inst.name,
            records,
            inst.color,
            date_field=self.date_field,
            price_field=self.price_field,
            dayfirst=self.dayfirst,
        )
        if result.series is not None:
            log.info("%s: %d points", inst.name, result.points)
        return result

    async def load(self) -> ChartPayload:
        series = []
        statuses: List[InstrumentStatus] = []

        for inst in self.instruments:
            try:
                result = await self._load_one(inst)
            except Exception as e:
                # one broken collection must not take down the others
                log.error("%s: failed to load %r: %s", inst.name, inst.collection, e)
                statuses.append(InstrumentStatus(
                    name=inst.name, collection=inst.collection, status="error", error=str(e),
                ))
                continue

            series.append(result.series)
            statuses.append(InstrumentStatus(
                name=inst.name,
                collection=inst.collection,
                status=result.status,
                records=result.records,
                points=result.points,
                dropped=dict(result.dropped),
            ))

        payload = build_payload(series, statuses)
        log.info("Chart data: %d series, %d points", payload.series_count, payload.total_points)
        return payload
