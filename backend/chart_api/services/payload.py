# backend/chart_api/services/payload.py
"""
Payload building and output formats.

build_payload() produces the canonical ChartPayload; a PayloadFormat renders
it into the JSON shape a given client expects:

  standard  {success, timestamp, source, seriesCount, totalPoints, series, instruments}
  legacy    {success, timestamp, source, dataPoints, data, instruments}
  chartjs   {success, timestamp, source, datasets, totalPoints, chartConfig, instruments}
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Sequence

from chart_api.schemas.chart import ChartPayload, InstrumentSeries, InstrumentStatus


def iso_timestamp(dt: datetime) -> str:
    """2024-01-01T10:00:00.000Z"""
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_payload(
    series_list: Sequence[Optional[InstrumentSeries]],
    statuses: Sequence[InstrumentStatus] = (),
    now: Optional[Callable[[], datetime]] = None,
) -> ChartPayload:
    series = [s for s in series_list if s is not None and s.points]
    stamp = (now or (lambda: datetime.now(timezone.utc)))()
    return ChartPayload(
        success=True,
        timestamp=stamp,
        series_count=len(series),
        total_points=sum(len(s.points) for s in series),
        series=series,
        instruments=list(statuses),
    )


class PayloadFormat:
    name = "base"

    def __init__(self, source: str = "MongoDB"):
        self.source = source

    def render(self, payload: ChartPayload) -> Dict[str, Any]:
        raise NotImplementedError

    def _envelope(self, payload: ChartPayload) -> Dict[str, Any]:
        return {
            "success": payload.success,
            "timestamp": iso_timestamp(payload.timestamp),
            "source": self.source,
        }

    @staticmethod
    def _statuses(payload: ChartPayload):
        return [s.model_dump(by_alias=True) for s in payload.instruments]


class StandardFormat(PayloadFormat):
    name = "standard"

    def render(self, payload: ChartPayload) -> Dict[str, Any]:
        body = self._envelope(payload)
        body.update(
            seriesCount=payload.series_count,
            totalPoints=payload.total_points,
            series=[s.model_dump(by_alias=True) for s in payload.series],
            instruments=self._statuses(payload),
        )
        return body


class LegacyFormat(PayloadFormat):
    """Flat {label, color, data:[{date, price}]} list with a dataPoints total."""
    name = "legacy"

    def render(self, payload: ChartPayload) -> Dict[str, Any]:
        body = self._envelope(payload)
        body.update(
            dataPoints=payload.total_points,
            data=[
                {
                    "label": s.label,
                    "color": s.color,
                    "data": [{"date": p.date, "price": p.price} for p in s.points],
                }
                for s in payload.series
            ],
            instruments=self._statuses(payload),
        )
        return body


class ChartLibraryFormat(PayloadFormat):
    """Ready-to-use Chart.js line config; x is the canonical date, y the price."""
    name = "chartjs"

    def render(self, payload: ChartPayload) -> Dict[str, Any]:
        datasets = [
            {
                "label": s.label,
                "borderColor": s.color,
                "backgroundColor": s.color,
                "fill": False,
                "data": [{"x": p.date, "y": p.price} for p in s.points],
            }
            for s in payload.series
        ]
        body = self._envelope(payload)
        body.update(
            datasets=payload.series_count,
            totalPoints=payload.total_points,
            chartConfig={"type": "line", "data": {"datasets": datasets}},
            instruments=self._statuses(payload),
        )
        return body


FORMATS = {f.name: f for f in (StandardFormat, LegacyFormat, ChartLibraryFormat)}


def get_format(name: str, source: str = "MongoDB") -> PayloadFormat:
    try:
        return FORMATS[name.lower()](source=source)
    except KeyError:
        raise ValueError(f"Unknown payload format: {name}") from None
