# backend/chart_api/services/series.py
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Optional

from chart_api.core.instruments import color_for
from chart_api.logger import get_logger
from chart_api.schemas.chart import InstrumentSeries, PricePoint
from chart_api.services.normalize import ParseFailure, normalize_date, normalize_price

log = get_logger(__name__)


@dataclass
class SeriesResult:
    """Outcome of assembling one instrument. series is None when nothing survived."""
    name: str
    records: int
    series: Optional[InstrumentSeries] = None
    dropped: Counter = field(default_factory=Counter)

    @property
    def points(self) -> int:
        return len(self.series.points) if self.series else 0

    @property
    def status(self) -> str:
        if self.series is not None:
            return "ok"
        return "no_data" if self.records == 0 else "no_valid_points"


def assemble_series(
    name: str,
    records: Iterable[Mapping],
    color: Optional[str] = None,
    *,
    date_field: str = "Date",
    price_field: str = "Close",
    dayfirst: bool = True,
) -> SeriesResult:
    """
    Normalize each record into a PricePoint and drop the ones whose price or
    date cannot be parsed. Points come back ascending by canonical date; the
    sort is stable so same-day records keep their stored order.
    """
    points: List[PricePoint] = []
    dropped: Counter = Counter()
    total = 0

    for rec in records:
        total += 1
        price = normalize_price(rec.get(price_field))
        if isinstance(price, ParseFailure):
            dropped[price.reason.value] += 1
            continue
        day = normalize_date(rec.get(date_field), dayfirst=dayfirst)
        if isinstance(day, ParseFailure):
            dropped[day.reason.value] += 1
            continue
        points.append(PricePoint(date=day, price=price))

    result = SeriesResult(name=name, records=total, dropped=dropped)
    if not points:
        if total == 0:
            log.warning("%s: no records found", name)
        else:
            log.warning("%s: 0 valid points out of %d records (%s)", name, total, dict(dropped))
        return result

    points.sort(key=lambda p: p.date)
    result.series = InstrumentSeries(label=name, color=color or color_for(name), points=points)
    return result
