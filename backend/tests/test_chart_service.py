"""
Tests for backend/chart_api/services/chart_data.py with an in-memory record source
"""
import pytest
from unittest.mock import AsyncMock

from chart_api.core.errors import RecordFetchError
from chart_api.core.instruments import INSTRUMENTS, Instrument
from chart_api.services.chart_data import ChartDataService


@pytest.mark.asyncio
async def test_instruments_fetched_in_configured_order():
    source = AsyncMock()
    source.fetch_records.return_value = []

    await ChartDataService(source).load()

    called = [c.args[0] for c in source.fetch_records.await_args_list]
    assert called == [i.collection for i in INSTRUMENTS]


@pytest.mark.asyncio
async def test_failure_marks_instrument_and_continues():
    async def fetch(collection):
        if collection == "B":
            raise RecordFetchError("B", "query timed out after 10.0s")
        return [{"Date": "2020-05-14", "Close": "1,5"}]

    source = AsyncMock()
    source.fetch_records.side_effect = fetch
    instruments = [Instrument("A", "A", "#111111"), Instrument("B", "B"), Instrument("C", "C")]

    payload = await ChartDataService(source, instruments).load()

    assert [s.label for s in payload.series] == ["A", "C"]
    assert payload.total_points == 2
    statuses = {s.name: s for s in payload.instruments}
    assert statuses["B"].status == "error"
    assert "timed out" in statuses["B"].error
    assert payload.series[0].color == "#111111"


@pytest.mark.asyncio
async def test_custom_field_names_and_month_first():
    source = AsyncMock()
    source.fetch_records.return_value = [{"when": "05/01/2020", "last": "$2,00"}]
    service = ChartDataService(
        source, [Instrument("A", "A")], date_field="when", price_field="last", dayfirst=False,
    )

    payload = await service.load()

    assert payload.series[0].points[0].date == "2020-05-01"
    assert payload.series[0].points[0].price == 2.0
