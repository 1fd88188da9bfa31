import asyncio

import pytest
from pymongo.errors import OperationFailure

from chart_api.core.errors import RecordFetchError
from chart_api.core.instruments import INSTRUMENTS
from chart_api.db.repositories import PriceRecordRepository
from tests.fakes import FakeDatabase


@pytest.mark.asyncio
async def test_fetch_sorted_by_stored_date():
    db = FakeDatabase("GKI", {"SAP": [{"Date": "2020-05-15", "Close": 2}, {"Date": "2020-05-14", "Close": 1}]})
    repo = PriceRecordRepository(db)
    docs = await repo.fetch_records("SAP")
    assert [d["Close"] for d in docs] == [1, 2]


@pytest.mark.asyncio
async def test_missing_collection_is_empty():
    repo = PriceRecordRepository(FakeDatabase("GKI"))
    assert await repo.fetch_records("Nope") == []


@pytest.mark.asyncio
async def test_slow_query_times_out():
    db = FakeDatabase("GKI", {"SAP": [{"Date": "2020-05-14", "Close": 1}]})
    db.delays["SAP"] = 0.5
    repo = PriceRecordRepository(db, timeout_seconds=0.05)

    with pytest.raises(RecordFetchError) as exc:
        await repo.fetch_records("SAP")
    assert exc.value.collection == "SAP"
    assert "timed out" in exc.value.reason


@pytest.mark.asyncio
async def test_driver_error_is_wrapped():
    db = FakeDatabase("GKI", {"SAP": []})
    db.errors["SAP"] = OperationFailure("not authorized")
    repo = PriceRecordRepository(db)

    with pytest.raises(RecordFetchError):
        await repo.fetch_records("SAP")


@pytest.mark.asyncio
async def test_collection_counts(fake_db):
    fake_db.errors["MSCI World"] = OperationFailure("boom")
    counts = await PriceRecordRepository(fake_db).collection_counts(INSTRUMENTS)
    assert counts["SAP"] == 2
    assert counts["Nestlé"] == 3
    assert counts["MSCI World"] == -1


@pytest.mark.asyncio
async def test_slow_count_times_out():
    db = FakeDatabase("GKI", {"SAP": [{"Date": "2020-05-14", "Close": 1}]})
    db.delays["SAP"] = 0.5
    repo = PriceRecordRepository(db, timeout_seconds=0.05)

    with pytest.raises(asyncio.TimeoutError):
        await repo.count_records("SAP")


@pytest.mark.asyncio
async def test_collection_counts_marks_slow_collection(fake_db):
    fake_db.delays["SAP"] = 0.5
    counts = await PriceRecordRepository(fake_db, timeout_seconds=0.05).collection_counts(INSTRUMENTS)
    assert counts["SAP"] == -1
    assert counts["Nestlé"] == 3
