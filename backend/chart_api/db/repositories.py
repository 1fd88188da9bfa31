# backend/chart_api/db/repositories.py
"""Read-only access to the per-instrument price collections"""

from __future__ import annotations
import asyncio
from typing import Dict, Iterable, List

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from chart_api.core.errors import RecordFetchError
from chart_api.core.instruments import Instrument
from chart_api.logger import get_logger

log = get_logger(__name__)


class PriceRecordRepository:
    """One collection per instrument; every document has a date and a close field."""

    def __init__(self, db: AsyncIOMotorDatabase, date_field: str = "Date", timeout_seconds: float = 10.0):
        self.db = db
        self.date_field = date_field
        self.timeout_seconds = timeout_seconds

    async def fetch_records(self, collection_name: str) -> List[dict]:
        """All documents of a collection, ascending by the stored date field"""
        cursor = (
            self.db[collection_name]
            .find({}, {"_id": 0})
            .sort(self.date_field, 1)
            .max_time_ms(int(self.timeout_seconds * 1000))
        )
        try:
            return await asyncio.wait_for(cursor.to_list(length=None), timeout=self.timeout_seconds)
        except asyncio.TimeoutError as e:
            raise RecordFetchError(collection_name, f"query timed out after {self.timeout_seconds}s") from e
        except PyMongoError as e:
            raise RecordFetchError(collection_name, str(e)) from e

    async def count_records(self, collection_name: str) -> int:
        return await asyncio.wait_for(
            self.db[collection_name].count_documents({}, maxTimeMS=int(self.timeout_seconds * 1000)),
            timeout=self.timeout_seconds,
        )

    async def collection_counts(self, instruments: Iterable[Instrument]) -> Dict[str, int]:
        """Document count per instrument; -1 where the collection cannot be read."""
        counts: Dict[str, int] = {}
        for inst in instruments:
            try:
                counts[inst.name] = await self.count_records(inst.collection)
                log.info("%s: %d records", inst.name, counts[inst.name])
            except (PyMongoError, asyncio.TimeoutError) as e:
                counts[inst.name] = -1
                log.warning("%s: collection %r not readable: %s", inst.name, inst.collection, e)
        return counts
