# backend/chart_api/schemas/chart.py
"""Chart payload and service responses"""

from __future__ import annotations
import math
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serialized with camelCase keys (seriesCount, totalPoints, ...)"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class PricePoint(CamelModel):
    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$")
    price: float

    @field_validator("price")
    @classmethod
    def _finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("price must be finite")
        return v


class InstrumentSeries(CamelModel):
    label: str
    color: str
    points: List[PricePoint]


class InstrumentStatus(CamelModel):
    name: str
    collection: str
    status: str  # ok | no_data | no_valid_points | error
    records: int = 0
    points: int = 0
    dropped: Dict[str, int] = Field(default_factory=dict)
    error: Optional[str] = None


class ChartPayload(CamelModel):
    success: bool = True
    timestamp: datetime
    series_count: int
    total_points: int
    series: List[InstrumentSeries]
    instruments: List[InstrumentStatus] = Field(default_factory=list)


class DatabaseStatus(CamelModel):
    status: str
    name: str
    collection_count: int = 0
    cluster: str


class HealthResponse(CamelModel):
    success: bool = True
    timestamp: str
    server: str
    database: DatabaseStatus
    environment: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    message: Optional[str] = None
