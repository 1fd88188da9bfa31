# backend/chart_api/db/__init__.py
"""Database package - MongoDB record source"""

from .mongo import MongoConnection, cluster_host
from .repositories import PriceRecordRepository

__all__ = [
    "MongoConnection",
    "cluster_host",
    "PriceRecordRepository",
]
