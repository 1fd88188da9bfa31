# backend/chart_api/core/errors.py
"""Exceptions raised between the record source and the HTTP layer"""

from __future__ import annotations


class ChartApiError(Exception):
    """Base class for service errors"""


class DatabaseUnavailableError(ChartApiError):
    """No MongoDB deployment could be reached"""

    def __init__(self, message: str = "Database connection failed"):
        super().__init__(message)
        self.message = message


class RecordFetchError(ChartApiError):
    """Reading one instrument's collection failed or timed out"""

    def __init__(self, collection: str, reason: str):
        super().__init__(f"{collection}: {reason}")
        self.collection = collection
        self.reason = reason
