# backend/chart_api/services/__init__.py
"""
Normalization, series assembly and payload building
"""

from . import normalize
from . import series
from . import payload
from . import chart_data

__all__ = [
    "normalize",
    "series",
    "payload",
    "chart_data",
]
