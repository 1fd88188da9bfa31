"""
Router modules for API endpoints
"""

from . import chart
from . import health

__all__ = [
    "chart",
    "health",
]
