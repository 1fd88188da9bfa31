# backend/chart_api/core/instruments.py
"""Static instrument table: display name -> MongoDB collection + chart color"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

DEFAULT_COLOR = "#888888"


@dataclass(frozen=True)
class Instrument:
    name: str
    collection: str
    color: Optional[str] = None


# Collection names mirror the store as-is (including the "Procta" spelling)
INSTRUMENTS: Tuple[Instrument, ...] = (
    Instrument("SAP", "SAP", "#0053e7"),
    Instrument("Microsoft", "Microsoft", "#00a2ed"),
    Instrument("Nestlé", "Nestle", "#d71421"),
    Instrument("Procter & Gamble", "Procta & Gamble", "#005eb8"),
    Instrument("MSCI World", "MSCI World", "#4CAF50"),
)

COLORS: Dict[str, str] = {i.name: i.color for i in INSTRUMENTS if i.color}


def color_for(name: str) -> str:
    return COLORS.get(name, DEFAULT_COLOR)
