# backend/chart_api/services/normalize.py
"""
Price and date normalization for loosely-typed stored records.

Stored fields arrive as whatever MongoDB returns: numbers, Decimal128,
datetimes or currency-formatted strings. They are tagged into a RawValue
first and then normalized explicitly; failures come back as ParseFailure
values rather than exceptions so callers can count why records vanished.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import datetime, date as _date
from decimal import Decimal
from enum import Enum
from typing import Any, Union

import pandas as pd
from bson.decimal128 import Decimal128


class RawKind(str, Enum):
    MISSING = "missing"
    NUMERIC = "numeric"
    TEXT = "text"
    TEMPORAL = "temporal"


@dataclass(frozen=True)
class RawValue:
    kind: RawKind
    value: Any = None


class DropReason(str, Enum):
    MISSING_PRICE = "missing_price"
    INVALID_PRICE = "invalid_price"
    MISSING_DATE = "missing_date"
    INVALID_DATE = "invalid_date"


@dataclass(frozen=True)
class ParseFailure:
    reason: DropReason
    raw: Any = None


PriceResult = Union[float, ParseFailure]
DateResult = Union[str, ParseFailure]

_CURRENCY_AND_SPACE = re.compile(r"[$€£¥\s]")
# Longest leading float literal, trailing characters are ignored
_FLOAT_PREFIX = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_HAS_DIGIT = re.compile(r"\d")
_YEAR_FIRST = re.compile(r"^\d{4}\D")


def classify(raw: Any) -> RawValue:
    """Tag a stored field value. bool is treated as text, never as a number."""
    if raw is None:
        return RawValue(RawKind.MISSING)
    if isinstance(raw, bool):
        return RawValue(RawKind.TEXT, str(raw))
    if isinstance(raw, (int, float)):
        return RawValue(RawKind.NUMERIC, float(raw))
    if isinstance(raw, Decimal128):
        return RawValue(RawKind.NUMERIC, float(raw.to_decimal()))
    if isinstance(raw, Decimal):
        return RawValue(RawKind.NUMERIC, float(raw))
    if isinstance(raw, (datetime, _date)):
        return RawValue(RawKind.TEMPORAL, raw)
    text = str(raw)
    if text == "":
        return RawValue(RawKind.MISSING)
    return RawValue(RawKind.TEXT, text)


def parse_float_prefix(text: str) -> float | None:
    m = _FLOAT_PREFIX.match(text)
    if not m:
        return None
    return float(m.group(0))


def normalize_price(raw: Any) -> PriceResult:
    """
    "$171,39" -> 171.39. Only the first comma becomes a decimal point, so a
    thousands separator truncates: "1,234.56" -> 1.234.
    """
    rv = raw if isinstance(raw, RawValue) else classify(raw)

    if rv.kind is RawKind.MISSING:
        return ParseFailure(DropReason.MISSING_PRICE, raw)
    if rv.kind is RawKind.NUMERIC:
        if not math.isfinite(rv.value):
            return ParseFailure(DropReason.INVALID_PRICE, raw)
        return rv.value
    if rv.kind is RawKind.TEMPORAL:
        return ParseFailure(DropReason.INVALID_PRICE, raw)

    clean = _CURRENCY_AND_SPACE.sub("", rv.value).replace(",", ".", 1).strip()
    price = parse_float_prefix(clean)
    if price is None or not math.isfinite(price):
        return ParseFailure(DropReason.INVALID_PRICE, raw)
    return price


def _to_timestamp(rv: RawValue, dayfirst: bool):
    if rv.kind is RawKind.TEMPORAL:
        return pd.to_datetime(rv.value, utc=True, errors="coerce")
    if rv.kind is RawKind.NUMERIC:
        # epoch milliseconds, as BSON and JavaScript clients store them
        if not math.isfinite(rv.value):
            return pd.NaT
        return pd.to_datetime(rv.value, unit="ms", utc=True, errors="coerce")
    text = rv.value.strip()
    # "today" / "now" and other keywords pandas understands are not stored dates
    if not _HAS_DIGIT.search(text):
        return pd.NaT
    ts = pd.to_datetime(text, format="ISO8601", utc=True, errors="coerce")
    if not pd.isna(ts):
        return ts
    # year-leading text (2020/05/04) is never day-first
    if _YEAR_FIRST.match(text):
        dayfirst = False
    return pd.to_datetime(text, dayfirst=dayfirst, utc=True, errors="coerce")


def normalize_date(raw: Any, dayfirst: bool = True) -> DateResult:
    """Return the UTC calendar day as YYYY-MM-DD, e.g. "15.05.2020" -> "2020-05-15"."""
    rv = raw if isinstance(raw, RawValue) else classify(raw)

    if rv.kind is RawKind.MISSING:
        return ParseFailure(DropReason.MISSING_DATE, raw)
    if rv.kind is RawKind.TEXT and not rv.value.strip():
        return ParseFailure(DropReason.MISSING_DATE, raw)

    try:
        ts = _to_timestamp(rv, dayfirst)
    except (ValueError, TypeError, OverflowError):
        return ParseFailure(DropReason.INVALID_DATE, raw)

    if ts is None or pd.isna(ts):
        return ParseFailure(DropReason.INVALID_DATE, raw)
    return ts.strftime("%Y-%m-%d")
