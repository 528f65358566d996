from __future__ import annotations
import datetime as dt
import math
import numpy as np
import pandas as pd
from typing import Optional, Union

DateLike = Union[str, dt.date, dt.datetime, pd.Timestamp]


def round_half_up(x: float) -> int:
    # Half-way values round toward +inf (not banker's rounding)
    return int(math.floor(x + 0.5))

def round_to(x: float, places: int) -> float:
    scale = 10 ** places
    return math.floor(x * scale + 0.5) / scale

def round_half_up_array(a: np.ndarray, places: int = 0) -> np.ndarray:
    scale = 10.0 ** places
    return np.floor(np.asarray(a, dtype=float) * scale + 0.5) / scale

def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))

def safe_div(num: float, den: float, default: float = 0.0) -> float:
    return num / den if den else default

def to_date(value: Optional[DateLike]) -> dt.date:
    """Coerce a date-ish value to a calendar date; ``None`` means today."""
    if value is None:
        return dt.date.today()
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    return pd.Timestamp(value).date()

def date_range(start_date: DateLike, n_days: int):
    start = pd.to_datetime(start_date)
    return pd.date_range(start, periods=n_days, freq="D")

def sweep_dates(reference_date: DateLike, n_days: int) -> list[dt.date]:
    """Calendar days from ``n_days`` before the reference date up to and including it."""
    ref = pd.Timestamp(to_date(reference_date))
    return [d.date() for d in date_range(ref - pd.Timedelta(days=n_days), n_days + 1)]

def format_date_id(d: dt.date) -> str:
    return d.strftime("%Y-%m-%d")

def format_local_iso(t: dt.datetime) -> str:
    return t.strftime("%Y-%m-%dT%H:%M:%S")
