from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from .utils import round_half_up

POWER_ZONE_WEIGHTS = (0.10, 0.35, 0.25, 0.15, 0.10, 0.04, 0.01)
HR_ZONE_WEIGHTS = (0.15, 0.40, 0.25, 0.15, 0.05)

_DEFAULT_TABLES = {len(POWER_ZONE_WEIGHTS): POWER_ZONE_WEIGHTS, len(HR_ZONE_WEIGHTS): HR_ZONE_WEIGHTS}


@dataclass(frozen=True)
class ZoneTime:
    zone_id: str
    seconds: int


def zone_weights(zone_count: int, table: Optional[Sequence[float]] = None) -> np.ndarray:
    """Normalised weight table; zone counts without a table split evenly."""
    if table is None:
        table = _DEFAULT_TABLES.get(zone_count)
    w = np.asarray(table if table is not None else [1.0] * zone_count, dtype=float)
    total = w.sum()
    return w / total if total > 0 else np.full(len(w), 1.0 / max(1, len(w)))


def estimate_zone_seconds(moving_time: float, zone_count: int,
                          table: Optional[Sequence[float]] = None) -> List[int]:
    """Split ``moving_time`` across zones. The result always sums to ``round(moving_time)``."""
    if zone_count <= 0:
        return []
    total = max(0, round_half_up(moving_time))
    secs = [round_half_up(w * total) for w in zone_weights(zone_count, table)]
    residue = total - sum(secs)
    if residue:
        largest = max(range(len(secs)), key=lambda i: secs[i])
        secs[largest] += residue
    return secs


def estimate(moving_time: float, zone_count: int, table: Optional[Sequence[float]] = None) -> List[ZoneTime]:
    return [ZoneTime(f"Z{i + 1}", s) for i, s in enumerate(estimate_zone_seconds(moving_time, zone_count, table))]


def to_api_zone_times(breakdown: Sequence[ZoneTime]) -> List[dict]:
    """``icu_zone_times`` shape: ``[{"id": "Z1", "secs": 123}, ...]``."""
    return [{"id": z.zone_id, "secs": z.seconds} for z in breakdown]
