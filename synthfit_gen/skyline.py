"""Skyline chart payload: zone time split into shuffled interval blocks.

Wire format (base64 of a protobuf-style message):

- field 1 (varint): number of zones
- field 2 (packed varints): duration of each interval, seconds
- field 3 (packed varints): intensity of each interval (% FTP or % LTHR)
- field 4 (packed varints): 1-based zone of each interval
- field 5 (varint): zone basis, 1 = power, 2 = heart rate
"""
from __future__ import annotations
import base64
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from .seeded import RandomStream
from .utils import round_half_up
from .wire import MessageWriter
from .zones import ZoneTime

BASIS_POWER = 1
BASIS_HR = 2

FIELD_ZONE_COUNT = 1
FIELD_DURATIONS = 2
FIELD_INTENSITIES = 3
FIELD_ZONES = 4
FIELD_BASIS = 5

DEFAULT_POWER_INTENSITY = (45, 65, 83, 98, 113, 135, 170)
DEFAULT_HR_INTENSITY = (60, 72, 83, 92, 100)


@dataclass(frozen=True)
class SkylineInterval:
    duration: int
    intensity: int
    zone: int  # 1-based


def _zone_seconds(zones: Sequence[Union[ZoneTime, int, float]]) -> List[int]:
    return [z.seconds if isinstance(z, ZoneTime) else int(z) for z in zones]


def build_intervals(zones: Sequence[Union[ZoneTime, int, float]], rs: RandomStream,
                    intensity_table: Sequence[int], min_secs: int = 10, block_secs: int = 600,
                    max_blocks: int = 3, jitter: float = 6.0) -> List[SkylineInterval]:
    """Split each zone into 1..max_blocks blocks, then shuffle the blocks."""
    intervals: List[SkylineInterval] = []
    for idx, secs in enumerate(_zone_seconds(zones)):
        if secs < min_secs:
            continue
        blocks = max(1, min(max_blocks, secs // block_secs if block_secs > 0 else 1))
        base = secs // blocks
        base_intensity = intensity_table[idx] if idx < len(intensity_table) else intensity_table[-1]
        for b in range(blocks):
            duration = base if b < blocks - 1 else secs - base * (blocks - 1)
            intensity = max(1, round_half_up(base_intensity + (rs.next() - 0.5) * jitter))
            intervals.append(SkylineInterval(duration, intensity, idx + 1))
    # Fisher-Yates: swap i with a seeded index in [0, i]
    for i in range(len(intervals) - 1, 0, -1):
        j = int(rs.next() * (i + 1))
        intervals[i], intervals[j] = intervals[j], intervals[i]
    return intervals


def serialize(intervals: Sequence[SkylineInterval], zone_count: int, basis: int) -> bytes:
    return (
        MessageWriter()
        .scalar(FIELD_ZONE_COUNT, zone_count)
        .packed(FIELD_DURATIONS, (iv.duration for iv in intervals))
        .packed(FIELD_INTENSITIES, (iv.intensity for iv in intervals))
        .packed(FIELD_ZONES, (iv.zone for iv in intervals))
        .scalar(FIELD_BASIS, basis)
        .to_bytes()
    )


def encode_skyline(zones: Sequence[Union[ZoneTime, int, float]], basis: int, seed: str,
                   intensity_table: Optional[Sequence[int]] = None, min_secs: int = 10,
                   block_secs: int = 600, max_blocks: int = 3, jitter: float = 6.0) -> Optional[str]:
    """Base64 skyline payload for a zone breakdown, or ``None`` when no zone qualifies."""
    if intensity_table is None:
        intensity_table = DEFAULT_POWER_INTENSITY if basis == BASIS_POWER else DEFAULT_HR_INTENSITY
    intervals = build_intervals(zones, RandomStream(seed), intensity_table, min_secs, block_secs,
                                max_blocks, jitter)
    if not intervals:
        return None
    raw = serialize(intervals, len(zones), basis)
    return base64.b64encode(raw).decode("ascii")
