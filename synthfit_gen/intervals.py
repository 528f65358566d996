"""Work/recovery interval segmentation for an activity's streams."""
from __future__ import annotations
from typing import Any, Dict, List, Optional

import numpy as np

from .seeded import RandomStream
from .utils import round_half_up, round_to

WORK = "WORK"
RECOVERY = "RECOVERY"

POWER_ZONE_UPPER = (55, 75, 90, 105, 120, 150)  # % FTP, Z1..Z6 upper bounds
HR_ZONE_UPPER = (60, 70, 80, 90)                # % LTHR, Z1..Z4 upper bounds


def segment_boundaries(n: int, reps: int, rs: RandomStream) -> List[tuple]:
    """(start, end, type) sample ranges: warm-up, alternating work/recovery reps, cool-down."""
    if n < 2:
        return [(0, max(0, n - 1), WORK)] if n else []
    warmup = 0.10 + rs.next() * 0.10
    cooldown = 0.08 + rs.next() * 0.04
    # work blocks weigh 1.5x a recovery block
    weights = []
    for r in range(reps):
        weights.append((WORK, 1.5 + rs.next() * 0.5))
        if r < reps - 1:
            weights.append((RECOVERY, 1.0))
    body = 1.0 - warmup - cooldown
    total_w = sum(w for _, w in weights)

    fractions = [(RECOVERY, warmup)] + [(t, body * w / total_w) for t, w in weights] + [(RECOVERY, cooldown)]
    bounds = []
    start = 0
    acc = 0.0
    for i, (kind, frac) in enumerate(fractions):
        acc += frac
        end = n - 1 if i == len(fractions) - 1 else min(n - 1, max(start + 1, round_half_up(acc * (n - 1))))
        if end <= start:
            continue
        bounds.append((start, end, kind))
        start = end
    return bounds


def _mean(arr: Optional[np.ndarray], s: int, e: int) -> Optional[float]:
    if arr is None or e <= s:
        return None
    return float(arr[s:e + 1].mean())


def _zone(intensity: Optional[float], upper) -> Optional[int]:
    if intensity is None:
        return None
    for i, bound in enumerate(upper):
        if intensity < bound:
            return i + 1
    return len(upper) + 1


def build_intervals(activity: Dict[str, Any], streams: Dict[str, list], seed: str, is_hard: bool = False,
                    ftp: float = 250, lthr: float = 165) -> Dict[str, Any]:
    """``IntervalsDTO``-shaped payload: ``{id, analyzed, icu_intervals, icu_groups}``."""
    activity_id = activity["id"]
    time = np.asarray(streams.get("time") or [], dtype=float)
    n = len(time)
    rs = RandomStream(seed)
    reps = 3 + int(rs.next() * 4) if is_hard else 1

    def arr(key):
        v = streams.get(key)
        return np.asarray(v, dtype=float) if v else None

    hr, watts, cad, vel, dist, alt = (arr(k) for k in
                                      ("heartrate", "watts", "cadence", "velocity_smooth", "distance", "altitude"))
    intervals = []
    for num, (s, e, kind) in enumerate(segment_boundaries(n, reps, rs), start=1):
        moving = int(time[e] - time[s])
        distance = float(dist[e] - dist[s]) if dist is not None else 0.0
        avg_watts = _mean(watts, s, e)
        avg_hr = _mean(hr, s, e)
        if avg_watts is not None:
            intensity = avg_watts / ftp * 100
            zone = _zone(intensity, POWER_ZONE_UPPER)
        elif avg_hr is not None:
            intensity = avg_hr / lthr * 100
            zone = _zone(intensity, HR_ZONE_UPPER)
        else:
            intensity, zone = None, None
        gain = float(np.clip(np.diff(alt[s:e + 1]), 0, None).sum()) if alt is not None else None
        avg_speed = _mean(vel, s, e)
        if avg_speed is None and moving > 0:
            avg_speed = distance / moving
        intervals.append({
            "id": num,
            "type": kind,
            "label": None,
            "start_index": int(s),
            "end_index": int(e),
            "start_time": int(time[s]),
            "end_time": int(time[e]),
            "moving_time": moving,
            "elapsed_time": moving,
            "distance": round_to(distance, 1),
            "average_watts": round_half_up(avg_watts) if avg_watts is not None else None,
            "average_heartrate": round_half_up(avg_hr) if avg_hr is not None else None,
            "max_heartrate": int(hr[s:e + 1].max()) if hr is not None else None,
            "average_cadence": round_to(_mean(cad, s, e), 1) if cad is not None else None,
            "average_speed": round_to(avg_speed, 3) if avg_speed is not None else None,
            "total_elevation_gain": round_to(gain, 1) if gain is not None else None,
            "intensity": round_half_up(intensity) if intensity is not None else None,
            "zone": zone,
            "group_id": "g1" if kind == WORK else None,
        })

    work = [iv for iv in intervals if iv["type"] == WORK]
    groups = []
    if work:
        moving = sum(iv["moving_time"] for iv in work)

        def weighted(key):
            vals = [(iv[key], iv["moving_time"]) for iv in work if iv[key] is not None]
            total = sum(t for _, t in vals)
            return round_half_up(sum(v * t for v, t in vals) / total) if total else None

        groups.append({
            "id": "g1",
            "count": len(work),
            "moving_time": moving,
            "elapsed_time": moving,
            "distance": round_to(sum(iv["distance"] for iv in work), 1),
            "average_watts": weighted("average_watts"),
            "average_heartrate": weighted("average_heartrate"),
            "max_heartrate": max((iv["max_heartrate"] for iv in work if iv["max_heartrate"] is not None),
                                 default=None),
            "intensity": weighted("intensity"),
        })

    return {"id": activity_id, "analyzed": n > 0, "icu_intervals": intervals, "icu_groups": groups}
