"""Per-activity sensor streams (heart rate, power, position, altitude, cadence, speed, distance, grade).

All noise comes from the activity's own :class:`RandomStream`, drawn channel by channel
in a fixed order (heartrate, watts, altitude, cadence, velocity), so a stream set is
reproducible from the activity id alone.
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from .config import FixtureConfig
from .routes import LatLng
from .seeded import RandomStream
from .utils import clamp, round_half_up_array

RIDE_TYPES = ("Ride", "VirtualRide")
RUN_TYPES = ("Run", "TrailRun")
FOOT_TYPES = ("Hike", "Walk")

STREAM_ORDER = ("time", "latlng", "heartrate", "watts", "altitude", "fixed_altitude", "cadence",
                "velocity_smooth", "distance", "grade_smooth")


def stream_types_for(activity_type: str, has_route: bool, distance: float = 1.0) -> List[str]:
    """Stream keys an activity of this type exposes, in API order."""
    present = {"time", "heartrate"}
    if has_route:
        present.add("latlng")
    if activity_type in RIDE_TYPES:
        present.update(("watts", "altitude", "fixed_altitude", "cadence", "velocity_smooth"))
    elif activity_type in RUN_TYPES:
        present.update(("altitude", "fixed_altitude", "cadence", "velocity_smooth"))
    elif activity_type in FOOT_TYPES:
        present.update(("altitude", "fixed_altitude"))
    if distance > 0:
        present.add("distance")
        if "altitude" in present:
            present.add("grade_smooth")
    return [k for k in STREAM_ORDER if k in present]


def sample_count(moving_time: float, cfg: FixtureConfig) -> int:
    if moving_time <= 0:
        return 0
    return int(clamp(moving_time // cfg.sample_seconds, cfg.min_samples, cfg.max_samples))


def integrate_distance(velocity: np.ndarray, time: np.ndarray, total: float) -> np.ndarray:
    """Trapezoidal distance from velocity, rescaled so the last sample equals ``total``."""
    n = len(time)
    if n == 0:
        return np.zeros(0)
    raw = np.zeros(n)
    if n > 1:
        dt = np.diff(time).astype(float)
        raw[1:] = np.cumsum((velocity[1:] + velocity[:-1]) / 2.0 * dt)
    if raw[-1] > 0:
        return raw * (total / raw[-1])
    return np.linspace(0.0, total, n)


def _hill_profile(progress: np.ndarray, gain: float) -> np.ndarray:
    return (np.sin(progress * np.pi * 2) * (gain / 3)
            + np.sin(progress * np.pi * 4 + 1) * (gain / 4)
            + np.sin(progress * np.pi * 6 + 2) * (gain / 6))


class StreamSynthesizer:
    def __init__(self, cfg: Optional[FixtureConfig] = None):
        self.cfg = cfg or FixtureConfig()

    def synthesize(self, activity: Dict[str, Any], coords: Optional[Sequence[LatLng]],
                   seed: str) -> Dict[str, list]:
        cfg = self.cfg
        moving_time = float(activity.get("moving_time") or 0)
        total_distance = float(activity.get("distance") or 0)
        kind = activity.get("type", "")
        types = set(activity.get("stream_types") or stream_types_for(kind, bool(coords), total_distance))

        n = sample_count(moving_time, cfg)
        if n == 0:
            return {"time": []}
        time = np.floor(np.arange(n) * (moving_time / n) + 0.5).astype(int)
        progress = time / moving_time
        rs = RandomStream(seed)
        streams: Dict[str, list] = {"time": time.tolist()}

        # heart rate: warm-up over the first 20%, linear cardiac drift, noise
        base_hr = float(activity.get("average_heartrate") or 140)
        warmup = np.minimum(1.0, progress * 5)
        hr = base_hr * (0.85 + 0.15 * warmup) + progress * 5 + rs.centered(n, 10)
        streams["heartrate"] = np.clip(round_half_up_array(hr), cfg.hr_min, cfg.hr_max).astype(int).tolist()

        if "watts" in types:
            ftp = float(activity.get("icu_ftp") or cfg.ftp)
            level = float(activity.get("average_watts") or ftp * 0.65) / ftp
            watts = ftp * (level + np.sin(progress * np.pi * 8) * 0.2) + rs.centered(n, ftp * 0.3)
            streams["watts"] = np.maximum(cfg.watts_floor, round_half_up_array(watts)).astype(int).tolist()

        if "latlng" in types and coords:
            m = len(coords)
            idx = np.minimum((np.arange(n) * m) // n, m - 1)
            streams["latlng"] = [[float(coords[i][0]), float(coords[i][1])] for i in idx]

        gain = float(activity.get("total_elevation_gain") or 100)
        hills = _hill_profile(progress, gain)
        altitude = None
        if "altitude" in types:
            altitude = np.maximum(0.0, round_half_up_array(cfg.base_altitude_m + hills + rs.centered(n, 5), 1))
            streams["altitude"] = altitude.tolist()
            streams["fixed_altitude"] = altitude.tolist()

        if "cadence" in types:
            if kind in RIDE_TYPES:
                base = float(activity.get("average_cadence") or 85)
                cad = base + np.sin(progress * np.pi * 2) * 5 + rs.centered(n, 8)
                cad = np.clip(round_half_up_array(cad), 60, 120)
            else:
                base = float(activity.get("average_cadence") or 170)
                cad = np.clip(round_half_up_array(base + rs.centered(n, 6)), 150, 190)
            streams["cadence"] = cad.astype(int).tolist()

        if total_distance > 0:
            avg = float(activity.get("average_speed") or total_distance / moving_time)
            climb = np.gradient(hills) if n > 1 else np.zeros(n)
            peak = float(np.abs(climb).max())
            slope = climb / peak if peak > 0 else climb
            velocity = avg * (1.0 - 0.15 * slope) + rs.centered(n, avg * 0.15)
            velocity = np.maximum(velocity, avg * 0.2)
            if "velocity_smooth" in types:
                streams["velocity_smooth"] = round_half_up_array(velocity, 3).tolist()

            distance = integrate_distance(velocity, time, total_distance)
            streams["distance"] = round_half_up_array(distance, 1).tolist()

            if altitude is not None:
                step = total_distance / n
                grade = np.zeros(n)
                grade[1:] = np.diff(altitude) / step * 100
                grade = np.clip(grade, -cfg.grade_limit, cfg.grade_limit)
                streams["grade_smooth"] = round_half_up_array(grade, 1).tolist()

        return {k: streams[k] for k in STREAM_ORDER if k in streams}
