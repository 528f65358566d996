"""Static athlete fixtures: profile, sport settings (zones) and best-effort curves."""
from __future__ import annotations
import datetime as dt
from typing import Any, Dict, List

from .config import FixtureConfig
from .utils import format_date_id

HR_ZONE_BPM = [130, 145, 160, 170, 180, 190]
POWER_ZONE_WATTS = [125, 170, 210, 250, 290, 350]

POWER_CURVE_SECS = [1, 2, 5, 10, 15, 20, 30, 45, 60, 90, 120, 180, 300, 360, 480, 600, 900, 1200, 1800,
                    2400, 3600, 5400, 7200]
POWER_CURVE_WATTS = [950, 900, 750, 600, 520, 460, 410, 370, 340, 315, 300, 285, 270, 265, 258, 252, 248,
                     245, 240, 235, 228, 220, 210]

PACE_CURVE_DISTANCES = [100, 200, 400, 800, 1000, 1500, 2000, 3000, 5000, 10000, 21097]
PACE_CURVE_TIMES = [18, 38, 82, 180, 235, 375, 520, 840, 1500, 3200, 7200]


def athlete(cfg: FixtureConfig) -> Dict[str, Any]:
    return {
        "id": "demo",
        "name": "Demo Athlete",
        "profile_medium": None,
        "locale": "en-AU",
        "timezone": "Australia/Sydney",
        "icu_weight": cfg.weight_kg,
        "icu_ftp": cfg.ftp,
        "icu_lthr": cfg.lthr,
        "icu_max_hr": cfg.max_hr,
        "icu_resting_hr": cfg.resting_hr,
    }


def _zones(bounds: List[tuple]) -> List[Dict[str, Any]]:
    names = ["Recovery", "Endurance", "Tempo", "Threshold", "VO2max", "Anaerobic", "Neuromuscular"]
    colors = ["#808080", "#00BFFF", "#32CD32", "#FFD700", "#FF4500", "#FF0000", "#8B0000"]
    return [{"id": i + 1, "name": names[i], "min": lo, "max": hi, "color": colors[i]}
            for i, (lo, hi) in enumerate(bounds)]


def sport_settings(cfg: FixtureConfig) -> List[Dict[str, Any]]:
    return [
        {
            "id": "Ride",
            "types": ["Ride", "VirtualRide"],
            "ftp": cfg.ftp,
            "icu_power_zones": _zones([(0, 55), (55, 75), (75, 90), (90, 105), (105, 120), (120, 150), (150, None)]),
            "threshold_hr": cfg.lthr,
            "icu_hr_zones": _zones([(0, 60), (60, 70), (70, 80), (80, 90), (90, 100)]),
        },
        {
            "id": "Run",
            "types": ["Run", "TrailRun"],
            "threshold_pace": 300,
            "threshold_hr": 170,
            "icu_hr_zones": _zones([(0, 65), (65, 75), (75, 85), (85, 92), (92, 100)]),
        },
    ]


def power_curve() -> Dict[str, Any]:
    return {"type": "power", "sport": "Ride", "secs": list(POWER_CURVE_SECS), "watts": list(POWER_CURVE_WATTS)}


def pace_curve(reference_date: dt.date, days: int = 42) -> Dict[str, Any]:
    return {
        "type": "pace",
        "sport": "Run",
        "distances": list(PACE_CURVE_DISTANCES),
        "times": list(PACE_CURVE_TIMES),
        "pace": [round(d / t, 2) for d, t in zip(PACE_CURVE_DISTANCES, PACE_CURVE_TIMES)],
        "criticalSpeed": 3.45,
        "dPrime": 200,
        "r2": 0.98,
        "startDate": format_date_id(reference_date - dt.timedelta(days=days)),
        "endDate": format_date_id(reference_date),
        "days": days,
    }
