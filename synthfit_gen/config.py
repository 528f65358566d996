from __future__ import annotations

"""Generator configuration for the SynthFit demo fixture engine.

Every constant the engine uses lives here so that a dataset can be reproduced from
(reference date, config JSON) alone.
"""

from dataclasses import dataclass, asdict, field
from typing import Literal, Dict, Any, List, Tuple
import json


OutputFormat = Literal["csv", "parquet", "json", "both"]


@dataclass
class FixtureConfig:
    # ---- dataset shape ----
    n_days: int = 365                  # sweep runs n_days..0 days ago (inclusive)

    # ---- training load (CTL/ATL) ----
    initial_ctl: float = 35.0
    initial_atl: float = 35.0
    atl_days: float = 7.0
    ctl_days: float = 42.0
    ctl_drift: float = 0.01            # daily pull toward the seasonal CTL target
    # month -> target CTL; Dec-Feb, Mar-May, Jun-Aug, Sep-Nov
    season_ctl_targets: List[float] = field(default_factory=lambda: [35.0, 45.0, 55.0, 45.0])
    season_volume_mults: List[float] = field(default_factory=lambda: [0.70, 0.90, 1.15, 1.00])

    # ---- weekly rhythm ----
    monday_rest_prob: float = 0.80
    thursday_rest_prob: float = 0.50
    double_session_prob: float = 0.08  # second (evening) session on a training day

    # ---- athlete ----
    ftp: int = 250
    lthr: int = 165
    max_hr: int = 190
    resting_hr: int = 55
    weight_kg: float = 75.0
    base_hrv: float = 50.0

    # ---- routes ----
    route_ratio_min: float = 0.5
    route_ratio_max: float = 2.0
    route_points: int = 200            # waypoints are densified to this many samples
    route_jitter_deg: float = 0.00005
    fallback_center: Tuple[float, float] = (-33.89, 151.2)
    fallback_radius_deg: float = 0.01
    fallback_points: int = 50

    # ---- streams ----
    sample_seconds: int = 5
    min_samples: int = 100
    max_samples: int = 1000
    hr_min: int = 80
    hr_max: int = 200
    watts_floor: int = 50
    grade_limit: float = 25.0
    base_altitude_m: float = 50.0

    # ---- zones / skyline ----
    power_zone_weights: List[float] = field(default_factory=lambda: [0.10, 0.35, 0.25, 0.15, 0.10, 0.04, 0.01])
    hr_zone_weights: List[float] = field(default_factory=lambda: [0.15, 0.40, 0.25, 0.15, 0.05])
    power_zone_intensity: List[int] = field(default_factory=lambda: [45, 65, 83, 98, 113, 135, 170])
    hr_zone_intensity: List[int] = field(default_factory=lambda: [60, 72, 83, 92, 100])
    skyline_min_zone_secs: int = 10
    skyline_block_secs: int = 600
    skyline_max_blocks: int = 3
    skyline_jitter: float = 6.0        # full width; intensity += (r - 0.5) * jitter

    # ---- output ----
    out_format: OutputFormat = "csv"

    def season_index(self, month: int) -> int:
        """Map a calendar month (1-12) to its season band."""
        if month == 12 or month <= 2:
            return 0
        if month <= 5:
            return 1
        if month <= 8:
            return 2
        return 3

    def target_ctl(self, month: int) -> float:
        return float(self.season_ctl_targets[self.season_index(month)])

    def volume_mult(self, month: int) -> float:
        return float(self.season_volume_mults[self.season_index(month)])

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self, path: str) -> None:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

    @staticmethod
    def from_json(path: str) -> "FixtureConfig":
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if "fallback_center" in data:
            data["fallback_center"] = tuple(data["fallback_center"])
        return FixtureConfig(**data)
