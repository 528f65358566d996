from __future__ import annotations
import math
from typing import Any, Dict, List, Optional, Sequence

from .activities import DayPlan
from .config import FixtureConfig
from .seeded import RandomStream
from .training_load import LoadState, TrainingLoadSimulator
from .utils import clamp, round_half_up, round_to


def run_load_fold(days: Sequence[DayPlan], cfg: FixtureConfig) -> List[LoadState]:
    """CTL/ATL after each day, oldest first. Activities take the state of their own day."""
    sim = TrainingLoadSimulator(cfg)
    states = sim.simulate([d.tss for d in days], [d.date.month for d in days])
    for day, state in zip(days, states):
        for act in day.activities:
            act.record["icu_ctl"] = round_to(state.ctl, 1)
            act.record["icu_atl"] = round_to(state.atl, 1)
    return states


def wellness_record(day: DayPlan, state: LoadState, prev_ctl: Optional[float], days_ago: int,
                    cfg: FixtureConfig) -> Dict[str, Any]:
    rs = RandomStream(day.date_str + "-wellness-fixture")
    fatigue = state.atl / 50
    rhr = round_half_up(cfg.resting_hr + fatigue * 5 + (rs.next() - 0.5) * 4)
    hrv = round_half_up(cfg.base_hrv - fatigue * 5 + (rs.next() - 0.5) * 10)
    sleep_hours = 7 + (0.5 if day.rest else 0) + (rs.next() - 0.5) * 1.5
    sleep_score = round_half_up(70 + (sleep_hours - 6) * 10 + rs.next() * 10)
    ctl = round_to(state.ctl, 1)
    return {
        "id": day.date_str,
        "ctl": ctl,
        "atl": round_to(state.atl, 1),
        "rampRate": round_to(state.ctl - (state.ctl if prev_ctl is None else prev_ctl), 2),
        "ctlLoad": round_half_up(day.tss),
        "atlLoad": round_half_up(day.tss),
        "sportInfo": [
            {"type": "Ride", "eftp": cfg.ftp + round_half_up((state.ctl - 40) * 1.5), "wPrime": 15000, "pMax": 800},
            {"type": "Run", "eftp": 300, "wPrime": 20000, "pMax": 600},
        ],
        "weight": round_to(cfg.weight_kg + math.sin(days_ago * 0.1) * 1.5, 1),
        "restingHR": rhr,
        "hrv": int(clamp(hrv, 20, 100)),
        "hrvSDNN": round_half_up(hrv * 1.2),
        "sleepSecs": round_half_up(sleep_hours * 3600),
        "sleepScore": int(clamp(sleep_score, 50, 100)),
        "sleepQuality": 3 if sleep_score >= 80 else 2 if sleep_score >= 60 else 1,
        "steps": round_half_up((5000 if day.rest else 10000) + rs.next() * 5000),
        "vo2max": round_to(50 + (state.ctl - 40) * 0.1, 1),
    }


def generate_wellness(days: Sequence[DayPlan], states: Sequence[LoadState], cfg: FixtureConfig) -> List[Dict[str, Any]]:
    """One wellness row per calendar day, oldest first."""
    rows: List[Dict[str, Any]] = []
    prev_ctl: Optional[float] = None
    for i, (day, state) in enumerate(zip(days, states)):
        rows.append(wellness_record(day, state, prev_ctl, len(days) - 1 - i, cfg))
        # ramp is measured against the previous row as published (1 dp)
        prev_ctl = rows[-1]["ctl"]
    return rows
