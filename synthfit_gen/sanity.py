from __future__ import annotations
from typing import Optional

import numpy as np
import pandas as pd

from .repository import FixtureRepository


def run_sanity_checks(repo: FixtureRepository, stream_sample: int = 12) -> dict:
    """Invariant checks over a generated dataset.

    Returns a JSON-serializable dict with metrics + pass/fail flags.
    """
    report = {"summary": {}, "checks": []}

    activities = repo.get_activities()
    wellness = pd.DataFrame.from_records(repo.get_wellness())
    report["summary"]["reference_date"] = repo.reference_date.isoformat()
    report["summary"]["activities"] = len(activities)
    report["summary"]["wellness_rows"] = int(wellness.shape[0])

    def add_check(name, ok, details):
        report["checks"].append({"name": name, "ok": bool(ok), "details": details})

    if len(wellness):
        dates = pd.to_datetime(wellness["id"])
        gaps = dates.diff().dropna().dt.days
        add_check("wellness_contiguous", bool((gaps == 1).all()) and dates.is_unique,
                  {"first": wellness["id"].iloc[0], "last": wellness["id"].iloc[-1]})
        add_check("load_non_negative", bool((wellness["ctl"] >= 0).all() and (wellness["atl"] >= 0).all()),
                  {"min_ctl": float(wellness["ctl"].min()), "min_atl": float(wellness["atl"].min())})
        report["summary"]["ctl_mean"] = float(wellness["ctl"].mean())
    else:
        add_check("wellness_contiguous", False, {"rows": 0})

    ids = [a["id"] for a in activities]
    add_check("activity_ids_unique", len(ids) == len(set(ids)), {"n": len(ids)})

    starts = [a["start_date_local"] for a in activities]
    add_check("activities_newest_first", starts == sorted(starts, reverse=True), {})

    bad_zones = [a["id"] for a in activities
                 if sum(a["icu_hr_zone_times"] or []) != a["moving_time"]
                 or (a["icu_zone_times"] and sum(z["secs"] for z in a["icu_zone_times"]) != a["moving_time"])]
    add_check("zone_time_conservation", not bad_zones, {"violations": bad_zones[:10]})

    missing_skyline = [a["id"] for a in activities if a["moving_time"] >= 10 and not a["skyline_chart_bytes"]]
    add_check("skyline_present", not missing_skyline, {"missing": missing_skyline[:10]})

    # distance exactness on an evenly spaced sample
    sample: list = []
    if activities and stream_sample > 0:
        idx = np.unique(np.linspace(0, len(activities) - 1, min(stream_sample, len(activities))).astype(int))
        sample = [activities[i] for i in idx]
    off: list = []
    for act in sample:
        streams: Optional[dict] = repo.get_activity_streams(act["id"])
        dist = (streams or {}).get("distance")
        if act["distance"] > 0 and (not dist or abs(dist[-1] - act["distance"]) > 1):
            off.append(act["id"])
        keys = set(streams or {})
        if keys != set(act["stream_types"]):
            off.append(act["id"] + ":stream_types")
    add_check("stream_distance_exact", not off, {"sampled": len(sample), "violations": off})

    report["summary"]["ok"] = bool(all(c["ok"] for c in report["checks"]))
    return report
