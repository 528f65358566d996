import datetime as dt

import numpy as np
import pytest

from synthfit_gen import FixtureConfig, FixtureRepository, initialize
from synthfit_gen.skyline import BASIS_HR, BASIS_POWER
from synthfit_gen.training_load import TrainingLoadSimulator

from conftest import REFERENCE_DATE, decode_skyline


def test_date_range_query_newest_first(repo):
    acts = repo.get_activities(oldest="2024-01-10", newest="2024-01-12")
    assert acts
    days = [a["start_date_local"][:10] for a in acts]
    assert all("2024-01-10" <= d <= "2024-01-12" for d in days)
    assert [a["start_date_local"] for a in acts] == sorted((a["start_date_local"] for a in acts), reverse=True)


def test_query_accepts_dates(repo):
    by_str = repo.get_activities(oldest="2024-03-01", newest="2024-03-31")
    by_date = repo.get_activities(oldest=dt.date(2024, 3, 1), newest=dt.date(2024, 3, 31))
    assert by_str == by_date


def test_full_year_span(repo):
    wellness = repo.get_wellness()
    assert len(wellness) == 366
    assert wellness[0]["id"] == "2023-06-16"
    assert wellness[-1]["id"] == REFERENCE_DATE
    assert repo.get_oldest_activity_date() >= "2023-06-16"
    assert repo.get_activities()[0]["start_date_local"][:10] <= REFERENCE_DATE


def test_wellness_contiguous_oldest_first(repo):
    rows = repo.get_wellness(oldest="2024-02-01", newest="2024-02-29")
    dates = [dt.date.fromisoformat(r["id"]) for r in rows]
    assert len(rows) == 29
    assert all((b - a).days == 1 for a, b in zip(dates, dates[1:]))


def test_activity_load_matches_wellness(repo):
    wellness = {w["id"]: w for w in repo.get_wellness()}
    for act in repo.get_activities(oldest="2024-05-01"):
        day = wellness[act["start_date_local"][:10]]
        assert act["icu_ctl"] == day["ctl"]
        assert act["icu_atl"] == day["atl"]


def test_wellness_load_is_daily_tss(repo):
    per_day = {}
    for act in repo.get_activities():
        key = act["start_date_local"][:10]
        per_day[key] = per_day.get(key, 0) + act["icu_training_load"]
    for row in repo.get_wellness():
        assert row["ctlLoad"] == per_day.get(row["id"], 0)


def test_only_monday_and_thursday_can_be_rest_days(repo):
    days = {a["start_date_local"][:10] for a in repo.get_activities()}
    for row in repo.get_wellness():
        weekday = dt.date.fromisoformat(row["id"]).weekday()
        if weekday not in (0, 3):
            assert row["id"] in days
        if row["id"] not in days:
            assert row["ctlLoad"] == 0


def test_activity_record_shape(repo):
    act = repo.get_activities()[0]
    for key in ("id", "start_date_local", "type", "name", "distance", "moving_time", "elapsed_time",
                "average_speed", "average_heartrate", "icu_training_load", "icu_ctl", "icu_atl",
                "icu_hr_zone_times", "skyline_chart_bytes", "stream_types"):
        assert key in act
    assert act["id"].startswith("demo-")
    assert act["average_speed"] == pytest.approx(act["distance"] / act["moving_time"], abs=1e-3)


def test_zone_times_and_skyline(repo):
    for act in repo.get_activities(oldest="2024-04-01"):
        assert sum(act["icu_hr_zone_times"]) == act["moving_time"]
        fields = decode_skyline(act["skyline_chart_bytes"])
        if act["type"] in ("Ride", "VirtualRide"):
            assert sum(z["secs"] for z in act["icu_zone_times"]) == act["moving_time"]
            assert fields[5] == BASIS_POWER and fields[1] == 7
        else:
            assert act["icu_zone_times"] is None
            assert fields[5] == BASIS_HR and fields[1] == 5


def test_streams_match_declared_types(repo):
    for act in repo.get_activities(oldest="2024-06-01"):
        streams = repo.get_activity_streams(act["id"])
        assert list(streams) == act["stream_types"]
        n = len(streams["time"])
        assert all(len(v) == n for v in streams.values())
        if act["distance"] > 0:
            assert abs(streams["distance"][-1] - act["distance"]) <= 1


def test_map_bounds_and_gpsless(repo):
    acts = repo.get_activities()
    gps = next(a for a in acts if "latlng" in a["stream_types"])
    m = repo.get_activity_map(gps["id"])
    (lo_lat, lo_lng), (hi_lat, hi_lng) = m["bounds"]
    assert all(lo_lat <= lat <= hi_lat and lo_lng <= lng <= hi_lng for lat, lng in m["latlngs"])
    assert repo.get_activity_map(gps["id"], bounds_only=True)["latlngs"] is None
    assert repo.get_activity_streams(gps["id"])["latlng"][0] == m["latlngs"][0]
    pool = next((a for a in acts if a["name"].endswith("Pool Swim")), None)
    if pool is not None:
        assert repo.get_activity_map(pool["id"]) is None
        assert "latlng" not in pool["stream_types"]


def test_unknown_ids(repo):
    assert repo.get_activity("demo-1999-01-01-0") is None
    assert repo.get_activity_streams("nope") is None
    assert repo.get_activity_map("nope") is None


def test_results_are_copies(repo):
    act = repo.get_activities()[0]
    act["name"] = "changed"
    act["icu_hr_zone_times"].append(1)
    fresh = repo.get_activity(act["id"])
    assert fresh["name"] != "changed"
    assert sum(fresh["icu_hr_zone_times"]) == fresh["moving_time"]


def test_static_fixtures(repo):
    assert repo.get_athlete()["icu_ftp"] == 250
    curve = repo.get_pace_curve()
    assert curve["endDate"] == REFERENCE_DATE
    assert len(repo.get_power_curve()["secs"]) == len(repo.get_power_curve()["watts"])
    assert {s["id"] for s in repo.get_sport_settings()} == {"Ride", "Run"}


def test_deterministic_across_instances():
    cfg = FixtureConfig(n_days=45)
    a = initialize("2024-01-20", cfg)
    b = initialize("2024-01-20", cfg)
    assert a.get_activities() == b.get_activities()
    assert a.get_wellness() == b.get_wellness()
    aid = a.get_activities()[0]["id"]
    assert a.get_activity_streams(aid) == b.get_activity_streams(aid)


def test_distinct_reference_dates_give_distinct_sets():
    cfg = FixtureConfig(n_days=20)
    a = initialize("2024-01-20", cfg).get_wellness()
    b = initialize("2024-02-20", cfg).get_wellness()
    assert a[-1]["id"] != b[-1]["id"]


def test_empty_route_library_uses_fallback_loop():
    cfg = FixtureConfig(n_days=14)
    repo = FixtureRepository("2024-03-10", cfg, routes=[])
    gps = [a for a in repo.get_activities() if "latlng" in a["stream_types"]]
    assert gps
    m = repo.get_activity_map(gps[0]["id"])
    assert len(m["latlngs"]) == cfg.fallback_points + 1
    (lo_lat, _), (hi_lat, _) = m["bounds"]
    assert lo_lat < cfg.fallback_center[0] < hi_lat
    assert gps[0]["locality"] is None


def test_zero_day_dataset():
    repo = initialize("2024-03-10", FixtureConfig(n_days=0))
    assert len(repo.get_wellness()) == 1


def test_zone_boundary_fields(repo):
    act = repo.get_activities()[0]
    assert act["icu_hr_zones"] == [130, 145, 160, 170, 180, 190]
    assert act["icu_power_zones"] == [125, 170, 210, 250, 290, 350]


def test_ramp_rate_against_previous_published_ctl():
    cfg = FixtureConfig(n_days=40)
    fresh = initialize("2024-03-10", cfg)
    states = _load_states(fresh, cfg)
    rows = fresh.get_wellness()
    assert rows[0]["rampRate"] == 0
    for i in range(1, len(rows)):
        expected = round(states[i].ctl - rows[i - 1]["ctl"], 2)
        assert rows[i]["rampRate"] == pytest.approx(expected, abs=0.011)
        assert abs(rows[i]["rampRate"] - (rows[i]["ctl"] - rows[i - 1]["ctl"])) <= 0.06


def _load_states(repo, cfg):
    """Re-run the load fold from the published daily TSS."""
    per_day = {}
    for act in repo.get_activities():
        key = act["start_date_local"][:10]
        per_day[key] = per_day.get(key, 0) + act["icu_training_load"]
    rows = repo.get_wellness()
    months = [int(r["id"][5:7]) for r in rows]
    return TrainingLoadSimulator(cfg).simulate([per_day.get(r["id"], 0) for r in rows], months)


def test_streams_distance_never_decreases(repo):
    for act in repo.get_activities(oldest="2024-05-15"):
        streams = repo.get_activity_streams(act["id"])
        if "distance" in streams:
            assert np.all(np.diff(streams["distance"]) >= 0)
