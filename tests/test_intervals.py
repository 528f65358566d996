import pytest

from synthfit_gen.intervals import RECOVERY, WORK, segment_boundaries
from synthfit_gen.seeded import RandomStream


def test_segments_cover_the_activity():
    bounds = segment_boundaries(900, 4, RandomStream("seg"))
    assert bounds[0][0] == 0
    assert bounds[-1][1] == 899
    for (_, end, _), (start, _, _) in zip(bounds, bounds[1:]):
        assert end == start
    kinds = [k for _, _, k in bounds]
    assert kinds[0] == RECOVERY and kinds[-1] == RECOVERY
    assert kinds.count(WORK) == 4


def test_hard_activity_intervals(repo):
    hard = [a for a in repo.get_activities() if "Interval" in a["name"] or "Tempo" in a["name"]]
    assert hard
    out = repo.get_activity_intervals(hard[0]["id"])
    work = [iv for iv in out["icu_intervals"] if iv["type"] == WORK]
    assert 3 <= len(work) <= 6
    assert out["icu_groups"][0]["count"] == len(work)
    assert out["analyzed"] is True
    assert all(iv["group_id"] == "g1" for iv in work)


def test_easy_activity_has_one_rep(repo):
    easy = [a for a in repo.get_activities() if a["name"].endswith(" Walk")]
    out = repo.get_activity_intervals(easy[0]["id"])
    assert [iv["type"] for iv in out["icu_intervals"]] == [RECOVERY, WORK, RECOVERY]


def test_interval_fields(repo):
    ride = next(a for a in repo.get_activities() if a["type"] == "Ride")
    out = repo.get_activity_intervals(ride["id"])
    first = out["icu_intervals"][0]
    assert first["start_index"] == 0 and first["start_time"] == 0
    assert all(iv["average_watts"] is not None for iv in out["icu_intervals"])
    total = sum(iv["moving_time"] for iv in out["icu_intervals"])
    streams = repo.get_activity_streams(ride["id"])
    assert total == streams["time"][-1]
    assert out["id"] == ride["id"]


def test_intervals_are_deterministic(repo):
    aid = repo.get_activities()[0]["id"]
    assert repo.get_activity_intervals(aid) == repo.get_activity_intervals(aid)


def test_unknown_activity(repo):
    assert repo.get_activity_intervals("nope") is None
