import numpy as np
import pytest

from synthfit_gen.config import FixtureConfig
from synthfit_gen.streams import StreamSynthesizer, integrate_distance, sample_count, stream_types_for


@pytest.fixture(scope="module")
def synth():
    return StreamSynthesizer(FixtureConfig())


def _ride(**kw):
    act = {"id": "demo-x", "type": "Ride", "distance": 30000, "moving_time": 4500, "average_speed": 30000 / 4500,
           "average_heartrate": 140, "average_watts": 180, "average_cadence": 88, "total_elevation_gain": 150,
           "icu_ftp": 250}
    act.update(kw)
    act["stream_types"] = stream_types_for(act["type"], True, act["distance"])
    return act


def test_sample_count_bounds():
    cfg = FixtureConfig()
    assert sample_count(60, cfg) == 100
    assert sample_count(4500, cfg) == 900
    assert sample_count(100000, cfg) == 1000
    assert sample_count(0, cfg) == 0


def test_integrate_distance_hits_total():
    t = np.arange(0, 500, 5, dtype=float)
    v = np.full(len(t), 3.0)
    d = integrate_distance(v, t, 1234.0)
    assert d[0] == 0
    assert d[-1] == pytest.approx(1234.0)
    assert np.all(np.diff(d) >= 0)


def test_ride_streams_shape(synth):
    coords = [(46.0 + i * 1e-4, 7.0 + i * 1e-4) for i in range(200)]
    s = synth.synthesize(_ride(), coords, "demo-x-streams")
    n = len(s["time"])
    assert n == 900
    assert all(len(v) == n for v in s.values())
    assert list(s) == _ride()["stream_types"]
    assert abs(s["distance"][-1] - 30000) <= 1
    assert np.all(np.diff(s["distance"]) >= 0)
    assert all(80 <= h <= 200 for h in s["heartrate"])
    assert min(s["watts"]) >= 50
    assert all(60 <= c <= 120 for c in s["cadence"])
    assert s["grade_smooth"][0] == 0
    assert max(abs(g) for g in s["grade_smooth"]) <= 25


def test_run_cadence_in_steps_per_minute(synth):
    act = _ride(type="Run", distance=5000, moving_time=1500, average_speed=5000 / 1500, average_cadence=170,
                average_watts=None)
    s = synth.synthesize(act, [(0.0, 0.0), (0.001, 0.001)], "run")
    assert "watts" not in s
    assert all(150 <= c <= 190 for c in s["cadence"])
    assert abs(s["distance"][-1] - 5000) <= 1


def test_no_route_no_latlng(synth):
    act = {"id": "pool", "type": "Swim", "distance": 2500, "moving_time": 3000, "average_heartrate": 130,
           "stream_types": stream_types_for("Swim", False, 2500)}
    s = synth.synthesize(act, None, "pool")
    assert "latlng" not in s
    assert set(s) == {"time", "heartrate", "distance"}


def test_time_is_monotonic_and_deterministic(synth):
    a = synth.synthesize(_ride(), None, "same")
    b = synth.synthesize(_ride(), None, "same")
    assert a == b
    assert np.all(np.diff(a["time"]) > 0)


def test_zero_moving_time_does_not_raise(synth):
    s = synth.synthesize(_ride(moving_time=0, distance=0), None, "zero")
    assert s == {"time": []}
