from synthfit_gen.seeded import RandomStream
from synthfit_gen.skyline import (BASIS_HR, BASIS_POWER, DEFAULT_POWER_INTENSITY, build_intervals,
                                  encode_skyline)
from synthfit_gen.zones import estimate, estimate_zone_seconds

from conftest import decode_skyline


def _per_zone(fields):
    totals = {}
    for dur, zone in zip(fields[2], fields[4]):
        totals[zone] = totals.get(zone, 0) + dur
    return totals


def test_payload_decodes_to_zone_totals():
    zones = estimate(5400, 7)
    payload = encode_skyline(zones, BASIS_POWER, "demo-2024-01-01-0-skyline")
    fields = decode_skyline(payload)
    assert fields[1] == 7
    assert fields[5] == BASIS_POWER
    assert len(fields[2]) == len(fields[3]) == len(fields[4])
    expected = {i + 1: z.seconds for i, z in enumerate(zones) if z.seconds >= 10}
    assert _per_zone(fields) == expected


def test_hr_basis_and_small_zones_skipped():
    secs = [5, 1200, 9, 700, 0]
    fields = decode_skyline(encode_skyline(secs, BASIS_HR, "hr"))
    assert fields[1] == 5 and fields[5] == BASIS_HR
    assert set(fields[4]) == {2, 4}


def test_block_count_capped_at_three():
    ivs = build_intervals([7200], RandomStream("blocks"), DEFAULT_POWER_INTENSITY)
    assert len(ivs) == 3
    assert sum(iv.duration for iv in ivs) == 7200
    assert len(build_intervals([900], RandomStream("blocks"), DEFAULT_POWER_INTENSITY)) == 1
    assert len(build_intervals([300], RandomStream("blocks"), DEFAULT_POWER_INTENSITY)) == 1


def test_intensity_jitter_range():
    ivs = build_intervals(estimate_zone_seconds(36000, 7), RandomStream("jit"), DEFAULT_POWER_INTENSITY)
    for iv in ivs:
        assert abs(iv.intensity - DEFAULT_POWER_INTENSITY[iv.zone - 1]) <= 3


def test_same_seed_same_payload():
    zones = estimate(3600, 5)
    assert encode_skyline(zones, BASIS_HR, "s") == encode_skyline(zones, BASIS_HR, "s")


def test_empty_input_gives_none():
    assert encode_skyline([], BASIS_POWER, "empty") is None
    assert encode_skyline([3, 4, 9], BASIS_HR, "tiny") is None
