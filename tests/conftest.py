import base64

import pytest

from synthfit_gen import FixtureConfig, initialize

REFERENCE_DATE = "2024-06-15"


@pytest.fixture(scope="session")
def cfg():
    return FixtureConfig()


@pytest.fixture(scope="session")
def repo(cfg):
    """One full year ending 2024-06-15, shared by the read-only query tests."""
    return initialize(REFERENCE_DATE, cfg)


def read_varint(buf: bytes, pos: int):
    shift = value = 0
    while True:
        b = buf[pos]
        pos += 1
        value |= (b & 0x7F) << shift
        if not b & 0x80:
            return value, pos
        shift += 7


def decode_skyline(payload: str) -> dict:
    """Tiny reader for skyline payloads: {field_number: int | list[int]}."""
    raw = base64.b64decode(payload)
    fields = {}
    pos = 0
    while pos < len(raw):
        tag, pos = read_varint(raw, pos)
        field, wire = tag >> 3, tag & 7
        if wire == 0:
            fields[field], pos = read_varint(raw, pos)
        elif wire == 2:
            length, pos = read_varint(raw, pos)
            end = pos + length
            values = []
            while pos < end:
                v, pos = read_varint(raw, pos)
                values.append(v)
            fields[field] = values
        else:
            raise AssertionError(f"unexpected wire type {wire}")
    return fields
