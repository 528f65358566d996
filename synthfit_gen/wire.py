"""Minimal protobuf-style wire writer: varints, field tags and length-delimited fields.

Only encoding lives here; the format is decodable by any protobuf reader that knows the
field numbers.
"""
from __future__ import annotations
from typing import Iterable

WIRE_VARINT = 0
WIRE_LENGTH_DELIMITED = 2


def encode_varint(value: int) -> bytes:
    """Unsigned LEB128: 7 data bits per byte, high bit set on all but the last byte."""
    if value < 0:
        raise ValueError(f"varint must be non-negative, got {value}")
    out = bytearray()
    while value > 0x7F:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value & 0x7F)
    return bytes(out)


def encode_tag(field_number: int, wire_type: int) -> bytes:
    return encode_varint((field_number << 3) | wire_type)


def encode_scalar(field_number: int, value: int) -> bytes:
    return encode_tag(field_number, WIRE_VARINT) + encode_varint(value)


def encode_length_delimited(field_number: int, payload: bytes) -> bytes:
    return encode_tag(field_number, WIRE_LENGTH_DELIMITED) + encode_varint(len(payload)) + payload


def encode_packed(field_number: int, values: Iterable[int]) -> bytes:
    """Packed repeated varints: one tag and one length prefix for the whole array."""
    payload = b"".join(encode_varint(int(v)) for v in values)
    return encode_length_delimited(field_number, payload)


class MessageWriter:
    """Accumulates encoded fields in call order."""

    def __init__(self):
        self._buf = bytearray()

    def scalar(self, field_number: int, value: int) -> "MessageWriter":
        self._buf += encode_scalar(field_number, value)
        return self

    def packed(self, field_number: int, values: Iterable[int]) -> "MessageWriter":
        self._buf += encode_packed(field_number, values)
        return self

    def to_bytes(self) -> bytes:
        return bytes(self._buf)
