"""Variable-length integer and byte-string encoding used by the binary tables."""

from __future__ import annotations

from typing import Tuple


def varint_length(value: int) -> int:
    """Number of bytes needed to encode a non-negative integer."""
    if value < 0:
        raise ValueError("negative values cannot be encoded")
    length = 1
    while value >= 0x80:
        value >>= 7
        length += 1
    return length


def encode_varint(value: int) -> bytes:
    """Encode a non-negative integer, seven bits per byte, low bits first."""
    if value < 0:
        raise ValueError("negative values cannot be encoded")
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def decode_varint(data: bytes, pos: int = 0) -> Tuple[int, int]:
    """Decode an integer at ``pos``; return it and the position after it."""
    value = 0
    shift = 0
    while True:
        if pos >= len(data):
            raise ValueError("truncated integer")
        byte = data[pos]
        pos += 1
        value |= (byte & 0x7F) << shift
        if byte < 0x80:
            return value, pos
        shift += 7


def encode_bytes(data: bytes) -> bytes:
    """Encode a byte string as its length followed by its content."""
    return encode_varint(len(data)) + bytes(data)


def decode_bytes(data: bytes, pos: int = 0) -> Tuple[bytes, int]:
    """Decode a length-prefixed byte string; return it and the next position."""
    length, pos = decode_varint(data, pos)
    end = pos + length
    if end > len(data):
        raise ValueError("truncated byte string")
    return bytes(data[pos:end]), end