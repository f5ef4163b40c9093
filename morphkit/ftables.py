"""Reading compiled inflexion tables: stripping inflexions and character ranges."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Tuple


@dataclass(frozen=True)
class GramLevels:
    """Grammatical masks for up to three nested inflexion levels."""

    levels: Tuple[int, int, int]

    def __getitem__(self, level: int) -> int:
        return self.levels[level]

    def up_levels(self, level: int) -> int:
        """Combined mask of all levels above ``level``."""
        bits = 0
        for mask in self.levels[level + 1:]:
            bits |= mask
        return bits


def noun_levels() -> GramLevels:
    """Levels for nouns: one level covering the whole grammatical word."""
    return GramLevels((0xFFFF, 0, 0))


def verb_levels() -> GramLevels:
    """Levels for verbs: form bits, time/person bits, reflexive bit."""
    return GramLevels((0x007F, 0x7F80, 0x8000))


@dataclass(frozen=True)
class _Entry:
    flags: int
    grinfo: int
    tail: bytes  # length byte followed by the characters, as stored
    next: int


def _word(data: Sequence[int], pos: int) -> int:
    return data[pos] | (data[pos + 1] << 8)


def _entries(tables: bytes, tfoffs: int) -> Iterator[_Entry]:
    pos = tfoffs << 1
    if pos >= len(tables):
        raise ValueError("inflexion table offset out of range")
    count = tables[pos] & 0x7F
    pos += 1
    for _ in range(count):
        if pos + 4 > len(tables):
            raise ValueError("truncated inflexion table")
        flags = tables[pos]
        grinfo = _word(tables, pos + 1)
        length = tables[pos + 3]
        end = pos + 4 + length
        if end > len(tables):
            raise ValueError("truncated inflexion table")
        tail = bytes(tables[pos + 3:end])
        pos = end
        nxt = 0
        if flags & 0xC0:
            if pos + 2 > len(tables):
                raise ValueError("truncated inflexion table")
            nxt = _word(tables, pos)
            pos += 2
        yield _Entry(flags, grinfo, tail, nxt)


def string_has_tail(stem: bytes, tail: bytes) -> bool:
    """Check whether ``stem`` ends with a stored tail (length byte, then chars)."""
    length = 0x0F & tail[0]
    return length <= len(stem) and stem[len(stem) - length:] == tail[1:1 + length]


def get_min_max_char(tables: bytes, tfoffs: int) -> Tuple[int, int]:
    """Lowest and highest first characters of the tails reachable from a table."""
    lower = 0x100
    upper = -1
    for entry in _entries(tables, tfoffs):
        length = entry.tail[0]
        if length > 0:
            lower = min(entry.tail[1], lower)
            upper = max(entry.tail[1], upper)
        elif not entry.flags & 0x80:
            lower = 0
            upper = upper if upper >= 0 else 0
        else:
            low, high = get_min_max_char(tables, entry.next)
            lower = min(lower, low)
            upper = max(upper, high)
    return lower & 0xFF, upper & 0xFF


class FlexStripper:
    """Removes the inflexion matching a grammatical description from a word."""

    def __init__(self, levels: GramLevels, tables: bytes) -> None:
        self.levels = levels
        self.tables = bytes(tables)

    def strip(self, stem: bytes, grinfo: int, tfoffs: int, level: int = 0) -> Optional[bytes]:
        """Return ``stem`` without its inflexion, or None if no inflexion fits."""
        stem = bytes(stem)
        mask = self.levels[level]
        for entry in _entries(self.tables, tfoffs):
            if (grinfo & mask) != (entry.grinfo & mask):
                continue
            if (grinfo & mask) == 0 and mask != 0xFFFF:
                continue
            if level < 2 and entry.flags & 0x80:
                inner = self.strip(stem, grinfo, entry.next, level)
                if inner is None:
                    continue
                stem = inner
                if string_has_tail(stem, entry.tail):
                    return stem[:len(stem) - entry.tail[0]]
            else:
                if not string_has_tail(stem, entry.tail):
                    continue
                return stem[:len(stem) - entry.tail[0]]
        if level < 2 and self.levels.up_levels(level) != 0:
            return self.strip(stem, grinfo, tfoffs, level + 1)
        return None