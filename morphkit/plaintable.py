"""Expanding nested inflexion tables into one flat tree of inflexions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .serial import encode_varint
from .wordtree import WordTree


@dataclass(frozen=True)
class GramInfo:
    """Grammatical information and flags attached to one inflexion."""

    grinfo: int = 0
    bflags: int = 0

    def buffer_length(self) -> int:
        return 3

    def serialize(self) -> bytes:
        """Two bytes of grammatical info (little endian) and one flag byte."""
        return (self.grinfo & 0xFFFF).to_bytes(2, "little") + bytes([self.bflags & 0xFF])


def _encode_grams(grams: List[GramInfo]) -> bytes:
    return encode_varint(len(grams)) + b"".join(g.serialize() for g in grams)


def _word(data: bytes, pos: int) -> int:
    return data[pos] | (data[pos + 1] << 8)


class FlexTree:
    """Builds the flat inflexion tree for a table of the compiled tables."""

    def __init__(self, tables: bytes) -> None:
        self.tables = bytes(tables)

    def build(self, tfoffs: int) -> bytes:
        """Return the serialized flat tree for the table at ``tfoffs``."""
        tree = WordTree(list, _encode_grams)
        self._fill(tree, tfoffs, 0, 0xFF, b"")
        return tree.serialize()

    def __call__(self, tfoffs: int) -> bytes:
        return self.build(tfoffs)

    def _fill(self, tree: WordTree, tfoffs: int, grinfo: int, bflags: int, prefix: bytes) -> None:
        data = self.tables
        pos = tfoffs << 1
        try:
            count = data[pos]
            pos += 1
            for _ in range(count):
                flags = data[pos]
                info = _word(data, pos + 1)
                length = data[pos + 3]
                tail = data[pos + 4:pos + 4 + length]
                if len(tail) != length:
                    raise ValueError("truncated inflexion table")
                pos += 4 + length
                nxt = 0
                if flags & 0xC0:
                    nxt = _word(data, pos)
                    pos += 2
                key = prefix + tail
                if not flags & 0x80:
                    grams = tree.insert(key)
                    gram = GramInfo(grinfo | info, bflags & flags)
                    if gram not in grams:
                        grams.append(gram)
                if nxt != 0:
                    self._fill(tree, nxt, grinfo | info, bflags & flags, key)
        except IndexError as exc:
            raise ValueError("truncated inflexion table") from exc


def create_plain_table(tables: bytes, offset: int) -> bytes:
    """Serialized flat inflexion tree for the table at ``offset``."""
    return FlexTree(tables)(offset)