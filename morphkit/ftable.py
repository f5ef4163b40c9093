"""Inflexion tables as compiled from table sources, with relocation and storage."""

from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Union

from .serial import encode_bytes, encode_varint
from .textutil import trim

_MAGIC = b"inflex"
_REFERENCE_FLAGS = 0xC0
_MAX_OFFSET = 0x1FFFF

Name = Union[str, bytes]


def _to_bytes(value: Name) -> bytes:
    if isinstance(value, str):
        return value.encode("cp1251", errors="replace")
    return bytes(value)


@dataclass(order=True)
class FlexItem:
    """One inflexion: its tail, grammatical info, flags and an optional reference.

    Items order by tail, then grammatical info, then flags, then the name
    of the referenced table; the resolved offset takes no part in it.
    """

    tail: bytes = b""
    grinfo: int = 0
    bflags: int = 0
    next: bytes = b""
    ofnext: int = field(default=0, compare=False)

    def __post_init__(self) -> None:
        self.tail = _to_bytes(self.tail)
        self.next = _to_bytes(self.next)

    def _has_reference(self) -> bool:
        return (self.bflags & _REFERENCE_FLAGS) != 0

    def buffer_length(self) -> int:
        """Size of the serialized item."""
        length = 1 + 2 + len(encode_bytes(self.tail))
        return length + 2 if self._has_reference() else length

    def serialize(self) -> bytes:
        """Flags byte, info word (little endian), tail, and the offset if referenced."""
        out = bytearray([self.bflags & 0xFF])
        out += (self.grinfo & 0xFFFF).to_bytes(2, "little")
        out += encode_bytes(self.tail)
        if self._has_reference():
            out += (self.ofnext & 0xFFFF).to_bytes(2, "little")
        return bytes(out)


class FlexTable:
    """A sorted set of inflexions with its offset in the compiled tables."""

    def __init__(self) -> None:
        self._items: List[FlexItem] = []
        self.offset = 0

    def insert(self, item: FlexItem) -> None:
        """Add ``item`` in sorted position unless an equal item is present."""
        pos = bisect_left(self._items, item)
        if pos == len(self._items) or self._items[pos] != item:
            self._items.insert(pos, item)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[FlexItem]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FlexTable):
            return NotImplemented
        return self._items == other._items

    __hash__ = None  # type: ignore[assignment]

    def serialize(self) -> bytes:
        """Item count byte, the items, and a zero byte to keep the size even."""
        if len(self._items) > 0xFF:
            raise ValueError("too many inflexions in one table")
        out = bytearray([len(self._items)])
        for item in self._items:
            out += item.serialize()
        if len(out) & 0x01:
            out.append(0)
        return bytes(out)

    def _relocate(self, offset: int) -> int:
        if offset >= _MAX_OFFSET or offset & 0x01:
            raise ValueError("invalid (not aligned) offset passed to relocation")
        self.offset = offset >> 1
        end = offset + 1 + sum(item.buffer_length() for item in self._items)
        return (end + 1) & ~0x01

    def _resolve(self, owner: "FlexList") -> None:
        for item in self._items:
            if item._has_reference():
                item.ofnext = owner._offset_of(item.next)


class FlexList:
    """The set of unique tables and the names they are known by."""

    def __init__(self) -> None:
        self._tables: List[FlexTable] = []
        self._index: Dict[bytes, int] = {}

    def insert(self, table: FlexTable, index: Name) -> None:
        """Add ``table`` (or reuse an equal one) under the comma-separated names."""
        for pos, known in enumerate(self._tables):
            if known == table:
                break
        else:
            pos = len(self._tables)
            self._tables.append(table)
        for part in _to_bytes(index).split(b","):
            name = trim(part)
            if name:
                self._index.setdefault(name, pos)

    def _offset_of(self, name: bytes) -> int:
        pos = self._index.get(name)
        if pos is None:
            shown = name.decode("cp1251", errors="replace")
            raise ValueError(f"Could not resolve internal reference '{shown}'")
        return self._tables[pos].offset

    def relocate(self) -> None:
        """Assign offsets to all tables and resolve references between them."""
        offset = len(_MAGIC)
        for table in self._tables:
            offset = table._relocate(offset)
        for table in self._tables:
            table._resolve(self)

    def store_tables(self) -> bytes:
        """Binary tables: the magic signature followed by every table."""
        return _MAGIC + b"".join(table.serialize() for table in self._tables)

    def store_references(self) -> bytes:
        """Binary index: the count, then each name and its table offset, by name."""
        out = bytearray(encode_varint(len(self._index)))
        for name in sorted(self._index):
            out += encode_bytes(name)
            out += encode_varint(self._tables[self._index[name]].offset)
        return bytes(out)