"""Index of inflexion table names to their offsets."""

from __future__ import annotations

from typing import Dict, Iterator, Mapping, Optional, Union

from .serial import decode_bytes, decode_varint, encode_bytes, encode_varint

Key = Union[str, bytes]


def _key(key: Key) -> str:
    return key.decode("cp1251") if isinstance(key, bytes) else key


class TableIndex:
    """Maps table names to offsets; unknown names map to 0."""

    def __init__(self, entries: Optional[Mapping[Key, int]] = None) -> None:
        self._entries: Dict[str, int] = {}
        for key, value in (entries or {}).items():
            self._entries[_key(key)] = int(value)

    def __getitem__(self, key: Key) -> int:
        return self._entries.get(_key(key), 0)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, (str, bytes)):
            return False
        return _key(key) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._entries))

    @classmethod
    def load(cls, data: bytes) -> "TableIndex":
        """Read an index from its binary form."""
        count, pos = decode_varint(data, 0)
        entries: Dict[Key, int] = {}
        for _ in range(count):
            name, pos = decode_bytes(data, pos)
            value, pos = decode_varint(data, pos)
            entries[name] = value
        return cls(entries)

    def dump(self) -> bytes:
        """Return the binary form: count, then name and offset pairs in key order."""
        out = bytearray(encode_varint(len(self._entries)))
        for name in sorted(self._entries, key=lambda k: k.encode("cp1251")):
            out += encode_bytes(name.encode("cp1251"))
            out += encode_varint(self._entries[name])
        return bytes(out)