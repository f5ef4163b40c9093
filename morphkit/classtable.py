"""A table of unique serializable classes addressed by their byte offsets."""

from __future__ import annotations

from typing import Any, List, Tuple

_MAX_OFFSET = 0xFFFF


def _encoded(item: Any) -> bytes:
    if isinstance(item, (bytes, bytearray, memoryview)):
        return bytes(item)
    return item.serialize()


class ClassTable:
    """Stores each distinct class once and returns its offset in the table."""

    def __init__(self) -> None:
        self._classes: List[Tuple[Any, int]] = []
        self._length = 0

    def add_class(self, item: Any) -> int:
        """Add ``item`` if new and return its offset."""
        for known, offset in self._classes:
            if known == item:
                return offset
        offset = self._length
        new_length = offset + len(_encoded(item))
        if new_length > _MAX_OFFSET:
            raise OverflowError("class offset is too big")
        self._classes.append((item, offset))
        self._length = new_length
        return offset

    def buffer_length(self) -> int:
        """Total size of all stored classes."""
        return self._length

    def serialize(self) -> bytes:
        """Concatenate the binary forms of all classes in insertion order."""
        return b"".join(_encoded(item) for item, _ in self._classes)