"""A character tree keyed by byte strings with a compact binary form."""

from __future__ import annotations

from typing import Any, Callable, List, Optional

from .serial import encode_varint, varint_length


class WordTree:
    """Tree of byte keys; each node may hold one element.

    Children are kept in descending order of their character.  The
    serialized node is a fixed-width counter (child count with the top
    bit flagging a stored element), then for each child its character,
    its encoded length and its body, then the encoded element.
    """

    def __init__(
        self,
        factory: Callable[[], Any],
        encode: Callable[[Any], bytes],
        counter_size: int = 1,
        char: int = 0,
    ) -> None:
        self._factory = factory
        self._encode = encode
        self._counter_size = counter_size
        self.char = char
        self._nested: List["WordTree"] = []
        self._data: Optional[Any] = None
        self._has_data = False
        self._length = 0

    def insert(self, key: bytes) -> Any:
        """Return the element stored under ``key``, creating it if absent."""
        node = self
        for ch in bytes(key):
            node = node._child(ch, create=True)
        if not node._has_data:
            node._data = node._factory()
            node._has_data = True
        return node._data

    def search(self, key: bytes) -> Optional[Any]:
        """Return the element stored under ``key`` or None."""
        node: Optional[WordTree] = self
        for ch in bytes(key):
            node = node._child(ch, create=False)
            if node is None:
                return None
        return node._data if node._has_data else None

    def _child(self, ch: int, create: bool) -> Optional["WordTree"]:
        pos = 0
        while pos < len(self._nested) and self._nested[pos].char > ch:
            pos += 1
        if pos < len(self._nested) and self._nested[pos].char == ch:
            return self._nested[pos]
        if not create:
            return None
        node = WordTree(self._factory, self._encode, self._counter_size, ch)
        self._nested.insert(pos, node)
        return node

    def _counter(self) -> bytes:
        upper = 1 << (self._counter_size * 8 - 1)
        count = len(self._nested)
        if count >= upper:
            raise ValueError("too many nested nodes for the counter size")
        value = count | (upper if self._has_data else 0)
        return value.to_bytes(self._counter_size, "little")

    def buffer_length(self) -> int:
        """Compute (and remember) the serialized size of this tree."""
        length = self._counter_size
        for node in self._nested:
            sublen = node.buffer_length()
            length += varint_length(sublen) + sublen + 1
        if self._has_data:
            length += len(self._encode(self._data))
        self._length = length
        return length

    def serialize(self) -> bytes:
        """Return the binary form of the tree."""
        out = bytearray(self._counter())
        for node in self._nested:
            body = node.serialize()
            out.append(node.char)
            out += encode_varint(len(body))
            out += body
        if self._has_data:
            out += self._encode(self._data)
        return bytes(out)

    def enumerate(self, action: Callable[[Any, int], None], offset: int = 0) -> int:
        """Call ``action(element, offset)`` for every element in serialized order.

        The offset is the position of the element inside the serialized
        tree, plus the starting ``offset``.  Returns the end offset.
        """
        self.buffer_length()
        return self._enumerate(action, offset)

    def _enumerate(self, action: Callable[[Any, int], None], offset: int) -> int:
        offset += self._counter_size
        for node in self._nested:
            offset = node._enumerate(action, offset + 1 + varint_length(node._length))
        if not self._has_data:
            return offset
        action(self._data, offset)
        return offset + len(self._encode(self._data))